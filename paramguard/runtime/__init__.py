"""Runtime helpers used by the :func:`paramguard.validate` decorator."""

from .guard import build_argument_context, collect_violations, validate_target
from .input_validation import format_validation_reason, get_constraint_engine

__all__ = [
    "build_argument_context",
    "collect_violations",
    "format_validation_reason",
    "get_constraint_engine",
    "validate_target",
]
