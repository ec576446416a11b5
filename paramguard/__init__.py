# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""paramguard - declarative validation of call arguments.

Mark a callable with :func:`validate` and its parameters with :class:`Validator`;
every call then validates the marked arguments against pydantic schemas and
raises :class:`ValidationError` before the body runs if anything fails.
"""

from .decorator import intercept, validate
from .exceptions import ConfigurationError, ParamGuardError, ValidationError
from .registry import (
    ParameterRegistry,
    ParameterTarget,
    Validator,
    describe_parameter,
    get_registry,
)
from .validation import ABSENT, ConstraintEngine, ValidationViolation, get, resolve

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "ConfigurationError",
    "ConstraintEngine",
    "ParamGuardError",
    "ParameterRegistry",
    "ParameterTarget",
    "ValidationError",
    "ValidationViolation",
    "Validator",
    "describe_parameter",
    "get",
    "get_registry",
    "intercept",
    "resolve",
    "validate",
]
