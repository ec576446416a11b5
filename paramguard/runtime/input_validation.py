# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Runtime helpers for declarative argument validation."""

from __future__ import annotations

from typing import Final, Iterable, Optional

from ..validation import ConstraintEngine


_ENGINE: Final[ConstraintEngine] = ConstraintEngine()


def get_constraint_engine() -> ConstraintEngine:
    """Return the process-wide constraint engine instance."""

    return _ENGINE


def format_validation_reason(callable_id: Optional[str], violations: Iterable) -> str:
    """Produce a human-readable summary of validation failures."""

    header = "Validation Error"
    if callable_id:
        header = f"{header} in '{callable_id}'"
    lines = [f"{header}:" if violations else header]
    for violation in violations:
        for rule, message in violation.constraints.items():
            lines.append(f" - {violation.property}: {message} [{rule}]")
    return "\n".join(lines)


__all__ = [
    "format_validation_reason",
    "get_constraint_engine",
]
