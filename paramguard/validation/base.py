# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Shared data structures for argument validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping


@dataclass(frozen=True)
class ValidationViolation:
    """A failed field of one validated object.

    ``constraints`` maps each failed rule key (``"isEmail"``, ``"isDefined"``,
    ``"string_too_short"``, ...) to its human-readable message.
    """

    target: Any
    property: str
    constraints: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(self, "constraints", MappingProxyType(dict(self.constraints)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "property": self.property,
            "constraints": dict(self.constraints),
        }


@dataclass
class ValidationResult:
    """Outcome of validating every marked argument of one call."""

    violations: List[ValidationViolation] = field(default_factory=list)

    @property
    def allowed(self) -> bool:
        return not self.violations

    def extend(self, violations: Iterable[ValidationViolation]) -> None:
        self.violations.extend(violations)


__all__ = ["ValidationViolation", "ValidationResult"]
