# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validation package - path lookup and constraint checking of arguments.

This package is pure: it inspects values and reports violations but never
raises on bad input data and never modifies the values it is given.
"""

from .base import ValidationResult, ValidationViolation
from .engine import ConstraintEngine
from .paths import ABSENT, get, resolve

__all__ = [
    "ABSENT",
    "ConstraintEngine",
    "ValidationResult",
    "ValidationViolation",
    "get",
    "resolve",
]
