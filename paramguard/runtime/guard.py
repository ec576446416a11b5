# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Helper functions used by the call interceptor."""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from types import ModuleType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from ..registry import ParameterTarget
from ..validation import ABSENT, ConstraintEngine, ValidationResult, ValidationViolation, resolve
from .input_validation import get_constraint_engine

logger = logging.getLogger(__name__)

IS_ARRAY_MESSAGE = "input param must be array"

_BOUND_NAMES = ("self", "cls")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _as_record(value: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(value, Mapping):
        return value
    if isinstance(value, BaseModel):
        return {name: getattr(value, name) for name in type(value).model_fields}
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in fields(value)}
    if isinstance(value, (type, ModuleType)):
        return None
    attributes = getattr(value, "__dict__", None)
    if isinstance(attributes, Mapping):
        return {name: item for name, item in attributes.items() if not name.startswith("_")}
    return None


def build_argument_context(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge every record-like argument into one mapping, later keys winning.

    Path overrides are looked up in this mapping. Mappings, pydantic models,
    dataclass instances and the public attributes of plain objects all
    contribute. The bound ``self``/``cls`` of a method and scalars do not.
    """
    context: Dict[str, Any] = {}
    for position, (name, value) in enumerate(arguments.items()):
        if position == 0 and name in _BOUND_NAMES:
            continue
        record = _as_record(value)
        if record is not None:
            context.update(record)
    return context


def _missing(target: ParameterTarget, context: Any) -> ValidationViolation:
    return ValidationViolation(
        target=context,
        property=target.label,
        constraints={"isDefined": f"property {target.label} is missing"},
    )


def _not_array(target: ParameterTarget, candidate: Any) -> ValidationViolation:
    return ValidationViolation(
        target=None if candidate is ABSENT else candidate,
        property=target.name,
        constraints={"isArray": IS_ARRAY_MESSAGE},
    )


def validate_target(
    target: ParameterTarget,
    arguments: Mapping[str, Any],
    context: Mapping[str, Any],
    engine: ConstraintEngine,
) -> List[ValidationViolation]:
    """Validate one marked parameter and return its violations in order."""

    if target.path:
        candidate = resolve(context, target.path)
        owner: Any = context
    else:
        candidate = arguments.get(target.name, ABSENT)
        owner = dict(arguments)

    is_sequence = _is_sequence(candidate)
    if target.array is not None:
        array_mode = target.array
    else:
        # Only an explicit schema lets the runtime value choose array mode.
        array_mode = target.explicit_schema and is_sequence

    if array_mode:
        if not is_sequence:
            return [_not_array(target, candidate)]
        violations: List[ValidationViolation] = []
        for position, element in enumerate(candidate):
            violations.extend(
                engine.validate(target.schema, element, root_property=f"{target.label}.{position}")
            )
        return violations

    if candidate is ABSENT or candidate is None:
        return [_missing(target, owner)]

    return engine.validate(target.schema, candidate, root_property=target.label)


def collect_violations(
    targets: Sequence[ParameterTarget],
    arguments: Mapping[str, Any],
    engine: Optional[ConstraintEngine] = None,
) -> ValidationResult:
    """Validate every marked parameter of one call.

    All targets are checked even after the first failure so the caller sees the
    complete set of violations. Order is parameter order, then per-parameter
    order as produced by :func:`validate_target`.
    """
    engine = engine or get_constraint_engine()
    result = ValidationResult()
    if not targets:
        return result

    context = build_argument_context(arguments)
    for target in targets:
        if target.schema is None:
            logger.warning(
                "Parameter '%s' has no schema registered; skipping its validation", target.name
            )
            continue
        result.extend(validate_target(target, arguments, context, engine))
    return result


__all__ = [
    "IS_ARRAY_MESSAGE",
    "build_argument_context",
    "collect_violations",
    "validate_target",
]
