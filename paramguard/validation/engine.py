# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Adapter around pydantic that turns its errors into violation records.

Schemas are anything :class:`pydantic.TypeAdapter` understands: ``BaseModel``
subclasses, dataclasses and ``TypedDict`` classes. Rule keys and messages are
passed through from pydantic untouched; a schema that wants its own key raises
``PydanticCustomError("isEmail", "name must be an email")`` from a validator.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Dict, List, Mapping, Optional

import pydantic
from pydantic import BaseModel, TypeAdapter

from ..exceptions import ConfigurationError
from .base import ValidationViolation

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=512)
def _adapter_for(schema: Any) -> TypeAdapter:
    try:
        return TypeAdapter(schema)
    except (pydantic.PydanticSchemaGenerationError, pydantic.PydanticUserError, TypeError) as exc:
        raise ConfigurationError(f"Cannot build a validation schema from {schema!r}: {exc}") from exc


def schema_name(schema: Any) -> str:
    return getattr(schema, "__name__", None) or repr(schema)


def _property_for(loc, root_property: Optional[str], schema: Any) -> str:
    if not loc:
        return root_property or schema_name(schema)
    return ".".join(str(part) for part in loc)


class ConstraintEngine:
    """Validate candidate objects against pydantic-described schemas."""

    def adapter(self, schema: Any) -> TypeAdapter:
        """Return the cached adapter for *schema*, raising ConfigurationError if unusable."""
        try:
            return _adapter_for(schema)
        except TypeError as exc:
            # Unhashable schema objects cannot be cached.
            raise ConfigurationError(f"Schema {schema!r} is not a class or type: {exc}") from exc

    def validate(
        self,
        schema: Any,
        candidate: Any,
        *,
        root_property: Optional[str] = None,
    ) -> List[ValidationViolation]:
        """Return the violations of *candidate* against *schema*, in a stable order.

        Failures of the same property are merged into one record whose
        constraints keep pydantic's error order. An empty list means the
        candidate conforms.
        """
        adapter = self.adapter(schema)

        try:
            if isinstance(candidate, BaseModel):
                adapter.validate_python(candidate.model_dump(by_alias=True))
            elif isinstance(candidate, Mapping):
                adapter.validate_python(dict(candidate))
            else:
                adapter.validate_python(candidate, from_attributes=True)
        except pydantic.ValidationError as exc:
            return self._violations_from(exc, candidate, root_property, schema)

        return []

    def _violations_from(
        self,
        exc: pydantic.ValidationError,
        candidate: Any,
        root_property: Optional[str],
        schema: Any,
    ) -> List[ValidationViolation]:
        grouped: Dict[str, Dict[str, str]] = {}
        for error in exc.errors(include_url=False):
            prop = _property_for(error.get("loc", ()), root_property, schema)
            rules = grouped.setdefault(prop, {})
            rules.setdefault(error["type"], error["msg"])

        logger.debug(
            "Schema %s rejected candidate with %d failing propert%s",
            schema_name(schema),
            len(grouped),
            "y" if len(grouped) == 1 else "ies",
        )
        return [
            ValidationViolation(target=candidate, property=prop, constraints=rules)
            for prop, rules in grouped.items()
        ]


__all__ = ["ConstraintEngine", "schema_name"]
