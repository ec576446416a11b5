# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy raised by the paramguard runtime."""

from __future__ import annotations

from typing import Any, List, Sequence


class ParamGuardError(Exception):
    """Base class for all paramguard errors."""


class ConfigurationError(ParamGuardError):
    """Raised when a validation marker cannot be applied to a callable.

    Typical causes are a marker that names a parameter the callable does not
    declare, or a parameter whose schema can be neither read from the marker
    nor inferred from its annotation while strict mode is on.
    """


class ValidationError(ParamGuardError):
    """Raised by an intercepted call when any marked argument fails validation.

    The original callable is never entered when this error is raised. Callers
    branch on :attr:`validation_errors`, whose records carry the property name
    and the rule keys exactly as the constraint engine reported them::

        try:
            service.create(payload)
        except ValidationError as error:
            for violation in error.validation_errors:
                if "isDefined" in violation.constraints:
                    ...
    """

    MESSAGE = "Validation Error"

    def __init__(self, validation_errors: Sequence[Any]):
        self.message = self.MESSAGE
        self.validation_errors: List[Any] = (
            validation_errors if isinstance(validation_errors, list) else list(validation_errors)
        )
        super().__init__(self.message)

    @property
    def validationErrors(self) -> List[Any]:  # noqa: N802
        """Alias kept for callers ported from camelCase APIs."""
        return self.validation_errors

    def __str__(self) -> str:
        from .runtime.input_validation import format_validation_reason

        return format_validation_reason(None, self.validation_errors)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(validation_errors={self.validation_errors!r})"


__all__ = [
    "ParamGuardError",
    "ConfigurationError",
    "ValidationError",
]
