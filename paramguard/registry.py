# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Per-callable store of the parameters marked for validation."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Validator:
    """Parameter-level marker describing how to validate one argument.

    :param schema: Optional. The schema to validate against. When omitted it is
                   inferred from the parameter's annotation.
    :param path: Optional. Dotted path looked up in the merged mapping of all
                 call arguments instead of taking the argument itself.
    :param each: Optional. ``True`` forces array mode, ``False`` forbids it.
                 Left as ``None``, the annotation decides, and failing that
                 the runtime value does.

    .. code-block:: python

        from typing import Annotated
        from paramguard import Validator, validate

        class Users:
            @validate
            def create(self, body: Annotated[UserDto, Validator()]): ...

            @validate
            def create_from_request(self, req: Annotated[dict, Validator(UserDto, "body")]): ...

            @validate
            def import_many(self, rows: Annotated[list[UserDto], Validator()]): ...
    """

    schema: Any = None
    path: Optional[str] = None
    each: Optional[bool] = None


@dataclass(frozen=True)
class ParameterTarget:
    """Registered description of one marked parameter."""

    index: int
    name: str
    schema: Any
    path: Optional[str] = None
    array: Optional[bool] = None
    explicit_schema: bool = False

    @property
    def label(self) -> str:
        """Name used in synthesized violations for this parameter."""
        return self.path or self.name


ParameterKey = Union[int, str]


def describe_parameter(
    parameter: ParameterKey,
    schema: Any = None,
    path: Optional[str] = None,
    *,
    each: Optional[bool] = None,
) -> Tuple[ParameterKey, Validator]:
    """Build a ``(parameter, Validator)`` pair for the ``parameters=`` argument of ``validate``.

    *parameter* is either the zero-based position of the parameter in the
    callable's signature (``self`` included) or its name.
    """
    return parameter, Validator(schema=schema, path=path, each=each)


class ParameterRegistry:
    """Map opaque callable ids to the descriptors of their marked parameters.

    Registration normally happens once, while a callable is being decorated;
    every intercepted call then reads the descriptors. Both sides go through
    one lock so a call never observes a half-registered callable.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._entries: Dict[str, Dict[int, ParameterTarget]] = {}
        self._counter = itertools.count(1)

    def new_callable_id(self, func: Callable) -> str:
        """Assign an id that is unique within this registry."""
        module = getattr(func, "__module__", None) or "<unknown>"
        qualname = getattr(func, "__qualname__", None) or repr(func)
        with self._lock:
            return f"{module}.{qualname}#{next(self._counter)}"

    def register(
        self,
        callable_id: str,
        index: int,
        options: Optional[Validator] = None,
        *,
        name: Optional[str] = None,
        schema: Any = None,
        array: Optional[bool] = None,
    ) -> ParameterTarget:
        """Record the descriptor for parameter *index* of *callable_id*.

        ``options.schema`` wins over the inferred *schema*, and ``options.each``
        over the inferred *array* flag. Registering the same index twice keeps
        the last descriptor.
        """
        options = options or Validator()
        explicit = options.schema is not None
        target = ParameterTarget(
            index=index,
            name=name if name is not None else str(index),
            schema=options.schema if explicit else schema,
            path=options.path,
            array=options.each if options.each is not None else array,
            explicit_schema=explicit,
        )

        with self._lock:
            entry = self._entries.setdefault(callable_id, {})
            if index in entry:
                logger.debug("Replacing descriptor for %s parameter %d", callable_id, index)
            entry[index] = target

        logger.debug("Registered %r for %s", target, callable_id)
        return target

    def lookup(self, callable_id: str) -> Tuple[ParameterTarget, ...]:
        """Return the descriptors of *callable_id* ordered by parameter index."""
        with self._lock:
            entry = self._entries.get(callable_id)
            if not entry:
                return ()
            return tuple(entry[index] for index in sorted(entry))

    def forget(self, callable_id: str) -> None:
        with self._lock:
            self._entries.pop(callable_id, None)

    def __contains__(self, callable_id: object) -> bool:
        with self._lock:
            return callable_id in self._entries


_DEFAULT_REGISTRY = ParameterRegistry()


def get_registry() -> ParameterRegistry:
    """Return the process-wide registry used when none is passed explicitly."""
    return _DEFAULT_REGISTRY


__all__ = [
    "ParameterKey",
    "ParameterRegistry",
    "ParameterTarget",
    "Validator",
    "describe_parameter",
    "get_registry",
]
