# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

# paramguard/decorator.py

import collections.abc
import dataclasses
import functools
import inspect
import logging
import time
import types
import typing
from typing import Annotated, Any, Callable, Iterable, Mapping, Optional, Tuple, Union

import typing_extensions
from pydantic import BaseModel

from .config import strict_mode
from .exceptions import ConfigurationError, ValidationError
from .registry import ParameterKey, ParameterRegistry, Validator, get_registry
from .runtime import collect_violations, format_validation_reason
from .telemetry import record_validation, start_span

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)

_BOUND_NAMES = ("self", "cls")

ParametersSpec = Union[
    Mapping[ParameterKey, Any],
    Iterable[Tuple[ParameterKey, Any]],
]


def _is_schema(candidate: Any) -> bool:
    # Parametrised generics such as list[Model] pass isinstance(..., type) on some versions.
    if typing.get_origin(candidate) is not None or not isinstance(candidate, type):
        return False
    return (
        issubclass(candidate, BaseModel)
        or dataclasses.is_dataclass(candidate)
        or typing_extensions.is_typeddict(candidate)
    )


def _strip_annotated(annotation: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if typing.get_origin(annotation) is Annotated:
        return annotation.__origin__, tuple(annotation.__metadata__)
    return annotation, ()


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = typing.get_args(annotation)
        remaining = [arg for arg in args if arg is not type(None)]
        if len(remaining) == 1:
            return remaining[0]
    return annotation


def _sequence_element(annotation: Any) -> Tuple[bool, Any]:
    """Return ``(is_sequence, element_annotation)`` for a list-like annotation."""
    if annotation in _SEQUENCE_ORIGINS:
        return True, None
    origin = typing.get_origin(annotation)
    if origin not in _SEQUENCE_ORIGINS:
        return False, None
    args = typing.get_args(annotation)
    if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
        return False, None
    return True, (args[0] if args else None)


def infer_shape(annotation: Any) -> Tuple[Any, Optional[bool]]:
    """Infer ``(schema, array)`` from a parameter annotation.

    ``Model`` gives ``(Model, False)``; ``list[Model]``, ``Sequence[Model]`` and
    ``tuple[Model, ...]`` give ``(Model, True)``. A bare sequence type gives
    ``(None, True)`` and anything else ``(None, None)``.
    """
    annotation, _ = _strip_annotated(annotation)
    annotation, _ = _strip_annotated(_unwrap_optional(annotation))

    if _is_schema(annotation):
        return annotation, False

    is_sequence, element = _sequence_element(annotation)
    if is_sequence:
        element, _ = _strip_annotated(element)
        return (element if _is_schema(element) else None), True

    return None, None


def _metadata_of(annotation: Any) -> Tuple[Any, ...]:
    _, metadata = _strip_annotated(annotation)
    if not metadata:
        # Optional[Annotated[...]] as produced for parameters defaulting to None
        _, metadata = _strip_annotated(_unwrap_optional(annotation))
    return metadata


def _marker_from(metadata: Iterable[Any]) -> Optional[Validator]:
    for item in metadata:
        if isinstance(item, Validator):
            return item
        if item is Validator:
            return Validator()
    return None


def _as_validator(value: Any) -> Validator:
    if isinstance(value, Validator):
        return value
    if value is None or value is Validator:
        return Validator()
    return Validator(schema=value)


def _normalise_parameters(
    parameters: Optional[ParametersSpec],
    names: Tuple[str, ...],
    qualname: str,
) -> dict:
    if parameters is None:
        return {}
    items = parameters.items() if isinstance(parameters, Mapping) else parameters

    markers = {}
    for key, value in items:
        if isinstance(key, bool) or not isinstance(key, (int, str)):
            raise ConfigurationError(f"Parameter key {key!r} for '{qualname}' must be an index or a name")
        if isinstance(key, int):
            if not 0 <= key < len(names):
                raise ConfigurationError(
                    f"'{qualname}' has no parameter at index {key} (it declares {len(names)})"
                )
            name = names[key]
        else:
            if key not in names:
                raise ConfigurationError(f"'{qualname}' has no parameter named '{key}'")
            name = key
        if name == names[0] and name in _BOUND_NAMES:
            raise ConfigurationError(
                f"Parameter {key!r} of '{qualname}' is the bound '{name}'; "
                "indexes count from 0 and include it, so the first argument is index 1"
            )
        markers[name] = _as_validator(value)
    return markers


def definition_namespace(func: Callable, frame=None) -> dict:
    """Collect the names visible where *func* was defined, beyond its globals.

    Closure cells of *func* come first, then the locals of *frame* and of each
    enclosing frame that shares the function's globals (class bodies and
    functions wrapping the definition), innermost first.
    """
    namespace = {}
    code = getattr(func, "__code__", None)
    closure = getattr(func, "__closure__", None) or ()
    if code is not None:
        for name, cell in zip(code.co_freevars, closure):
            try:
                namespace[name] = cell.cell_contents
            except ValueError:
                # Cell not filled yet
                continue

    globalns = getattr(func, "__globals__", None)
    try:
        while frame is not None and frame.f_globals is globalns and frame.f_locals is not globalns:
            for name, value in frame.f_locals.items():
                namespace.setdefault(name, value)
            frame = frame.f_back
    finally:
        del frame
    return namespace


def _type_hints(func: Callable, localns: Optional[dict]) -> Tuple[dict, dict]:
    """Resolve annotations, returning ``(hints, unresolved)``.

    When the annotations cannot be resolved together, each parameter is
    evaluated on its own so one bad hint does not hide the markers on the
    others. *unresolved* maps parameter names to their raw string annotations.
    """
    try:
        return typing.get_type_hints(func, localns=localns, include_extras=True), {}
    except Exception:
        logger.debug("Resolving type hints of %s one by one", func.__qualname__, exc_info=True)

    globalns = getattr(func, "__globals__", {})
    hints, unresolved = {}, {}
    for name, raw in getattr(func, "__annotations__", {}).items():
        if not isinstance(raw, str):
            hints[name] = raw
            continue
        try:
            hints[name] = eval(raw, globalns, localns or {})  # noqa: S307 - same as get_type_hints
        except Exception:
            unresolved[name] = raw
    return hints, unresolved


def _skip_or_raise(message: str, strict: bool) -> None:
    if strict:
        raise ConfigurationError(message)
    logger.warning("Skipping validation: %s", message)


def register_parameters(
    func: Callable,
    callable_id: str,
    registry: ParameterRegistry,
    *,
    parameters: Optional[ParametersSpec] = None,
    strict: Optional[bool] = None,
    localns: Optional[dict] = None,
) -> int:
    """Register every marked parameter of *func* under *callable_id*.

    Markers come from ``Annotated[..., Validator(...)]`` annotations and from
    *parameters*; the latter wins for a parameter marked both ways. *localns*
    supplies names for string annotations that the function's globals lack.
    Returns the number of descriptors registered.
    """
    signature = inspect.signature(func)
    names = tuple(signature.parameters)
    hints, unresolved = _type_hints(func, localns)
    effective_strict = strict_mode(strict)
    explicit = _normalise_parameters(parameters, names, func.__qualname__)

    markers = {}
    for name, param in signature.parameters.items():
        if name in unresolved:
            if name not in explicit and "Validator" in unresolved[name]:
                _skip_or_raise(
                    f"cannot resolve annotation {unresolved[name]!r} of parameter '{name}' "
                    f"of '{func.__qualname__}'; make every name it uses importable at run time",
                    effective_strict,
                )
            continue
        marker = _marker_from(_metadata_of(hints.get(name, param.annotation)))
        if marker is not None:
            markers[name] = marker
    markers.update(explicit)

    registered = 0
    for index, name in enumerate(names):
        marker = markers.get(name)
        if marker is None:
            continue

        annotation = hints.get(name, signature.parameters[name].annotation)
        schema, array = infer_shape(annotation)
        if marker.path:
            # The annotation describes the argument, not the value found under the path.
            schema, array = None, None
        elif marker.schema is not None:
            # Only the sequence-ness of the annotation matters next to an explicit schema.
            array = True if array else None

        if marker.schema is None and schema is None:
            if effective_strict:
                raise ConfigurationError(
                    f"Cannot determine a schema for parameter '{name}' of '{func.__qualname__}'; "
                    "pass one to Validator() or annotate the parameter with a schema class"
                )
            logger.warning(
                "Skipping validation of parameter '%s' of '%s': no schema could be determined",
                name,
                func.__qualname__,
            )
            continue

        registry.register(callable_id, index, marker, name=name, schema=schema, array=array)
        registered += 1

    return registered


def intercept(
    func: Callable,
    callable_id: str,
    *,
    registry: Optional[ParameterRegistry] = None,
) -> Callable:
    """Wrap *func* so each call validates the parameters registered under *callable_id*.

    Descriptors are looked up on every call, so parameters registered after
    wrapping are honoured. A callable with no registered parameters is called
    straight through.
    """
    registry = registry or get_registry()
    signature = inspect.signature(func)

    def _check(args, kwargs) -> None:
        targets = registry.lookup(callable_id)
        if not targets:
            return

        bound = signature.bind(*args, **kwargs)
        bound.apply_defaults()

        started_at = time.perf_counter()
        with start_span(
            f"paramguard.validate:{callable_id}",
            **{"paramguard.callable_id": callable_id},
        ) as span:
            result = collect_violations(targets, bound.arguments)
            if span is not None:
                span.set_attribute("paramguard.allowed", result.allowed)
        record_validation(callable_id, result.violations, started_at)

        if not result.allowed:
            logger.info(
                "Rejected call to '%s' with %d violation(s)", callable_id, len(result.violations)
            )
            logger.debug("%s", format_validation_reason(callable_id, result.violations))
            raise ValidationError(result.violations)

        logger.debug("Arguments of '%s' passed validation", callable_id)

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        """Wrapper for synchronous callables."""
        _check(args, kwargs)
        return func(*args, **kwargs)

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs):
        """Wrapper for asynchronous callables; the body is awaited only after validation."""
        _check(args, kwargs)
        return await func(*args, **kwargs)

    if inspect.iscoroutinefunction(func):
        wrapper = async_wrapper
    else:
        wrapper = sync_wrapper

    # Attach the registry id for introspection
    wrapper.__paramguard_id__ = callable_id
    return wrapper


def validate(
    func: Optional[Callable] = None,
    *,
    parameters: Optional[ParametersSpec] = None,
    callable_id: Optional[str] = None,
    registry: Optional[ParameterRegistry] = None,
    strict: Optional[bool] = None,
):
    """
    Method-level marker that validates marked arguments before the call runs.

    :param parameters: Optional. Extra markers keyed by parameter index or name,
                       either a mapping to ``Validator`` instances (or bare schema
                       classes) or pairs built with ``describe_parameter``.
    :param callable_id: Optional. The registry id for the callable. If not
                        provided, a unique one is generated from the function's
                        module and qualified name.
    :param registry: Optional. The ``ParameterRegistry`` to record parameters in.
                     Defaults to the process-wide registry.
    :param strict: Optional. Whether a marked parameter without a resolvable
                   schema is a ``ConfigurationError`` (the default) or is only
                   logged and left unvalidated. Overrides ``PARAMGUARD_STRICT``.

    On any violation the wrapped callable raises ``ValidationError`` and its body
    never runs. Violations of all marked parameters are reported together.

    .. code-block:: python

        from typing import Annotated
        from paramguard import Validator, describe_parameter, validate

        class Orders:
            # Schema inferred from the annotation
            @validate
            def place(self, order: Annotated[OrderDto, Validator()]): ...

            # Explicit schema looked up under "body" in the call arguments
            @validate
            def place_from_request(self, request: Annotated[dict, Validator(OrderDto, "body")]): ...

            # Markers supplied without touching the annotations
            @validate(parameters=[describe_parameter("rows", OrderDto, each=True)])
            def place_many(self, rows): ...
    """

    def decorator(func: Callable, _caller=None):
        effective_registry = registry or get_registry()
        effective_id = callable_id or effective_registry.new_callable_id(func)

        # Frame that applied the decorator: a class body or the enclosing function
        caller = _caller or inspect.currentframe().f_back
        try:
            localns = definition_namespace(func, caller)
        finally:
            del caller

        count = register_parameters(
            func,
            effective_id,
            effective_registry,
            parameters=parameters,
            strict=strict,
            localns=localns,
        )
        if count == 0:
            logger.debug("'%s' has no marked parameters; calls pass straight through", effective_id)

        return intercept(func, effective_id, registry=effective_registry)

    # This enables the dual syntax (@validate vs @validate(...))
    if callable(func):
        return decorator(func, inspect.currentframe().f_back)
    return decorator


__all__ = [
    "definition_namespace",
    "infer_shape",
    "intercept",
    "register_parameters",
    "validate",
]
