# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Dotted path lookup into nested argument data."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union


class _Absent:
    """Marker for a path that does not resolve to a value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()

PathLike = Union[str, Sequence[Union[str, int]]]


def _segments(path: PathLike, delimiter: str) -> Sequence[Union[str, int]]:
    if isinstance(path, str):
        return [segment for segment in path.split(delimiter) if segment != ""]
    return list(path)


def _step(current: Any, segment: Union[str, int]) -> Any:
    if isinstance(current, Mapping):
        if segment in current:
            return current[segment]
        return current.get(str(segment), ABSENT)

    if isinstance(current, Sequence) and not isinstance(current, (str, bytes, bytearray)):
        if isinstance(segment, int) or (isinstance(segment, str) and segment.isdigit()):
            index = int(segment)
            if index < len(current):
                return current[index]
        return ABSENT

    if isinstance(segment, str):
        try:
            return getattr(current, segment, ABSENT)
        except Exception:
            # Properties that raise are treated as missing; lookups never raise.
            return ABSENT
    return ABSENT


def resolve(root: Any, path: PathLike, delimiter: str = ".") -> Any:
    """Return the value at *path* inside *root*, or :data:`ABSENT`.

    Walks mappings by key, sequences by numeric index and any other object by
    attribute. A ``None`` root or intermediate value ends the walk with
    :data:`ABSENT`; a ``None`` found at the final segment is returned as is.
    """
    current = root
    for segment in _segments(path, delimiter):
        if current is None or current is ABSENT:
            return ABSENT
        current = _step(current, segment)
        if current is ABSENT:
            return ABSENT
    return current


def get(root: Any, path: PathLike, delimiter: str = ".") -> Any:
    """Like :func:`resolve` but reports a missing value as ``None``."""
    value = resolve(root, path, delimiter)
    return None if value is ABSENT else value


__all__ = ["ABSENT", "resolve", "get"]
