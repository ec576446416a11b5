# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Environment driven settings for the paramguard runtime."""

from __future__ import annotations

import os
from typing import Optional

_FALSE_VALUES = ("", "0", "false", "no", "off")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


def strict_mode(override: Optional[bool] = None) -> bool:
    """Return whether an unresolvable parameter schema is a hard error.

    An explicit *override* (the ``strict=`` argument of :func:`paramguard.validate`)
    wins over ``PARAMGUARD_STRICT``, which defaults to on.
    """
    if override is not None:
        return override
    return _env_flag("PARAMGUARD_STRICT", True)


def telemetry_enabled() -> bool:
    """Return whether metrics and spans are emitted (``PARAMGUARD_TELEMETRY``)."""
    return _env_flag("PARAMGUARD_TELEMETRY", True)


__all__ = ["strict_mode", "telemetry_enabled"]
