# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""OpenTelemetry handles shared by the paramguard runtime.

Only the API package is required. Without a configured SDK provider every
instrument and span below is a no-op.
"""

from __future__ import annotations

import contextlib

from opentelemetry import metrics, trace

from ..config import telemetry_enabled

meter = metrics.get_meter("paramguard")


def get_tracer(name: str = "paramguard"):
    return trace.get_tracer(name)


def start_span(name: str, **attributes):
    """Start a span as the current span, or a null context when telemetry is off."""
    if not telemetry_enabled():
        return contextlib.nullcontext()
    return get_tracer().start_as_current_span(name, attributes=attributes)


__all__ = ["meter", "get_tracer", "start_span"]
