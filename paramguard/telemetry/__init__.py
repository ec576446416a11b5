# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Telemetry package - OpenTelemetry metrics and tracing for intercepted calls."""

from .metrics import (
    record_validation,
    validation_call_total,
    validation_latency_ms,
    validation_violation_total,
)
from .runtime import get_tracer, meter, start_span

__all__ = [
    "get_tracer",
    "meter",
    "record_validation",
    "start_span",
    "validation_call_total",
    "validation_latency_ms",
    "validation_violation_total",
]
