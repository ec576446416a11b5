# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for paramguard."""

from __future__ import annotations

import logging
import time
from typing import Iterable

from ..config import telemetry_enabled
from .runtime import meter

logger = logging.getLogger(__name__)

validation_call_total = meter.create_counter(
    name="paramguard.validation.call.total",
    description="Counts intercepted calls, partitioned by whether validation passed.",
    unit="1",
)

validation_violation_total = meter.create_counter(
    name="paramguard.validation.violation.total",
    description="Counts failed rules reported for intercepted calls, partitioned by rule key.",
    unit="1",
)

validation_latency_ms = meter.create_histogram(
    name="paramguard.validation.latency.ms",
    description="Time spent validating the marked arguments of one call.",
    unit="ms",
)


# ==============================================================================
# Validation Outcome Recording
# ==============================================================================


def record_validation(callable_id: str, violations: Iterable, started_at: float) -> None:
    """Record the outcome of validating one call.

    Args:
        callable_id: Registry id of the intercepted callable
        violations: Violations collected for the call (empty when it passed)
        started_at: Timestamp from time.perf_counter() taken before validation
    """
    if not telemetry_enabled():
        return

    try:
        duration_ms = (time.perf_counter() - started_at) * 1000.0
        violations = list(violations)
        status = "rejected" if violations else "passed"

        validation_latency_ms.record(duration_ms, {"callable_id": callable_id, "status": status})
        validation_call_total.add(1, {"callable_id": callable_id, "status": status})
        for violation in violations:
            for rule in violation.constraints:
                validation_violation_total.add(1, {"callable_id": callable_id, "rule": rule})
    except Exception:
        # Telemetry must never interfere with user code
        logger.debug("Failed to record validation metrics for %s", callable_id, exc_info=True)


__all__ = [
    "validation_call_total",
    "validation_violation_total",
    "validation_latency_ms",
    "record_validation",
]
