# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for fieldguard."""

from __future__ import annotations

import logging
import time

from .runtime import meter

logger = logging.getLogger(__name__)

validation_total = meter.create_counter(
    name="fieldguard.validation.total",
    description="Counts validation calls, partitioned by validated type and outcome.",
    unit="1",
)

violation_total = meter.create_counter(
    name="fieldguard.violation.total",
    description="Counts recorded constraint violations.",
    unit="1",
)

validation_latency_ms = meter.create_histogram(
    name="fieldguard.validation.latency.ms",
    description="Time spent walking the adapter graph for one validation call.",
    unit="ms",
)

adapter_build_total = meter.create_counter(
    name="fieldguard.adapter.build.total",
    description="Counts adapter graphs built for validated types.",
    unit="1",
)


def record_validation_metrics(type_name: str, violation_count: int, started_at: float) -> None:
    """Record latency and outcome counters for one validation call.

    Args:
        type_name: Name of the validated value's type (or adapter label)
        violation_count: Number of violations the call produced
        started_at: Timestamp from time.perf_counter() when the call started
    """
    duration_ms = (time.perf_counter() - started_at) * 1000.0
    status = "valid" if violation_count == 0 else "invalid"
    try:
        validation_latency_ms.record(duration_ms, {"type": type_name, "status": status})
        validation_total.add(1, {"type": type_name, "status": status})
        if violation_count:
            violation_total.add(violation_count, {"type": type_name})
    except Exception:
        # Telemetry must never interfere with validation results
        logger.debug("Failed to record validation metrics for %s", type_name, exc_info=True)


__all__ = [
    "adapter_build_total",
    "record_validation_metrics",
    "validation_latency_ms",
    "validation_total",
    "violation_total",
]
