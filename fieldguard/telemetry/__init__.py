"""Telemetry package - metric instruments and tracing for validation calls."""

from .metrics import (
    adapter_build_total,
    record_validation_metrics,
    validation_latency_ms,
    validation_total,
    violation_total,
)
from .runtime import get_tracer, meter

__all__ = [
    "adapter_build_total",
    "get_tracer",
    "meter",
    "record_validation_metrics",
    "validation_latency_ms",
    "validation_total",
    "violation_total",
]
