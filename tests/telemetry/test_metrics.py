# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Tests for validation metrics and tracing."""
from __future__ import annotations

import time
from dataclasses import dataclass

from fieldguard.telemetry import record_validation_metrics


class _Counter:
    def __init__(self):
        self.calls = []

    def add(self, amount, attributes=None):
        self.calls.append((amount, attributes))


class _Histogram:
    def __init__(self):
        self.calls = []

    def record(self, amount, attributes=None):
        self.calls.append((amount, attributes))


class _Span:
    def __init__(self, name, attributes):
        self.name = name
        self.attributes = dict(attributes or {})

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def set_attribute(self, key, value):
        self.attributes[key] = value


class _Tracer:
    def __init__(self):
        self.spans = []

    def start_as_current_span(self, name, attributes=None):
        span = _Span(name, attributes)
        self.spans.append(span)
        return span


@dataclass
class Cargo:
    label: str


def test_record_validation_metrics_partitions_by_outcome(monkeypatch):
    total, violations, latency = _Counter(), _Counter(), _Histogram()
    monkeypatch.setattr("fieldguard.telemetry.metrics.validation_total", total)
    monkeypatch.setattr("fieldguard.telemetry.metrics.violation_total", violations)
    monkeypatch.setattr("fieldguard.telemetry.metrics.validation_latency_ms", latency)

    record_validation_metrics("Ship", 0, time.perf_counter())
    record_validation_metrics("Ship", 3, time.perf_counter())

    assert total.calls == [(1, {"type": "Ship", "status": "valid"}), (1, {"type": "Ship", "status": "invalid"})]
    assert violations.calls == [(3, {"type": "Ship"})]
    assert all(amount >= 0 for amount, _ in latency.calls)


def test_metric_failures_never_affect_validation(monkeypatch, validator):
    class _Broken:
        def add(self, *_a, **_kw):
            raise RuntimeError("exporter down")

        record = add

    monkeypatch.setattr("fieldguard.telemetry.metrics.validation_total", _Broken())
    monkeypatch.setattr("fieldguard.telemetry.metrics.validation_latency_ms", _Broken())

    violations = validator.check({"label": ""}, adapter=validator.schema({"label": ["NotBlank"]}))
    assert [v.path for v in violations] == ["label"]


def test_check_runs_inside_a_span(monkeypatch, validator):
    tracer = _Tracer()
    monkeypatch.setattr("fieldguard.validator.get_tracer", lambda: tracer)
    validator.register_type(Cargo, {"label": ["NotBlank"]})

    validator.check(Cargo(label=""))

    (span,) = tracer.spans
    assert span.name == "fieldguard.validate:Cargo"
    assert span.attributes["fieldguard.type"] == "Cargo"
    assert span.attributes["fieldguard.fail_fast"] is False
    assert span.attributes["fieldguard.violations"] == 1


def test_check_records_metrics_with_the_graph_label(monkeypatch, validator):
    recorded = []
    monkeypatch.setattr(
        "fieldguard.validator.record_validation_metrics",
        lambda label, count, started: recorded.append((label, count)),
    )

    validator.check({"label": ""}, adapter=validator.schema({"label": ["NotBlank"]}, name="cargo"))

    assert recorded == [("cargo", 1)]


def test_adapter_builds_are_counted_once_per_type(monkeypatch, validator):
    builds = _Counter()
    monkeypatch.setattr("fieldguard.validator.adapter_build_total", builds)
    validator.register_type(Cargo, {"label": ["NotBlank"]})

    validator.check(Cargo(label="a"))
    validator.check(Cargo(label="b"))

    assert builds.calls == [(1, {"type": "Cargo"})]
