"""Shared fixtures for the fieldguard test-suite.

Every validator built here reads "now" from a fixed clock so temporal
constraints are deterministic, and process-wide instances are cleared after
each test so configuration never leaks between tests.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fieldguard import FixedClock, Validator, ValidatorConfig, shutdown_all_validators

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def fixed_clock() -> FixedClock:
    """Clock pinned to 2025-06-15T12:00:00Z."""
    return FixedClock(NOW)


@pytest.fixture()
def validator(fixed_clock) -> Validator:
    """A collect-all validator with the default (English) locale."""
    return Validator(clock=fixed_clock)


@pytest.fixture()
def fail_fast_validator(fixed_clock) -> Validator:
    return Validator(ValidatorConfig(fail_fast=True), clock=fixed_clock)


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise – most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield


@pytest.fixture(autouse=True)
def _reset_validator_instances(monkeypatch):
    """Keep FIELDGUARD_* variables and named instances from leaking between tests."""
    for name in (
        "FIELDGUARD_FAIL_FAST",
        "FIELDGUARD_LOCALE_DEFAULT",
        "FIELDGUARD_LOCALE_ADDED",
        "FIELDGUARD_RESOURCE_BUNDLES",
        "FIELDGUARD_TEMPORAL_TOLERANCE_VALUE",
        "FIELDGUARD_TEMPORAL_TOLERANCE_UNIT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    shutdown_all_validators()
