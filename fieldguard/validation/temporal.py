# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Clocks and the Past/Future constraint family.

"Now" always comes from an injected :class:`Clock`. Each supported value
type is compared inside its own domain: a ``date`` against today's date in
the clock's zone, a naive ``time`` against the wall-clock time of day, a
``YearMonth`` against the current month, and so on.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, NamedTuple, Optional, Tuple

from .adapters import AdapterCreateRequest, ConstraintAdapter, NullPolicy


class Year(NamedTuple):
    value: int


class YearMonth(NamedTuple):
    year: int
    month: int


class Clock(ABC):
    """Source of the current instant and the zone used for local comparisons."""

    @property
    @abstractmethod
    def zone(self) -> tzinfo:
        """Zone that naive and calendar values are interpreted in."""

    @abstractmethod
    def now(self) -> datetime:
        """Current instant as an aware datetime."""


class SystemClock(Clock):
    """Wall clock; defaults to the host's local zone.

    Without an explicit zone the host offset is looked up on every access,
    so daylight-saving transitions are followed in long-running processes.
    """

    def __init__(self, zone: Optional[tzinfo] = None):
        self._zone = zone

    @property
    def zone(self) -> tzinfo:
        if self._zone is not None:
            return self._zone
        return datetime.now(timezone.utc).astimezone().tzinfo or timezone.utc

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Always reports the same instant; naive instants are taken as UTC."""

    def __init__(self, instant: datetime, zone: Optional[tzinfo] = None):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant
        self._zone = zone or timezone.utc

    @property
    def zone(self) -> tzinfo:
        return self._zone

    def now(self) -> datetime:
        return self._instant


def project(value: Any, reference: datetime, zone: tzinfo) -> Optional[Tuple[Any, Any]]:
    """Return ``(value, reference)`` in *value*'s own domain, or None if unsupported."""

    local = reference.astimezone(zone)
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            return value, local.replace(tzinfo=None)
        return value, reference
    if isinstance(value, date):
        return value, local.date()
    if isinstance(value, time):
        if value.tzinfo is None:
            return value, local.time()
        shifted = reference.astimezone(value.tzinfo)
        return value.replace(tzinfo=None), shifted.time()
    if isinstance(value, YearMonth):
        return value, YearMonth(local.year, local.month)
    if isinstance(value, Year):
        return value, Year(local.year)
    return None


class TemporalAdapter(ConstraintAdapter):
    """Past, PastOrPresent, Future and FutureOrPresent."""

    null_policy = NullPolicy.INVALID

    def __init__(self, request: AdapterCreateRequest, *, past: bool, or_present: bool):
        super().__init__(request)
        self.past = past
        self.or_present = or_present
        self.clock: Clock = request.context.clock
        self.tolerance: timedelta = request.context.temporal_tolerance or timedelta(0)

    def is_valid(self, value: Any) -> bool:
        now = self.clock.now()
        reference = now + self.tolerance if self.past else now - self.tolerance
        projected = project(value, reference, self.clock.zone)
        if projected is None:
            return True
        candidate, current = projected
        if self.past:
            return candidate <= current if self.or_present else candidate < current
        return candidate >= current if self.or_present else candidate > current


__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TemporalAdapter",
    "Year",
    "YearMonth",
    "project",
]
