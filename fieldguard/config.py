# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validator configuration.

Configuration can be built directly, from ``FIELDGUARD_*`` environment
variables, or from a flat mapping of dotted property names::

    validation.failFast                        = true
    validation.locale.default                  = en-GB
    validation.locale.addedLocales             = de,fr
    validation.resourcebundle.names            = ./messages.yaml
    validation.temporal.tolerance.value        = 5
    validation.temporal.tolerance.chronoUnit   = SECONDS
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Mapping, Optional, Tuple

from .exceptions import ConfigurationError

_TRUE_VALUES = ("1", "true", "yes", "on")

# ChronoUnit names understood for temporal tolerance.
TOLERANCE_UNITS: Mapping[str, timedelta] = {
    "MICROS": timedelta(microseconds=1),
    "MILLIS": timedelta(milliseconds=1),
    "SECONDS": timedelta(seconds=1),
    "MINUTES": timedelta(minutes=1),
    "HOURS": timedelta(hours=1),
    "HALF_DAYS": timedelta(hours=12),
    "DAYS": timedelta(days=1),
    "WEEKS": timedelta(weeks=1),
}


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in _TRUE_VALUES


def parse_list(raw: Any) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(part.strip() for part in raw.split(",") if part.strip())
    return tuple(str(part).strip() for part in raw if str(part).strip())


def temporal_tolerance(value: Any, unit: Optional[str] = None) -> timedelta:
    """Convert an amount and ChronoUnit-style unit name into a ``timedelta``."""

    unit_name = (unit or "MILLIS").strip().upper()
    if unit_name not in TOLERANCE_UNITS:
        raise ConfigurationError(
            f"Unknown temporal tolerance unit '{unit}'; expected one of {sorted(TOLERANCE_UNITS)}"
        )
    try:
        amount = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Temporal tolerance value must be an integer, got {value!r}") from exc
    return TOLERANCE_UNITS[unit_name] * amount


@dataclass(frozen=True)
class ValidatorConfig:
    """Construction-time settings for a :class:`~fieldguard.validator.Validator`."""

    fail_fast: bool = False
    default_locale: str = "en"
    added_locales: Tuple[str, ...] = ()
    resource_bundles: Tuple[str, ...] = ()
    temporal_tolerance: Optional[timedelta] = None
    extras: Mapping[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ValidatorConfig":
        """Read ``FIELDGUARD_*`` variables from *environ* (defaults to ``os.environ``)."""

        env = os.environ if environ is None else environ
        tolerance = None
        raw_tolerance = env.get("FIELDGUARD_TEMPORAL_TOLERANCE_VALUE")
        if raw_tolerance:
            tolerance = temporal_tolerance(raw_tolerance, env.get("FIELDGUARD_TEMPORAL_TOLERANCE_UNIT"))

        return cls(
            fail_fast=parse_bool(env.get("FIELDGUARD_FAIL_FAST", "0")),
            default_locale=env.get("FIELDGUARD_LOCALE_DEFAULT") or "en",
            added_locales=parse_list(env.get("FIELDGUARD_LOCALE_ADDED")),
            resource_bundles=parse_list(env.get("FIELDGUARD_RESOURCE_BUNDLES")),
            temporal_tolerance=tolerance,
        )

    @classmethod
    def from_mapping(cls, props: Mapping[str, Any]) -> "ValidatorConfig":
        """Build from dotted ``validation.*`` property names."""

        tolerance = None
        raw_tolerance = props.get("validation.temporal.tolerance.value")
        if raw_tolerance not in (None, ""):
            tolerance = temporal_tolerance(
                raw_tolerance, props.get("validation.temporal.tolerance.chronoUnit")
            )

        known = {
            "validation.failFast",
            "validation.locale.default",
            "validation.locale.addedLocales",
            "validation.resourcebundle.names",
            "validation.temporal.tolerance.value",
            "validation.temporal.tolerance.chronoUnit",
        }
        return cls(
            fail_fast=parse_bool(props.get("validation.failFast", False)),
            default_locale=str(props.get("validation.locale.default") or "en"),
            added_locales=parse_list(props.get("validation.locale.addedLocales")),
            resource_bundles=parse_list(props.get("validation.resourcebundle.names")),
            temporal_tolerance=tolerance,
            extras={k: v for k, v in props.items() if k not in known},
        )

    @property
    def locales(self) -> Tuple[str, ...]:
        """Default locale first, then added locales without duplicates."""

        ordered = [self.default_locale]
        for tag in self.added_locales:
            if tag not in ordered:
                ordered.append(tag)
        return tuple(ordered)


__all__ = [
    "TOLERANCE_UNITS",
    "ValidatorConfig",
    "parse_bool",
    "parse_list",
    "temporal_tolerance",
]
