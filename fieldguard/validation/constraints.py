# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Built-in constraint kinds.

The built-in kinds form a closed enumeration, :class:`ConstraintKind`. Each
kind declares an attribute schema that is checked, and defaulted, before
the adapter is built, so a malformed declaration fails when the validator
is assembled rather than during a validation call.

Null handling per kind (overridable with the ``nulls`` attribute):

=====================  ===========
NotNull, NotBlank,     invalid
NotEmpty, Past*,
Future*
everything else        valid
=====================  ===========
"""

from __future__ import annotations

import difflib
import re
import sys
from collections.abc import Sized
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..exceptions import ConfigurationError
from .adapters import (
    AdapterCreateRequest,
    ConstraintAdapter,
    NullPolicy,
    PrimitiveAdapter,
    ValidationAdapter,
)
from .temporal import TemporalAdapter

_TEXT_TYPES = (str, bytes, bytearray)

# Attributes every declaration may carry, whatever its kind.
COMMON_ATTRIBUTES = frozenset({"message", "groups", "nulls", "payload"})


class RegexFlag(Enum):
    """Pattern flags; Java-style names are accepted alongside ``re`` names."""

    CASE_INSENSITIVE = int(re.IGNORECASE)
    MULTILINE = int(re.MULTILINE)
    DOTALL = int(re.DOTALL)
    COMMENTS = int(re.VERBOSE)
    ASCII = int(re.ASCII)
    # No equivalent in ``re``; accepted so declarations carry over unchanged.
    UNIX_LINES = 0
    UNICODE_CASE = -1
    CANON_EQ = -2

    @classmethod
    def parse(cls, raw: Any) -> "RegexFlag":
        if isinstance(raw, cls):
            return raw
        name = str(raw).strip().upper()
        name = {"IGNORECASE": "CASE_INSENSITIVE", "VERBOSE": "COMMENTS", "I": "CASE_INSENSITIVE",
                "M": "MULTILINE", "S": "DOTALL", "X": "COMMENTS"}.get(name, name)
        try:
            return cls[name]
        except KeyError as exc:
            raise ValueError(f"unknown regex flag {raw!r}") from exc

    @property
    def re_flag(self) -> int:
        return max(self.value, 0)


def combine_flags(flags: Iterable[RegexFlag]) -> int:
    combined = 0
    for flag in flags:
        combined |= flag.re_flag
    return combined


# ---------------------------------------------------------------------------
# Attribute schema
# ---------------------------------------------------------------------------

_MISSING = object()


def _as_int(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise TypeError(f"expected an integer, got {raw!r}")
    return raw


def _as_number(raw: Any) -> Any:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise TypeError(f"expected a number, got {raw!r}")
    return raw


def _as_str(raw: Any) -> str:
    if not isinstance(raw, str):
        raise TypeError(f"expected a string, got {raw!r}")
    return raw


def _as_flags(raw: Any) -> List[RegexFlag]:
    if raw is None:
        return []
    if isinstance(raw, (str, RegexFlag)):
        raw = [raw]
    return [RegexFlag.parse(item) for item in raw]


@dataclass(frozen=True)
class Attribute:
    name: str
    coerce: Callable[[Any], Any]
    default: Any = _MISSING

    @property
    def required(self) -> bool:
        return self.default is _MISSING


class ConstraintKind(Enum):
    NOT_NULL = "NotNull"
    NULL = "Null"
    ASSERT_TRUE = "AssertTrue"
    ASSERT_FALSE = "AssertFalse"
    NOT_BLANK = "NotBlank"
    NOT_EMPTY = "NotEmpty"
    SIZE = "Size"
    PATTERN = "Pattern"
    EMAIL = "Email"
    MIN = "Min"
    MAX = "Max"
    POSITIVE = "Positive"
    POSITIVE_OR_ZERO = "PositiveOrZero"
    NEGATIVE = "Negative"
    NEGATIVE_OR_ZERO = "NegativeOrZero"
    PAST = "Past"
    PAST_OR_PRESENT = "PastOrPresent"
    FUTURE = "Future"
    FUTURE_OR_PRESENT = "FutureOrPresent"

    @classmethod
    def lookup(cls, name: str) -> Optional["ConstraintKind"]:
        name = _ALIASES.get(name, name)
        for kind in cls:
            if kind.value == name:
                return kind
        return None

    @property
    def schema(self) -> Mapping[str, Attribute]:
        return _SCHEMAS.get(self, {})

    def coerce_attributes(self, attributes: Mapping[str, Any]) -> Dict[str, Any]:
        """Check *attributes* against this kind's schema and fill in defaults."""

        schema = self.schema
        unknown = [key for key in attributes if key not in schema and key not in COMMON_ATTRIBUTES]
        if unknown:
            allowed = sorted(set(schema) | COMMON_ATTRIBUTES)
            hints = {key: difflib.get_close_matches(key, allowed, n=1) for key in unknown}
            detail = ", ".join(
                f"'{key}'" + (f" (did you mean '{hint[0]}'?)" if hint else "")
                for key, hint in hints.items()
            )
            raise ConfigurationError(f"Constraint '{self.value}' does not accept attribute(s) {detail}")

        coerced: Dict[str, Any] = dict(attributes)
        for name, attribute in schema.items():
            if name not in attributes or attributes[name] is None:
                if attribute.required:
                    raise ConfigurationError(f"Constraint '{self.value}' requires attribute '{name}'")
                coerced[name] = attribute.default
                continue
            try:
                coerced[name] = attribute.coerce(attributes[name])
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"Constraint '{self.value}' has invalid attribute '{name}': {exc}"
                ) from exc
        return coerced

    def create(self, request: AdapterCreateRequest) -> ValidationAdapter:
        return _BUILDERS[self](request)


_ALIASES = {"NonNull": "NotNull", "Nonnull": "NotNull"}


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------


class NotNullAdapter(ConstraintAdapter):
    null_policy = NullPolicy.INVALID

    def is_valid(self, value: Any) -> bool:
        return True


class NullAdapter(ConstraintAdapter):
    def is_valid(self, value: Any) -> bool:
        return False


class AssertBooleanAdapter(ConstraintAdapter):
    """AssertTrue / AssertFalse; ``None`` is vacuously valid."""

    def __init__(self, request: AdapterCreateRequest, *, expected: bool):
        super().__init__(request)
        self.expected = expected

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, bool):
            return True
        return value is self.expected


class NotBlankAdapter(ConstraintAdapter):
    null_policy = NullPolicy.INVALID

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, str):
            return bool(value.strip())
        if isinstance(value, (bytes, bytearray)):
            return bool(value.strip())
        return True


class NotEmptyAdapter(ConstraintAdapter):
    null_policy = NullPolicy.INVALID

    def is_valid(self, value: Any) -> bool:
        if isinstance(value, Sized):
            return len(value) > 0
        return True


class SizeAdapter(ConstraintAdapter):
    """Length bounds for text, collections, mappings and arrays."""

    def __init__(self, request: AdapterCreateRequest):
        super().__init__(request)
        self.min = request.attributes["min"]
        self.max = request.attributes["max"]
        if self.min < 0 or self.max < self.min:
            raise ConfigurationError(
                f"Constraint '{request.name}' has invalid bounds min={self.min} max={self.max}"
            )

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, Sized):
            return True
        return self.min <= len(value) <= self.max

    def after_violation(self, value: Any) -> bool:
        # Non-empty containers still have their elements validated.
        return not isinstance(value, _TEXT_TYPES) and len(value) > 0


class PatternAdapter(ConstraintAdapter):
    """Full-match of a regular expression compiled once at construction."""

    def __init__(self, request: AdapterCreateRequest):
        super().__init__(request)
        regexp = request.attributes["regexp"]
        try:
            self.pattern = re.compile(regexp, combine_flags(request.attributes["flags"]))
        except re.error as exc:
            raise ConfigurationError(
                f"Invalid regex pattern for constraint '{request.name}': {regexp!r} ({exc})"
            ) from exc

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str):
            return True
        return self.pattern.fullmatch(value) is not None


_EMAIL = re.compile(
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)*[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?"
)


class EmailAdapter(PatternAdapter):
    """Well-formed ``local@domain``, optionally narrowed by ``regexp``."""

    def is_valid(self, value: Any) -> bool:
        if not isinstance(value, str) or not value:
            return True
        return _EMAIL.fullmatch(value) is not None and self.pattern.fullmatch(value) is not None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class BoundAdapter(PrimitiveAdapter):
    """Min / Max against the ``value`` attribute."""

    def __init__(self, request: AdapterCreateRequest, *, lower: bool):
        super().__init__(request)
        self.bound = request.attributes["value"]
        self.lower = lower

    def is_valid_primitive(self, value: float) -> bool:
        return value >= self.bound if self.lower else value <= self.bound

    def is_valid(self, value: Any) -> bool:
        if not _is_number(value):
            return True
        if isinstance(value, Decimal) and value.is_nan():
            return False
        return value >= self.bound if self.lower else value <= self.bound


class SignAdapter(PrimitiveAdapter):
    """Positive, PositiveOrZero, Negative and NegativeOrZero."""

    def __init__(self, request: AdapterCreateRequest, *, positive: bool, or_zero: bool):
        super().__init__(request)
        self.positive = positive
        self.or_zero = or_zero

    def is_valid_primitive(self, value: float) -> bool:
        if value == 0:
            return self.or_zero
        return value > 0 if self.positive else value < 0

    def is_valid(self, value: Any) -> bool:
        if not _is_number(value):
            return True
        if isinstance(value, Decimal) and value.is_nan():
            return False
        return self.is_valid_primitive(value)


_SCHEMAS: Mapping[ConstraintKind, Mapping[str, Attribute]] = {
    ConstraintKind.SIZE: {
        "min": Attribute("min", _as_int, 0),
        "max": Attribute("max", _as_int, sys.maxsize),
    },
    ConstraintKind.PATTERN: {
        "regexp": Attribute("regexp", _as_str),
        "flags": Attribute("flags", _as_flags, []),
    },
    ConstraintKind.EMAIL: {
        "regexp": Attribute("regexp", _as_str, ".*"),
        "flags": Attribute("flags", _as_flags, []),
    },
    ConstraintKind.MIN: {"value": Attribute("value", _as_number)},
    ConstraintKind.MAX: {"value": Attribute("value", _as_number)},
}

_BUILDERS: Mapping[ConstraintKind, Callable[[AdapterCreateRequest], ValidationAdapter]] = {
    ConstraintKind.NOT_NULL: NotNullAdapter,
    ConstraintKind.NULL: NullAdapter,
    ConstraintKind.ASSERT_TRUE: lambda r: AssertBooleanAdapter(r, expected=True),
    ConstraintKind.ASSERT_FALSE: lambda r: AssertBooleanAdapter(r, expected=False),
    ConstraintKind.NOT_BLANK: NotBlankAdapter,
    ConstraintKind.NOT_EMPTY: NotEmptyAdapter,
    ConstraintKind.SIZE: SizeAdapter,
    ConstraintKind.PATTERN: PatternAdapter,
    ConstraintKind.EMAIL: EmailAdapter,
    ConstraintKind.MIN: lambda r: BoundAdapter(r, lower=True),
    ConstraintKind.MAX: lambda r: BoundAdapter(r, lower=False),
    ConstraintKind.POSITIVE: lambda r: SignAdapter(r, positive=True, or_zero=False),
    ConstraintKind.POSITIVE_OR_ZERO: lambda r: SignAdapter(r, positive=True, or_zero=True),
    ConstraintKind.NEGATIVE: lambda r: SignAdapter(r, positive=False, or_zero=False),
    ConstraintKind.NEGATIVE_OR_ZERO: lambda r: SignAdapter(r, positive=False, or_zero=True),
    ConstraintKind.PAST: lambda r: TemporalAdapter(r, past=True, or_present=False),
    ConstraintKind.PAST_OR_PRESENT: lambda r: TemporalAdapter(r, past=True, or_present=True),
    ConstraintKind.FUTURE: lambda r: TemporalAdapter(r, past=False, or_present=False),
    ConstraintKind.FUTURE_OR_PRESENT: lambda r: TemporalAdapter(r, past=False, or_present=True),
}


__all__ = [
    "Attribute",
    "COMMON_ATTRIBUTES",
    "ConstraintKind",
    "RegexFlag",
    "combine_flags",
]
