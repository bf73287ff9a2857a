# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Core value types for a single validation call."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Hashable, Iterator, List, Optional

from ..exceptions import ConstraintViolationError
from .groups import normalize_groups
from .messages import Message


@dataclass(frozen=True)
class Violation:
    """A recorded constraint failure."""

    path: str
    message: str
    value: Any = field(default=None, compare=False)
    constraint: Optional[str] = None


@dataclass
class ValidationResult:
    """Ordered violations produced by one validation call."""

    violations: List[Violation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def paths(self) -> List[str]:
        return [violation.path for violation in self.violations]

    def messages(self) -> List[str]:
        return [violation.message for violation in self.violations]

    def merge(self, other: "ValidationResult") -> None:
        self.violations.extend(other.violations)

    def raise_for_violations(self) -> None:
        if self.violations:
            raise ConstraintViolationError(self.violations)

    def __bool__(self) -> bool:
        return self.valid


def join_path(segments: List[str], leaf: Optional[str]) -> str:
    parts = list(segments)
    if leaf:
        parts.append(leaf)
    return ".".join(parts)


def index_segment(property_name: Optional[str], index: Any) -> str:
    """Render ``tasks[2]`` / ``crew[bob]``; a bare ``[2]`` at the root."""

    return f"{property_name or ''}[{index}]"


class ValidationRequest:
    """Mutable state for exactly one validation call.

    Owned by the calling thread and discarded once the caller has consumed
    the violations.
    """

    __slots__ = ("groups", "locale", "fail_fast", "_path", "_violations")

    def __init__(
        self,
        groups: Optional[Any] = None,
        *,
        locale: Optional[str] = None,
        fail_fast: bool = False,
    ):
        self.groups: FrozenSet[Hashable] = normalize_groups(groups)
        self.locale = locale
        self.fail_fast = fail_fast
        self._path: List[str] = []
        self._violations: List[Violation] = []

    @property
    def depth(self) -> int:
        return len(self._path)

    @property
    def violations(self) -> List[Violation]:
        return list(self._violations)

    def has_violations(self) -> bool:
        return bool(self._violations)

    def push_path(self, segment: str) -> None:
        self._path.append(segment)

    def pop_path(self) -> None:
        self._path.pop()

    @contextmanager
    def path(self, segment: Optional[str]) -> Iterator[None]:
        """Push *segment* for the duration of the block; ``None`` pushes nothing."""

        if segment is None:
            yield
            return
        self._path.append(segment)
        try:
            yield
        finally:
            self._path.pop()

    def current_path(self, property_name: Optional[str] = None) -> str:
        return join_path(self._path, property_name)

    def add_violation(
        self,
        message: Message,
        property_name: Optional[str] = None,
        *,
        value: Any = None,
        constraint: Optional[str] = None,
    ) -> Violation:
        """Record a violation at the current path.

        In fail-fast mode this raises :class:`ConstraintViolationError`
        carrying only this violation.
        """

        text = message.text(self.locale) if isinstance(message, Message) else str(message)
        violation = Violation(
            path=join_path(self._path, property_name),
            message=text,
            value=value,
            constraint=constraint,
        )
        self._violations.append(violation)
        if self.fail_fast:
            raise ConstraintViolationError([violation])
        return violation

    def result(self) -> ValidationResult:
        return ValidationResult(list(self._violations))


__all__ = [
    "ValidationRequest",
    "ValidationResult",
    "Violation",
    "index_segment",
    "join_path",
]
