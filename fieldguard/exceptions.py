# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for the fieldguard validation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .validation.base import Violation


class FieldGuardError(Exception):
    """Base class for every error raised by fieldguard."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(FieldGuardError):
    """Raised when a validator, declaration or adapter is misconfigured.

    Configuration errors surface at construction time (or the first time a
    type's adapter graph is built) and are never deferred into a validation
    call.
    """


class UnknownConstraintError(ConfigurationError):
    """Raised when a declaration names a constraint no factory can build."""

    def __init__(self, name: str, suggestions: Optional[Sequence[str]] = None):
        self.name = name
        self.suggestions = list(suggestions or [])
        message = f"No constraint factory registered for '{name}'"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(message)


class ConstraintViolationError(FieldGuardError):
    """Raised when a validated value breaks one or more constraints.

    The ``violations`` attribute holds the ordered violations; in fail-fast
    mode it holds exactly one.
    """

    def __init__(self, violations: Iterable["Violation"]):
        self.violations: List["Violation"] = list(violations)
        lines = [f"{len(self.violations)} constraint violation(s):"]
        for violation in self.violations:
            lines.append(f" - {violation.path or '<root>'}: {violation.message}")
        super().__init__("\n".join(lines))


__all__ = [
    "FieldGuardError",
    "ConfigurationError",
    "UnknownConstraintError",
    "ConstraintViolationError",
]
