# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Runtime helpers for validating method parameter sets."""

from __future__ import annotations

import logging
from typing import Any, Hashable, Iterable, Mapping, Optional, Sequence, Union

from ..exceptions import ConfigurationError, ConstraintViolationError
from ..validation.adapters import ValidationAdapter
from ..validation.base import Violation
from ..validation.groups import normalize_groups
from ..validator import Validator

logger = logging.getLogger(__name__)


def check_parameter_names(
    label: str,
    declared: Iterable[str],
    allowed_params: Sequence[str],
    *,
    has_var_kwargs: bool = False,
) -> None:
    """Reject declarations naming parameters the callable does not have."""

    if has_var_kwargs:
        return
    invalid = set(declared) - set(allowed_params)
    if invalid:
        logger.error(
            "Parameter constraints for '%s' reference unknown arguments: %s",
            label,
            ", ".join(sorted(invalid)),
        )
        raise ConfigurationError(
            f"Parameter constraints for '{label}' reference undefined parameter(s): {sorted(invalid)}"
        )


def format_violation_reason(label: str, violations: Sequence[Violation]) -> str:
    """Produce a human-readable summary of argument violations."""

    lines = [f"Argument validation failed for '{label}':"]
    for violation in violations:
        lines.append(f" - {violation.path}: {violation.message}")
    return "\n".join(lines)


def validate_arguments(
    validator: Validator,
    adapter: ValidationAdapter,
    arguments: Mapping[str, Any],
    *,
    groups: Union[Hashable, Iterable[Hashable]] = (),
    locale: Optional[str] = None,
    label: str = "call",
) -> Optional[ConstraintViolationError]:
    """Validate bound *arguments*; return the error to raise, or None when valid."""

    active = normalize_groups(groups)
    violations = validator.check(dict(arguments), *active, locale=locale, adapter=adapter)
    if not violations:
        return None
    logger.debug("%s", format_violation_reason(label, violations))
    return ConstraintViolationError(violations)


__all__ = [
    "check_parameter_names",
    "format_violation_reason",
    "validate_arguments",
]
