# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""fieldguard - declarative runtime validation of object graphs."""

from .config import ValidatorConfig
from .decorator import validated_arguments
from .exceptions import (
    ConfigurationError,
    ConstraintViolationError,
    FieldGuardError,
    UnknownConstraintError,
)
from .runtime import (
    configure_validator,
    get_validator,
    shutdown_all_validators,
    shutdown_validator,
)
from .validation import (
    DEFAULT_GROUP,
    ConstraintDeclaration,
    FixedClock,
    NullPolicy,
    SystemClock,
    ValidationAdapter,
    ValidationResult,
    Violation,
    Year,
    YearMonth,
    predicate_constraint,
)
from .validator import Validator

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConstraintDeclaration",
    "ConstraintViolationError",
    "DEFAULT_GROUP",
    "FieldGuardError",
    "FixedClock",
    "NullPolicy",
    "SystemClock",
    "ValidationAdapter",
    "ValidationResult",
    "Validator",
    "ValidatorConfig",
    "Violation",
    "Year",
    "YearMonth",
    "configure_validator",
    "get_validator",
    "predicate_constraint",
    "shutdown_all_validators",
    "shutdown_validator",
    "validated_arguments",
]
