"""Validation package - constraint adapters, combinators and message resolution.

This package holds the pure validation machinery: adapters walk a value and
write violations into a request. Nothing here knows about process-wide
instances, YAML files or decorators.
"""

from .adapters import (
    NOOP,
    AdapterCreateRequest,
    CascadeAdapter,
    ConstraintAdapter,
    MultiAdapter,
    NullPolicy,
    ObjectAdapter,
    ParameterAdapter,
    PrimitiveAdapter,
    PropertyAdapter,
    ValidationAdapter,
)
from .base import ValidationRequest, ValidationResult, Violation
from .constraints import ConstraintKind, RegexFlag
from .groups import DEFAULT_GROUP, is_active, normalize_groups
from .messages import Message, MessageResolver
from .registry import (
    ConstraintDeclaration,
    ConstraintFactory,
    ConstraintRegistry,
    ValidationContext,
    predicate_constraint,
)
from .schema import TypeSchema, ValueSpec
from .temporal import Clock, FixedClock, SystemClock, Year, YearMonth

__all__ = [
    "AdapterCreateRequest",
    "CascadeAdapter",
    "Clock",
    "ConstraintAdapter",
    "ConstraintDeclaration",
    "ConstraintFactory",
    "ConstraintKind",
    "ConstraintRegistry",
    "DEFAULT_GROUP",
    "FixedClock",
    "Message",
    "MessageResolver",
    "MultiAdapter",
    "NOOP",
    "NullPolicy",
    "ObjectAdapter",
    "ParameterAdapter",
    "PrimitiveAdapter",
    "PropertyAdapter",
    "RegexFlag",
    "SystemClock",
    "TypeSchema",
    "ValidationAdapter",
    "ValidationContext",
    "ValidationRequest",
    "ValidationResult",
    "ValueSpec",
    "Violation",
    "Year",
    "YearMonth",
    "is_active",
    "normalize_groups",
    "predicate_constraint",
]
