# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validation adapters and the combinators that compose them.

An adapter answers one question for one value::

    adapter.validate(value, request, property_name) -> bool

``True`` means "acceptable from this adapter's point of view, keep going";
``False`` means the adapter found the value unusable. Violations are written
into the request, never returned.

Composition::

    not_null.then(cascade)            # skip the cascade when the value is null
    not_empty.and_then_multi(size)    # run both, AND the results
    not_blank.list()                  # apply to every element, path "tasks[2]"
    cascade.map_values()              # apply to every value, path "crew[bob]"

Composed adapters are frozen values; a graph built once can be shared by
any number of concurrent validation calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, FrozenSet, Hashable, Optional, Tuple

from ..exceptions import ConfigurationError
from .base import ValidationRequest, index_segment
from .groups import is_active
from .messages import Message

if TYPE_CHECKING:  # pragma: no cover
    from .registry import ValidationContext


_TEXT_TYPES = (str, bytes, bytearray)


class ValidationAdapter(ABC):
    """The atomic unit of validation."""

    __slots__ = ()

    @abstractmethod
    def validate(
        self,
        value: Any,
        request: ValidationRequest,
        property_name: Optional[str] = None,
    ) -> bool:
        """Check *value*; return False when it should not be validated further."""

    def then(self, after: "ValidationAdapter") -> "ValidationAdapter":
        """Run *after* only when this adapter accepts the value."""

        if after is None:
            raise ConfigurationError("then() requires an adapter")
        return ChainAdapter(self, after)

    def and_then_multi(self, *others: "ValidationAdapter") -> "ValidationAdapter":
        """Run this adapter and every one of *others* regardless of outcome."""

        members = self.adapters if isinstance(self, MultiAdapter) else (self,)
        for other in others:
            if isinstance(other, NoopAdapter):
                continue
            members += other.adapters if isinstance(other, MultiAdapter) else (other,)
        return MultiAdapter(members)

    def list(self) -> "ValidationAdapter":
        """Apply this adapter to each element of a list, tuple, set or array."""

        return ElementAdapter(self)

    def map_keys(self) -> "ValidationAdapter":
        return MapKeyAdapter(self)

    def map_values(self) -> "ValidationAdapter":
        return MapValueAdapter(self)


@dataclass(frozen=True)
class NoopAdapter(ValidationAdapter):
    """Accepts everything and never touches the request."""

    def validate(self, value, request, property_name=None) -> bool:
        return True


NOOP = NoopAdapter()


@dataclass(frozen=True)
class ChainAdapter(ValidationAdapter):
    """Sequential AND with short-circuit."""

    first: ValidationAdapter
    after: ValidationAdapter

    def validate(self, value, request, property_name=None) -> bool:
        if self.first.validate(value, request, property_name):
            return self.after.validate(value, request, property_name)
        return False


@dataclass(frozen=True)
class MultiAdapter(ValidationAdapter):
    """Fan-out: every member runs; the result is the AND of all members."""

    adapters: Tuple[ValidationAdapter, ...] = ()

    def validate(self, value, request, property_name=None) -> bool:
        valid = True
        for adapter in self.adapters:
            if not adapter.validate(value, request, property_name):
                valid = False
        return valid


def _is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (Mapping,) + _TEXT_TYPES)


@dataclass(frozen=True)
class ElementAdapter(ValidationAdapter):
    """Validate each element, naming it ``property[index]``."""

    element: ValidationAdapter

    def validate(self, value, request, property_name=None) -> bool:
        if not _is_collection(value):
            return True
        valid = True
        for index, item in enumerate(value):
            if not self.element.validate(item, request, index_segment(property_name, index)):
                valid = False
        return valid


@dataclass(frozen=True)
class MapKeyAdapter(ValidationAdapter):
    """Validate each key of a mapping, naming it ``property[key]``."""

    element: ValidationAdapter

    def validate(self, value, request, property_name=None) -> bool:
        if not isinstance(value, Mapping):
            return True
        valid = True
        for key in value:
            if not self.element.validate(key, request, index_segment(property_name, key)):
                valid = False
        return valid


@dataclass(frozen=True)
class MapValueAdapter(ValidationAdapter):
    """Validate each value of a mapping, naming it ``property[key]``."""

    element: ValidationAdapter

    def validate(self, value, request, property_name=None) -> bool:
        if not isinstance(value, Mapping):
            return True
        valid = True
        for key, item in value.items():
            if not self.element.validate(item, request, index_segment(property_name, key)):
                valid = False
        return valid


def read_property(obj: Any, name: str) -> Any:
    """Read *name* from a mapping or an attribute; absent reads as None."""

    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


@dataclass(frozen=True)
class PropertyAdapter:
    """One property of a validated record and the adapter attached to it."""

    name: str
    adapter: ValidationAdapter
    getter: Callable[[Any, str], Any] = field(default=read_property, compare=False)

    def read(self, obj: Any) -> Any:
        return self.getter(obj, self.name)


@dataclass(frozen=True)
class ObjectAdapter(ValidationAdapter):
    """Cascade into a record, validating each declared property in order.

    The property name is pushed onto the request path for the duration of
    the descent and popped on every exit path.
    """

    properties: Tuple[PropertyAdapter, ...] = ()
    type_name: str = "object"

    def validate(self, value, request, property_name=None) -> bool:
        if value is None:
            return True
        valid = True
        with request.path(property_name):
            for prop in self.properties:
                if not prop.adapter.validate(prop.read(value), request, prop.name):
                    valid = False
        return valid


@dataclass(frozen=True)
class CascadeAdapter(ValidationAdapter):
    """Cascade into a value using the adapter registered for its runtime type.

    The lookup happens per call, so self-referencing types build without
    recursing. Cyclic object graphs are not detected.
    """

    resolve: Callable[[type], ValidationAdapter] = field(compare=False)

    def validate(self, value, request, property_name=None) -> bool:
        if value is None:
            return True
        return self.resolve(type(value)).validate(value, request, property_name)


@dataclass(frozen=True)
class ParameterAdapter(ValidationAdapter):
    """Validate a set of bound method arguments, one adapter per parameter."""

    parameters: Tuple[PropertyAdapter, ...] = ()
    type_name: str = "parameters"

    def validate(self, value, request, property_name=None) -> bool:
        arguments = value if isinstance(value, Mapping) else {}
        valid = True
        with request.path(property_name):
            for param in self.parameters:
                if not param.adapter.validate(arguments.get(param.name), request, param.name):
                    valid = False
        return valid


class NullPolicy(Enum):
    """How a constraint treats ``None``."""

    VALID = "valid"  # pass, keep going
    INVALID = "invalid"  # record a violation
    HALT = "halt"  # no violation, but stop chained adapters

    @classmethod
    def parse(cls, raw: Any) -> "NullPolicy":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).lower())
        except ValueError as exc:
            raise ConfigurationError(
                f"Unknown null policy {raw!r}; expected one of {[p.value for p in cls]}"
            ) from exc


@dataclass(frozen=True)
class AdapterCreateRequest:
    """Everything a constraint factory needs to build one adapter."""

    name: str
    attributes: Mapping[str, Any]
    groups: FrozenSet[Hashable]
    message: Message
    context: "ValidationContext"

    def attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)


class ConstraintAdapter(ValidationAdapter):
    """Base for adapters bound to one constraint declaration.

    Subclasses implement :meth:`is_valid`; group gating, null handling and
    violation recording happen here.
    """

    null_policy = NullPolicy.VALID

    def __init__(self, request: AdapterCreateRequest):
        self.name = request.name
        self.message = request.message
        self.groups = request.groups
        if "nulls" in request.attributes:
            self.null_policy = NullPolicy.parse(request.attributes["nulls"])

    @abstractmethod
    def is_valid(self, value: Any) -> bool:
        """Return False when *value* (never None) breaks the constraint."""

    def check(self, value: Any) -> bool:
        return self.is_valid(value)

    def after_violation(self, value: Any) -> bool:
        """Result returned after a violation was recorded for *value*."""

        return False

    def validate(self, value, request, property_name=None) -> bool:
        if not is_active(self.groups, request.groups):
            return True
        if value is None:
            if self.null_policy is NullPolicy.VALID:
                return True
            if self.null_policy is NullPolicy.HALT:
                return False
            request.add_violation(self.message, property_name, value=None, constraint=self.name)
            return False
        if not self.check(value):
            request.add_violation(self.message, property_name, value=value, constraint=self.name)
            return self.after_violation(value)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class PrimitiveAdapter(ConstraintAdapter):
    """Constraint with a separate fast path for plain ``int``/``float`` values.

    Both paths must agree for equal values.
    """

    @abstractmethod
    def is_valid_primitive(self, value: float) -> bool:
        """Check a plain ``int`` or ``float``."""

    def check(self, value: Any) -> bool:
        if type(value) in (int, float):
            return self.is_valid_primitive(value)
        return self.is_valid(value)


__all__ = [
    "AdapterCreateRequest",
    "CascadeAdapter",
    "ChainAdapter",
    "ConstraintAdapter",
    "ElementAdapter",
    "MapKeyAdapter",
    "MapValueAdapter",
    "MultiAdapter",
    "NOOP",
    "NoopAdapter",
    "NullPolicy",
    "ObjectAdapter",
    "ParameterAdapter",
    "PrimitiveAdapter",
    "PropertyAdapter",
    "ValidationAdapter",
    "read_property",
]
