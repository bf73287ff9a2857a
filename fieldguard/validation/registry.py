# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Constraint declarations and the factory registry that turns them into adapters."""

from __future__ import annotations

import difflib
import logging
import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Dict, FrozenSet, Hashable, List, Mapping, Optional, Sequence, Union

from ..exceptions import ConfigurationError, UnknownConstraintError
from .adapters import (
    NOOP,
    AdapterCreateRequest,
    ConstraintAdapter,
    NullPolicy,
    PrimitiveAdapter,
    ValidationAdapter,
)
from .constraints import ConstraintKind
from .groups import declared_groups
from .messages import Message, MessageResolver, default_template
from .temporal import Clock, SystemClock

logger = logging.getLogger(__name__)

ConstraintFactory = Callable[[AdapterCreateRequest], ValidationAdapter]

_RESERVED_KEYS = ("constraint", "message", "groups")


@dataclass(frozen=True)
class ConstraintDeclaration:
    """A constraint attached to a property: name, attributes, groups, message."""

    name: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    groups: FrozenSet[Hashable] = frozenset()
    message: Optional[str] = None

    @classmethod
    def of(cls, name: str, **attributes: Any) -> "ConstraintDeclaration":
        groups = attributes.pop("groups", None)
        message = attributes.pop("message", None)
        return cls(name=name, attributes=attributes, groups=declared_groups(groups), message=message)

    @classmethod
    def from_mapping(cls, raw: Union[str, Mapping[str, Any], "ConstraintDeclaration"]) -> "ConstraintDeclaration":
        """Parse ``"NotNull"``, ``{"Size": {"min": 1}}`` or ``{"constraint": "Size", "min": 1}``."""

        if isinstance(raw, ConstraintDeclaration):
            return raw
        if isinstance(raw, str):
            return cls(name=raw)
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Constraint declaration must be a string or mapping, got {raw!r}")

        if "constraint" in raw:
            name = raw["constraint"]
            attributes = {k: v for k, v in raw.items() if k not in _RESERVED_KEYS}
            groups = raw.get("groups")
            message = raw.get("message")
        elif len(raw) == 1:
            name, body = next(iter(raw.items()))
            if body is not None and not isinstance(body, Mapping):
                raise ConfigurationError(f"Attributes for constraint '{name}' must be a mapping, got {body!r}")
            body = dict(body or {})
            groups = body.pop("groups", None)
            message = body.pop("message", None)
            attributes = body
        else:
            raise ConfigurationError(f"Constraint declaration is missing a 'constraint' name: {dict(raw)!r}")

        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Constraint name must be a non-empty string, got {name!r}")
        return cls(name=name, attributes=attributes, groups=declared_groups(groups), message=message)


class ConstraintRegistry:
    """Maps constraint names to factories.

    Built-in kinds come from :class:`ConstraintKind`; custom kinds are
    registered by name. Registration publishes a new table, so lookups
    never need the lock.
    """

    def __init__(self, factories: Optional[Mapping[str, ConstraintFactory]] = None):
        self._lock = threading.Lock()
        self._custom: Dict[str, ConstraintFactory] = {}
        for name, factory in (factories or {}).items():
            self.register(name, factory)

    def register(self, name: str, factory: ConstraintFactory, *, override: bool = False) -> None:
        if not isinstance(name, str) or not name:
            raise ConfigurationError("Constraint name must be a non-empty string")
        if not callable(factory):
            raise ConfigurationError(f"Factory for constraint '{name}' must be callable")
        if ConstraintKind.lookup(name) is not None and not override:
            raise ConfigurationError(
                f"'{name}' is a built-in constraint; pass override=True to replace it"
            )
        with self._lock:
            table = dict(self._custom)
            table[name] = factory
            self._custom = table
        logger.debug("Registered constraint factory '%s'", name)

    def names(self) -> List[str]:
        return sorted({kind.value for kind in ConstraintKind} | set(self._custom))

    def factory(self, name: str) -> Optional[ConstraintFactory]:
        return self._custom.get(name)

    def create(self, declaration: ConstraintDeclaration, context: "ValidationContext") -> ValidationAdapter:
        """Build the adapter for *declaration*; unknown names raise immediately."""

        custom = self._custom.get(declaration.name)
        kind = ConstraintKind.lookup(declaration.name)
        if custom is not None:
            name = declaration.name
            attributes = dict(declaration.attributes)
        elif kind is not None:
            name = kind.value
            attributes = kind.coerce_attributes(declaration.attributes)
        else:
            suggestions = difflib.get_close_matches(declaration.name, self.names(), n=3)
            raise UnknownConstraintError(declaration.name, suggestions)

        template = declaration.message or default_template(name)
        request = AdapterCreateRequest(
            name=name,
            attributes=attributes,
            groups=declaration.groups,
            message=context.message(template, attributes),
            context=context,
        )
        adapter = custom(request) if custom is not None else kind.create(request)
        if not isinstance(adapter, ValidationAdapter):
            raise ConfigurationError(
                f"Factory for constraint '{name}' returned {type(adapter).__name__}, not a ValidationAdapter"
            )
        return adapter


class ValidationContext:
    """What adapter factories can reach: messages, the clock and other adapters."""

    def __init__(
        self,
        resolver: Optional[MessageResolver] = None,
        *,
        clock: Optional[Clock] = None,
        temporal_tolerance: Optional[timedelta] = None,
        registry: Optional[ConstraintRegistry] = None,
    ):
        self.resolver = resolver or MessageResolver()
        self.clock = clock or SystemClock()
        self.temporal_tolerance = temporal_tolerance
        self.registry = registry or ConstraintRegistry()

    def message(self, template: str, attributes: Optional[Mapping[str, Any]] = None) -> Message:
        return self.resolver.message(template, attributes)

    def noop(self) -> ValidationAdapter:
        return NOOP

    def create(self, declaration: Union[str, Mapping[str, Any], ConstraintDeclaration]) -> ValidationAdapter:
        return self.registry.create(ConstraintDeclaration.from_mapping(declaration), self)

    def adapter(self, name: str, **attributes: Any) -> ValidationAdapter:
        """Build one constraint adapter, e.g. ``ctx.adapter("Size", min=1)``."""

        return self.registry.create(ConstraintDeclaration.of(name, **attributes), self)

    def combine(self, declarations: Sequence[Any]) -> ValidationAdapter:
        """All *declarations* on one value; every member runs, in declared order."""

        adapters = [self.create(declaration) for declaration in declarations]
        if not adapters:
            return NOOP
        if len(adapters) == 1:
            return adapters[0]
        return adapters[0].and_then_multi(*adapters[1:])


class _PredicateAdapter(ConstraintAdapter):
    def __init__(self, request: AdapterCreateRequest, predicate: Callable[[Any], bool], null_policy: NullPolicy):
        super().__init__(request)
        self.predicate = predicate
        if "nulls" not in request.attributes:
            self.null_policy = null_policy

    def is_valid(self, value: Any) -> bool:
        return bool(self.predicate(value))


class _PrimitivePredicateAdapter(PrimitiveAdapter):
    def __init__(
        self,
        request: AdapterCreateRequest,
        predicate: Callable[[Any], bool],
        primitive: Callable[[float], bool],
        null_policy: NullPolicy,
    ):
        super().__init__(request)
        self.predicate = predicate
        self.primitive = primitive
        if "nulls" not in request.attributes:
            self.null_policy = null_policy

    def is_valid_primitive(self, value: float) -> bool:
        return bool(self.primitive(value))

    def is_valid(self, value: Any) -> bool:
        return bool(self.predicate(value))


def predicate_constraint(
    predicate: Callable[[Any], bool],
    *,
    primitive: Optional[Callable[[float], bool]] = None,
    null_policy: NullPolicy = NullPolicy.VALID,
) -> ConstraintFactory:
    """Build a constraint factory from a plain predicate.

    ``primitive`` is an optional fast path for ``int``/``float`` values and
    must agree with ``predicate`` for equal values.
    """

    def _factory(request: AdapterCreateRequest) -> ValidationAdapter:
        if primitive is not None:
            return _PrimitivePredicateAdapter(request, predicate, primitive, null_policy)
        return _PredicateAdapter(request, predicate, null_policy)

    return _factory


__all__ = [
    "ConstraintDeclaration",
    "ConstraintFactory",
    "ConstraintRegistry",
    "ValidationContext",
    "predicate_constraint",
]
