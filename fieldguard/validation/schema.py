# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Declaration tables: which constraints apply to which property.

A table maps property names to value specs::

    {
        "name": ["NotBlank"],
        "tasks": {
            "constraints": [{"constraint": "Size", "min": 1}],
            "elements": ["NotNull", "NotBlank"],
        },
        "crew": {
            "keys": ["NotBlank"],
            "values": {"constraints": ["NotNull"], "valid": True},
        },
    }

``valid`` cascades into the value using the adapter of its runtime type.
Specs nest, so a list of maps of records is expressed by nesting
``elements`` / ``values``.
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple

from ..exceptions import ConfigurationError
from .adapters import (
    NOOP,
    MultiAdapter,
    NoopAdapter,
    ObjectAdapter,
    ParameterAdapter,
    PropertyAdapter,
    ValidationAdapter,
)
from .registry import ConstraintDeclaration, ValidationContext

logger = logging.getLogger(__name__)

SPEC_KEYS = ("constraints", "valid", "elements", "keys", "values")


@dataclass(frozen=True)
class ValueSpec:
    """Constraints on one value plus what to do with what it contains."""

    constraints: Tuple[ConstraintDeclaration, ...] = ()
    valid: bool = False
    elements: Optional["ValueSpec"] = None
    keys: Optional["ValueSpec"] = None
    values: Optional["ValueSpec"] = None

    @classmethod
    def parse(cls, raw: Any, where: str = "value") -> "ValueSpec":
        if raw is None:
            return cls()
        if isinstance(raw, ValueSpec):
            return raw
        if isinstance(raw, (str, ConstraintDeclaration)):
            raw = [raw]
        if isinstance(raw, (list, tuple)):
            return cls(constraints=tuple(ConstraintDeclaration.from_mapping(item) for item in raw))
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Spec for '{where}' must be a list or mapping, got {raw!r}")

        unknown = [key for key in raw if key not in SPEC_KEYS]
        if unknown:
            hints = {key: difflib.get_close_matches(str(key), SPEC_KEYS, n=1) for key in unknown}
            detail = ", ".join(
                f"'{key}'" + (f" (did you mean '{hint[0]}'?)" if hint else "") for key, hint in hints.items()
            )
            raise ConfigurationError(f"Unknown key(s) in spec for '{where}': {detail}")

        constraints = raw.get("constraints") or ()
        if isinstance(constraints, (str, Mapping)):
            constraints = [constraints]
        return cls(
            constraints=tuple(ConstraintDeclaration.from_mapping(item) for item in constraints),
            valid=bool(raw.get("valid", False)),
            elements=cls.parse(raw["elements"], f"{where}[]") if raw.get("elements") is not None else None,
            keys=cls.parse(raw["keys"], f"{where}<key>") if raw.get("keys") is not None else None,
            values=cls.parse(raw["values"], f"{where}<value>") if raw.get("values") is not None else None,
        )

    def build(self, context: ValidationContext, cascade: ValidationAdapter) -> ValidationAdapter:
        """Compose the adapter: own constraints first, then nested checks.

        Nested checks (cascade, elements, keys, values) are skipped when the
        value's own constraints reject it.
        """

        own = context.combine(self.constraints)
        nested = []
        if self.valid:
            nested.append(cascade)
        if self.elements is not None:
            nested.append(self.elements.build(context, cascade).list())
        if self.keys is not None:
            nested.append(self.keys.build(context, cascade).map_keys())
        if self.values is not None:
            nested.append(self.values.build(context, cascade).map_values())

        if not nested:
            return own
        inner = nested[0] if len(nested) == 1 else MultiAdapter(tuple(nested))
        if isinstance(own, NoopAdapter):
            return inner
        return own.then(inner)


@dataclass(frozen=True)
class TypeSchema:
    """Ordered property specs for one record type."""

    name: str
    properties: Tuple[Tuple[str, ValueSpec], ...] = ()

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], name: str = "record") -> "TypeSchema":
        if isinstance(raw, TypeSchema):
            return raw
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Declaration table for '{name}' must be a mapping, got {raw!r}")
        properties = tuple(
            (str(prop), ValueSpec.parse(spec, f"{name}.{prop}")) for prop, spec in raw.items()
        )
        logger.debug("Parsed declaration table for %s with %d properties", name, len(properties))
        return cls(name=name, properties=properties)

    def property_names(self) -> Iterable[str]:
        return [prop for prop, _ in self.properties]

    def _property_adapters(self, context, cascade) -> Tuple[PropertyAdapter, ...]:
        adapters = []
        for prop, spec in self.properties:
            adapter = spec.build(context, cascade)
            if adapter is NOOP:
                continue
            adapters.append(PropertyAdapter(prop, adapter))
        return tuple(adapters)

    def build(self, context: ValidationContext, cascade: ValidationAdapter) -> ValidationAdapter:
        """An :class:`ObjectAdapter` over the declared properties."""

        return ObjectAdapter(self._property_adapters(context, cascade), type_name=self.name)

    def build_parameters(self, context: ValidationContext, cascade: ValidationAdapter) -> ValidationAdapter:
        """A :class:`ParameterAdapter` treating properties as method parameters."""

        return ParameterAdapter(self._property_adapters(context, cascade), type_name=self.name)


__all__ = ["SPEC_KEYS", "TypeSchema", "ValueSpec"]
