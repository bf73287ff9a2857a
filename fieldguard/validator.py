# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""The top-level validator.

A :class:`Validator` owns the constraint registry, the message resolver and
the clock, and holds one adapter graph per validated type. Graphs are built
lazily on first use and published once; after that they are read without
locking by any number of threads.

Example:
    ```python
    validator = Validator()
    validator.register_type(Ship, {
        "name": ["NotBlank"],
        "tasks": {"elements": ["NotNull"]},
    })

    violations = validator.check(Ship(name="", tasks=["a", None]))
    assert [v.path for v in violations] == ["name", "tasks[1]"]
    ```
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Union

from .config import ValidatorConfig
from .exceptions import ConfigurationError, ConstraintViolationError
from .loaders import load_constraint_tables, load_message_bundles, resolve_type
from .telemetry import adapter_build_total, get_tracer, record_validation_metrics
from .validation.adapters import NOOP, CascadeAdapter, ValidationAdapter
from .validation.base import ValidationRequest, ValidationResult, Violation
from .validation.messages import MessageResolver, normalize_locale
from .validation.registry import ConstraintFactory, ConstraintRegistry, ValidationContext
from .validation.schema import TypeSchema
from .validation.temporal import Clock

logger = logging.getLogger(__name__)

TypeSource = Union[TypeSchema, Mapping[str, Any], ValidationAdapter, Callable[[ValidationContext], ValidationAdapter]]

_CONSTRAINTS_ATTR = "__constraints__"


class Validator:
    """Validate object graphs against declared constraints."""

    def __init__(
        self,
        config: Optional[ValidatorConfig] = None,
        *,
        clock: Optional[Clock] = None,
        bundles: Optional[List[Mapping[str, Mapping[str, str]]]] = None,
        factories: Optional[Mapping[str, ConstraintFactory]] = None,
        types: Optional[Mapping[type, TypeSource]] = None,
    ):
        self.config = config or ValidatorConfig()

        layered = [load_message_bundles(path) for path in self.config.resource_bundles]
        layered.extend(bundles or [])
        resolver = MessageResolver(self.config.default_locale, self.config.added_locales, layered)

        self._context = ValidationContext(
            resolver,
            clock=clock,
            temporal_tolerance=self.config.temporal_tolerance,
            registry=ConstraintRegistry(factories),
        )
        self._lock = threading.RLock()
        self._sources: Dict[type, TypeSource] = {}
        self._adapters: Dict[type, ValidationAdapter] = {}
        self._cascade = CascadeAdapter(self.type_adapter)

        for cls, source in (types or {}).items():
            self.register_type(cls, source)

        logger.debug(
            "Validator ready: fail_fast=%s locales=%s tolerance=%s",
            self.config.fail_fast,
            resolver.locales,
            self.config.temporal_tolerance,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "Validator":
        return cls(ValidatorConfig.from_env(), **kwargs)

    # ------------------------------------------------------------------
    # Configuration surface
    # ------------------------------------------------------------------

    @property
    def context(self) -> ValidationContext:
        return self._context

    @property
    def fail_fast(self) -> bool:
        return self.config.fail_fast

    def register(self, name: str, factory: ConstraintFactory, *, override: bool = False) -> None:
        """Register a custom constraint factory under *name*."""

        self._context.registry.register(name, factory, override=override)

    def register_type(self, cls: type, source: TypeSource) -> None:
        """Attach a declaration table, adapter or adapter factory to *cls*."""

        if not isinstance(cls, type):
            raise ConfigurationError(f"register_type() expects a class, got {cls!r}")
        with self._lock:
            self._sources[cls] = source
            # Subclasses may have resolved through the old source.
            self._adapters = {}
        logger.debug("Registered validation source for %s", cls.__qualname__)

    def load_types(self, path: str) -> List[type]:
        """Register every type listed in a YAML declaration file."""

        registered = []
        for qualname, schema in load_constraint_tables(path).items():
            cls = resolve_type(qualname)
            self.register_type(cls, schema)
            registered.append(cls)
        return registered

    # ------------------------------------------------------------------
    # Adapter graphs
    # ------------------------------------------------------------------

    def schema(self, table: Union[TypeSchema, Mapping[str, Any]], name: str = "record") -> ValidationAdapter:
        """Build an adapter for an ad-hoc record shape (e.g. a plain dict)."""

        return TypeSchema.from_mapping(table, name=name).build(self._context, self._cascade)

    def parameters(self, table: Union[TypeSchema, Mapping[str, Any]], name: str = "parameters") -> ValidationAdapter:
        """Build an adapter for a method's bound arguments."""

        return TypeSchema.from_mapping(table, name=name).build_parameters(self._context, self._cascade)

    def type_adapter(self, cls: type) -> ValidationAdapter:
        """Return the adapter graph for *cls*, building it on first use."""

        adapter = self._adapters.get(cls)
        if adapter is not None:
            return adapter
        with self._lock:
            adapter = self._adapters.get(cls)
            if adapter is None:
                adapter = self._build(cls)
                published = dict(self._adapters)
                published[cls] = adapter
                self._adapters = published
        return adapter

    def _find_source(self, cls: type) -> Optional[TypeSource]:
        for base in cls.__mro__:
            if base in self._sources:
                return self._sources[base]
        return getattr(cls, _CONSTRAINTS_ATTR, None)

    def _build(self, cls: type) -> ValidationAdapter:
        source = self._find_source(cls)
        if source is None:
            return NOOP
        if isinstance(source, ValidationAdapter):
            adapter = source
        elif isinstance(source, (TypeSchema, Mapping)):
            adapter = TypeSchema.from_mapping(source, name=cls.__qualname__).build(self._context, self._cascade)
        elif callable(source):
            adapter = source(self._context)
            if not isinstance(adapter, ValidationAdapter):
                raise ConfigurationError(
                    f"Adapter factory for {cls.__qualname__} returned {type(adapter).__name__}"
                )
        else:
            raise ConfigurationError(f"Unsupported validation source for {cls.__qualname__}: {source!r}")

        adapter_build_total.add(1, {"type": cls.__qualname__})
        logger.debug("Built adapter graph for %s", cls.__qualname__)
        return adapter

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _locale(self, locale: Optional[str]) -> Optional[str]:
        if locale is None:
            return None
        normalized = normalize_locale(locale)
        if not self._context.resolver.supports(normalized):
            logger.debug("Locale %s not configured; resolving through fallback chain", normalized)
        return normalized

    def check(
        self,
        value: Any,
        *groups: Hashable,
        locale: Optional[str] = None,
        adapter: Optional[ValidationAdapter] = None,
    ) -> List[Violation]:
        """Validate *value* and return the ordered violations (empty when valid)."""

        graph = adapter if adapter is not None else self.type_adapter(type(value))
        label = getattr(graph, "type_name", None) or type(value).__name__
        request = ValidationRequest(groups, locale=self._locale(locale), fail_fast=self.config.fail_fast)

        started = time.perf_counter()
        with get_tracer().start_as_current_span(
            f"fieldguard.validate:{label}",
            attributes={"fieldguard.type": label, "fieldguard.fail_fast": request.fail_fast},
        ) as span:
            try:
                graph.validate(value, request, None)
            except ConstraintViolationError:
                if not request.fail_fast:
                    raise
            violations = request.violations
            span.set_attribute("fieldguard.violations", len(violations))

        record_validation_metrics(label, len(violations), started)
        return violations

    def validate(
        self,
        value: Any,
        *groups: Hashable,
        locale: Optional[str] = None,
        adapter: Optional[ValidationAdapter] = None,
    ) -> ValidationResult:
        """Validate *value*; raise :class:`ConstraintViolationError` on any violation."""

        result = ValidationResult(self.check(value, *groups, locale=locale, adapter=adapter))
        result.raise_for_violations()
        return result


__all__ = ["TypeSource", "Validator"]
