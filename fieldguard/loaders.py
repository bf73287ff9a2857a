# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Readers for declaration tables and message bundles stored as YAML (or JSON).

Declaration file::

    types:
      myapp.models.Ship:
        name: [NotBlank]
        tasks:
          elements: [NotNull, NotBlank]

Message bundle file::

    en:
      fieldguard.NotNull.message: "is required"
    de:
      fieldguard.NotNull.message: "ist erforderlich"
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from .exceptions import ConfigurationError
from .validation.schema import TypeSchema

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_document(path: PathLike) -> Any:
    """Parse a YAML/JSON document, surfacing every failure as ConfigurationError."""

    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {file_path}: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in {file_path}: {exc}") from exc


def load_message_bundles(path: PathLike) -> Mapping[str, Mapping[str, str]]:
    """Load ``{locale: {key: template}}`` from *path*."""

    document = read_document(path)
    if not isinstance(document, Mapping):
        raise ConfigurationError(f"Message bundle {path} must map locale tags to message tables")
    for locale, table in document.items():
        if not isinstance(table, Mapping):
            raise ConfigurationError(f"Messages for locale '{locale}' in {path} must be a mapping")
    logger.debug("Loaded message bundle %s with locales %s", path, sorted(document))
    return document


def load_constraint_tables(path: PathLike) -> Dict[str, TypeSchema]:
    """Load per-type declaration tables keyed by qualified type name."""

    document = read_document(path)
    if not isinstance(document, Mapping) or not isinstance(document.get("types"), Mapping):
        raise ConfigurationError(f"Declaration file {path} must contain a 'types' mapping")
    tables = {
        str(qualname): TypeSchema.from_mapping(table or {}, name=str(qualname))
        for qualname, table in document["types"].items()
    }
    logger.debug("Loaded %d declaration table(s) from %s", len(tables), path)
    return tables


def resolve_type(qualname: str) -> type:
    """Import ``package.module.Class`` (or ``package.module:Class``)."""

    if ":" in qualname:
        module_name, _, attr_path = qualname.partition(":")
        candidates = [(module_name, attr_path)]
    else:
        parts = qualname.split(".")
        candidates = [(".".join(parts[:i]), ".".join(parts[i:])) for i in range(len(parts) - 1, 0, -1)]

    for module_name, attr_path in candidates:
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        try:
            for attr in attr_path.split("."):
                target = getattr(target, attr)
        except AttributeError:
            continue
        if isinstance(target, type):
            return target
    raise ConfigurationError(f"Cannot resolve type '{qualname}'")


__all__ = [
    "load_constraint_tables",
    "load_message_bundles",
    "read_document",
    "resolve_type",
]
