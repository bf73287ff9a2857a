# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Localized violation messages.

Templates are plain strings with ``{token}`` placeholders. A token naming a
constraint attribute (``{min}``, ``{max}``, ``{value}``) is replaced by the
attribute value; any other token is looked up as a bundle key for the active
locale (``{fieldguard.Size.message}``). Unknown tokens are left untouched.

Messages are resolved for every configured locale when an adapter is built,
so a validation call only performs a dictionary lookup.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en"

_LOCALE_TAG = re.compile(r"^[A-Za-z]{2,8}([-_][A-Za-z0-9]{1,8})*$")
_TOKEN = re.compile(r"\{([^{}]+)\}")
_MAX_NESTING = 5


def _key(name: str) -> str:
    return f"fieldguard.{name}.message"


DEFAULT_BUNDLES: Mapping[str, Mapping[str, str]] = {
    "en": {
        _key("NotNull"): "must not be null",
        _key("Null"): "must be null",
        _key("AssertTrue"): "must be true",
        _key("AssertFalse"): "must be false",
        _key("NotBlank"): "must not be blank",
        _key("NotEmpty"): "must not be empty",
        _key("Size"): "size must be between {min} and {max}",
        _key("Pattern"): 'must match "{regexp}"',
        _key("Email"): "must be a well-formed email address",
        _key("Min"): "must be greater than or equal to {value}",
        _key("Max"): "must be less than or equal to {value}",
        _key("Positive"): "must be greater than 0",
        _key("PositiveOrZero"): "must be greater than or equal to 0",
        _key("Negative"): "must be less than 0",
        _key("NegativeOrZero"): "must be less than or equal to 0",
        _key("Past"): "must be a past date",
        _key("PastOrPresent"): "must be a date in the past or in the present",
        _key("Future"): "must be a future date",
        _key("FutureOrPresent"): "must be a date in the present or in the future",
    },
    "de": {
        _key("NotNull"): "darf nicht null sein",
        _key("Null"): "muss null sein",
        _key("AssertTrue"): "muss wahr sein",
        _key("AssertFalse"): "muss falsch sein",
        _key("NotBlank"): "darf nicht leer sein",
        _key("NotEmpty"): "darf nicht leer sein",
        _key("Size"): "Größe muss zwischen {min} und {max} sein",
        _key("Pattern"): 'muss auf "{regexp}" passen',
        _key("Email"): "muss eine korrekt formatierte E-Mail-Adresse sein",
        _key("Min"): "muss größer oder gleich {value} sein",
        _key("Max"): "muss kleiner oder gleich {value} sein",
        _key("Positive"): "muss größer als 0 sein",
        _key("PositiveOrZero"): "muss größer oder gleich 0 sein",
        _key("Negative"): "muss kleiner als 0 sein",
        _key("NegativeOrZero"): "muss kleiner oder gleich 0 sein",
        _key("Past"): "muss ein Datum in der Vergangenheit sein",
        _key("PastOrPresent"): "muss ein Datum in der Vergangenheit oder in der Gegenwart sein",
        _key("Future"): "muss ein Datum in der Zukunft sein",
        _key("FutureOrPresent"): "muss ein Datum in der Gegenwart oder in der Zukunft sein",
    },
}


def default_template(constraint_name: str) -> str:
    """The bundle-key template used when a declaration carries no message."""

    return "{" + _key(constraint_name) + "}"


def normalize_locale(tag: str) -> str:
    """Validate a locale tag and return it in lower-case, hyphenated form."""

    if not isinstance(tag, str) or not _LOCALE_TAG.match(tag.strip()):
        raise ConfigurationError(f"Invalid locale tag: {tag!r}")
    return tag.strip().replace("_", "-").lower()


def _format_attribute(value: Any) -> str:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(_format_attribute(item) for item in value)
    return str(value)


class Message:
    """A message template bound to constraint attributes.

    Text is pre-resolved for the resolver's configured locales; other locales
    are resolved on demand through the resolver's fallback chain.
    """

    __slots__ = ("template", "attributes", "_resolver", "_resolved")

    def __init__(self, template: str, attributes: Mapping[str, Any], resolver: "MessageResolver"):
        self.template = template
        self.attributes = dict(attributes)
        self._resolver = resolver
        self._resolved: Dict[str, str] = {
            locale: resolver.interpolate(template, self.attributes, locale)
            for locale in resolver.locales
        }

    def text(self, locale: Optional[str] = None) -> str:
        """Return the message text for *locale* (default locale when omitted)."""

        if locale is None:
            return self._resolved[self._resolver.default_locale]
        resolved = self._resolved.get(locale)
        if resolved is not None:
            return resolved
        return self._resolver.interpolate(self.template, self.attributes, locale)

    def __repr__(self) -> str:
        return f"Message({self.template!r})"


class MessageResolver:
    """Resolve message templates against layered, per-locale bundles."""

    def __init__(
        self,
        default_locale: str = FALLBACK_LOCALE,
        locales: Sequence[str] = (),
        bundles: Iterable[Mapping[str, Mapping[str, str]]] = (),
    ):
        self.default_locale = normalize_locale(default_locale)
        ordered: List[str] = [self.default_locale]
        for tag in locales:
            normalized = normalize_locale(tag)
            if normalized not in ordered:
                ordered.append(normalized)
        self.locales: Tuple[str, ...] = tuple(ordered)

        self._bundles: Dict[str, Dict[str, str]] = {}
        self.add_bundle(DEFAULT_BUNDLES)
        for bundle in bundles:
            self.add_bundle(bundle)

        logger.debug(
            "Message resolver ready: default=%s locales=%s bundle_locales=%s",
            self.default_locale,
            self.locales,
            sorted(self._bundles),
        )

    def add_bundle(self, bundle: Mapping[str, Mapping[str, str]]) -> None:
        """Layer *bundle* over existing ones; later keys win."""

        if not isinstance(bundle, Mapping):
            raise ConfigurationError("Message bundle must map locale tags to message tables")
        for tag, table in bundle.items():
            if not isinstance(table, Mapping):
                raise ConfigurationError(f"Messages for locale '{tag}' must be a mapping")
            target = self._bundles.setdefault(normalize_locale(tag), {})
            target.update({str(k): str(v) for k, v in table.items()})

    def candidates(self, locale: Optional[str]) -> List[str]:
        """Lookup order for *locale*: exact tag, its language, default, fallback."""

        chain: List[str] = []
        for tag in (locale, self.default_locale, FALLBACK_LOCALE):
            if not tag:
                continue
            tag = tag.replace("_", "-").lower()
            for candidate in (tag, tag.split("-", 1)[0]):
                if candidate not in chain:
                    chain.append(candidate)
        return chain

    def lookup(self, key: str, locale: Optional[str] = None) -> Optional[str]:
        for candidate in self.candidates(locale):
            table = self._bundles.get(candidate)
            if table is not None and key in table:
                return table[key]
        return None

    def interpolate(
        self,
        template: str,
        attributes: Mapping[str, Any],
        locale: Optional[str] = None,
        _depth: int = 0,
    ) -> str:
        """Replace attribute and bundle-key tokens in *template*."""

        def _replace(match: "re.Match[str]") -> str:
            token = match.group(1)
            if token in attributes:
                return _format_attribute(attributes[token])
            found = self.lookup(token, locale)
            if found is None or _depth >= _MAX_NESTING:
                return match.group(0)
            return self.interpolate(found, attributes, locale, _depth + 1)

        return _TOKEN.sub(_replace, template)

    def message(self, template: str, attributes: Optional[Mapping[str, Any]] = None) -> Message:
        """Bind *template* to *attributes* and pre-resolve it for every locale."""

        return Message(template, attributes or {}, self)

    def supports(self, locale: str) -> bool:
        return locale.replace("_", "-").lower() in self.locales


__all__ = [
    "DEFAULT_BUNDLES",
    "FALLBACK_LOCALE",
    "Message",
    "MessageResolver",
    "default_template",
    "normalize_locale",
]
