# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validation group activation.

A constraint declared with no groups belongs to the default group. A call
that names no groups activates only the default group.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import AbstractSet, Any, FrozenSet, Hashable, Optional

DEFAULT_GROUP = "default"

_DEFAULT_ONLY: FrozenSet[Hashable] = frozenset({DEFAULT_GROUP})


def normalize_groups(groups: Optional[Iterable[Any]]) -> FrozenSet[Hashable]:
    """Return the active group set for a call; empty input means default only."""

    if not groups:
        return _DEFAULT_ONLY
    if isinstance(groups, (str, bytes)) or not isinstance(groups, Iterable):
        return frozenset({groups})
    normalized = frozenset(groups)
    return normalized or _DEFAULT_ONLY


def declared_groups(groups: Optional[Iterable[Any]]) -> FrozenSet[Hashable]:
    """Freeze a constraint's declared groups; an empty set stays empty."""

    if not groups:
        return frozenset()
    if isinstance(groups, (str, bytes)) or not isinstance(groups, Iterable):
        return frozenset({groups})
    return frozenset(groups)


def is_active(declared: AbstractSet[Hashable], active: AbstractSet[Hashable]) -> bool:
    """True when a constraint with *declared* groups runs for the *active* set."""

    if not declared:
        return DEFAULT_GROUP in active
    return not declared.isdisjoint(active)


__all__ = ["DEFAULT_GROUP", "declared_groups", "is_active", "normalize_groups"]
