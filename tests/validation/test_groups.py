# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

import pytest

from fieldguard import DEFAULT_GROUP, Validator
from fieldguard.validation.groups import declared_groups, is_active, normalize_groups


class Strict:
    """Group identifiers may be classes as well as strings."""


TABLE = {
    "name": ["NotBlank"],
    "code": [{"constraint": "Size", "min": 3, "groups": ["Strict"]}],
}


def _paths(*groups):
    validator = Validator()
    return [v.path for v in validator.check({"name": "", "code": "x"}, *groups, adapter=validator.schema(TABLE))]


def test_grouped_constraint_is_skipped_for_the_default_group():
    assert _paths() == ["name"]
    assert _paths(DEFAULT_GROUP) == ["name"]


def test_grouped_constraint_fires_when_its_group_is_active():
    assert _paths("Strict") == ["code"]


def test_default_and_explicit_groups_can_be_combined():
    assert _paths("Strict", DEFAULT_GROUP) == ["name", "code"]


def test_unrelated_group_disables_everything():
    assert _paths("Reporting") == []


def test_class_groups():
    validator = Validator()
    adapter = validator.schema({"code": [{"constraint": "NotNull", "groups": [Strict]}]})

    assert validator.check({"code": None}, adapter=adapter) == []
    assert len(validator.check({"code": None}, Strict, adapter=adapter)) == 1


def test_group_gate_runs_before_the_null_policy(validator):
    adapter = validator.schema({"code": [{"constraint": "NotNull", "groups": "Strict"}]})
    assert validator.check({"code": None}, adapter=adapter) == []


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, {DEFAULT_GROUP}),
        ((), {DEFAULT_GROUP}),
        ("Strict", {"Strict"}),
        (["Strict", "Audit"], {"Strict", "Audit"}),
        (Strict, {Strict}),
    ],
)
def test_normalize_groups(raw, expected):
    assert normalize_groups(raw) == frozenset(expected)


def test_declared_groups_keep_empty_as_empty():
    assert declared_groups(None) == frozenset()
    assert declared_groups("Strict") == frozenset({"Strict"})
    assert declared_groups(Strict) == frozenset({Strict})


@pytest.mark.parametrize(
    "declared,active,expected",
    [
        (frozenset(), frozenset({DEFAULT_GROUP}), True),
        (frozenset(), frozenset({"Strict"}), False),
        (frozenset({"Strict"}), frozenset({DEFAULT_GROUP}), False),
        (frozenset({"Strict"}), frozenset({"Strict", "Audit"}), True),
        (frozenset({DEFAULT_GROUP, "Strict"}), frozenset({DEFAULT_GROUP}), True),
    ],
)
def test_is_active(declared, active, expected):
    assert is_active(declared, active) is expected
