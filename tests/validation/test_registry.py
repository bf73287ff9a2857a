# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""
Tests for the constraint factory registry and custom constraints.

Key concepts:
- Built-in kinds are a closed enumeration; custom kinds register by name
- Every factory receives an AdapterCreateRequest (attributes, groups, message, context)
- Primitive fast paths must agree with the general path for equal values
"""
from __future__ import annotations

from decimal import Decimal

import pytest

from fieldguard import ConstraintDeclaration, NullPolicy, Validator, predicate_constraint
from fieldguard.exceptions import ConfigurationError, UnknownConstraintError
from fieldguard.validation import NOOP, ConstraintKind, ConstraintRegistry, MultiAdapter, ValidationContext


def _is_even(value):
    return value % 2 == 0


EVEN = predicate_constraint(_is_even, primitive=_is_even)


def _check(validator, table, record, *groups):
    return validator.check(record, *groups, adapter=validator.schema(table))


def test_custom_constraint_by_name(validator):
    validator.register("Even", EVEN)
    table = {"crew_size": [{"constraint": "Even", "message": "must be even"}]}

    assert _check(validator, table, {"crew_size": 4}) == []
    assert _check(validator, table, {"crew_size": None}) == []

    violations = _check(validator, table, {"crew_size": 3})
    assert [(v.path, v.message, v.constraint) for v in violations] == [("crew_size", "must be even", "Even")]


def test_custom_constraint_default_message_comes_from_bundles():
    validator = Validator(
        factories={"Even": EVEN},
        bundles=[{"en": {"fieldguard.Even.message": "must be an even number"}}],
    )
    violations = _check(validator, {"crew_size": ["Even"]}, {"crew_size": Decimal("3")})
    assert [v.message for v in violations] == ["must be an even number"]


@pytest.mark.parametrize("value", [0, 1, 2, 3, 10.0, 11.0, -4])
def test_primitive_and_general_paths_agree(validator, value):
    validator.register("Even", EVEN)
    adapter = validator.context.adapter("Even")

    assert adapter.is_valid_primitive(value) == adapter.is_valid(value)
    assert adapter.check(value) == adapter.is_valid(Decimal(str(value)))


def test_custom_null_policy(validator):
    validator.register("Present", predicate_constraint(lambda v: True, null_policy=NullPolicy.INVALID))
    assert len(_check(validator, {"name": ["Present"]}, {"name": None})) == 1


def test_factory_receives_the_create_request(validator):
    seen = {}

    def factory(request):
        seen["request"] = request
        return NOOP

    validator.register("Limit", factory)
    validator.schema({"crew": [{"constraint": "Limit", "limit": 3, "groups": ["Strict"], "message": "limit {limit}"}]})

    request = seen["request"]
    assert request.name == "Limit"
    assert request.attribute("limit") == 3
    assert request.attribute("missing", "fallback") == "fallback"
    assert request.groups == frozenset({"Strict"})
    assert request.message.text() == "limit 3"
    assert request.context is validator.context


def test_custom_constraints_respect_groups(validator):
    validator.register("Even", EVEN)
    table = {"crew_size": [{"constraint": "Even", "groups": ["Strict"]}]}

    assert _check(validator, table, {"crew_size": 3}) == []
    assert len(_check(validator, table, {"crew_size": 3}, "Strict")) == 1


def test_factory_must_return_an_adapter(validator):
    validator.register("Broken", lambda request: "nope")

    with pytest.raises(ConfigurationError) as exc:
        validator.schema({"x": ["Broken"]})
    assert "not a ValidationAdapter" in str(exc.value)


def test_builtin_names_require_override(validator):
    replacement = predicate_constraint(lambda v: v != "n/a", null_policy=NullPolicy.INVALID)

    with pytest.raises(ConfigurationError):
        validator.register("NotBlank", replacement)

    validator.register("NotBlank", replacement, override=True)
    assert len(_check(validator, {"name": ["NotBlank"]}, {"name": "n/a"})) == 1
    assert _check(validator, {"name": ["NotBlank"]}, {"name": " "}) == []


@pytest.mark.parametrize("name,factory", [("", EVEN), ("Even", "not callable")])
def test_register_rejects_bad_input(name, factory):
    with pytest.raises(ConfigurationError):
        ConstraintRegistry().register(name, factory)


def test_registry_lists_builtin_and_custom_names():
    registry = ConstraintRegistry({"Even": EVEN})

    assert "Even" in registry.names()
    assert {kind.value for kind in ConstraintKind} <= set(registry.names())
    assert registry.factory("Even") is EVEN
    assert registry.factory("NotNull") is None


def test_unknown_names_fail_with_suggestions():
    context = ValidationContext(registry=ConstraintRegistry({"Even": EVEN}))

    with pytest.raises(UnknownConstraintError) as exc:
        context.create("Evn")
    assert exc.value.suggestions[0] == "Even"

    with pytest.raises(UnknownConstraintError) as exc:
        context.create("Sise")
    assert "Size" in exc.value.suggestions


def test_context_combine():
    context = ValidationContext()

    assert context.combine([]) is NOOP
    assert context.noop() is NOOP
    assert not isinstance(context.combine(["NotNull"]), MultiAdapter)
    combined = context.combine(["NotNull", "NotBlank"])
    assert isinstance(combined, MultiAdapter)
    assert len(combined.adapters) == 2


@pytest.mark.parametrize(
    "raw,name,attributes,groups,message",
    [
        ("NotNull", "NotNull", {}, frozenset(), None),
        ({"Size": {"min": 1, "groups": ["g"]}}, "Size", {"min": 1}, frozenset({"g"}), None),
        ({"Size": None}, "Size", {}, frozenset(), None),
        (
            {"constraint": "Size", "max": 4, "message": "too many"},
            "Size",
            {"max": 4},
            frozenset(),
            "too many",
        ),
    ],
)
def test_declaration_forms(raw, name, attributes, groups, message):
    declaration = ConstraintDeclaration.from_mapping(raw)

    assert declaration.name == name
    assert dict(declaration.attributes) == attributes
    assert declaration.groups == groups
    assert declaration.message == message


def test_declaration_of_separates_groups_and_message():
    declaration = ConstraintDeclaration.of("Min", value=3, groups=["Strict"], message="too small")

    assert dict(declaration.attributes) == {"value": 3}
    assert declaration.groups == frozenset({"Strict"})
    assert declaration.message == "too small"


@pytest.mark.parametrize(
    "raw",
    [42, {"a": 1, "b": 2}, {"constraint": ""}, {"NotBlank": True}, {"Pattern": "abc"}, {"Size": [1, 2]}],
)
def test_malformed_declarations(raw):
    with pytest.raises(ConfigurationError):
        ConstraintDeclaration.from_mapping(raw)


def test_non_mapping_attributes_fail_when_the_table_is_built(validator):
    """
    GIVEN a declaration table whose single-key constraint has a scalar body
    WHEN the table is built
    THEN a ConfigurationError names the constraint
    """
    with pytest.raises(ConfigurationError, match="Pattern"):
        validator.schema({"code": [{"Pattern": "abc"}]})
