# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

from decimal import Decimal

import pytest

from fieldguard import Validator
from fieldguard.exceptions import ConfigurationError, UnknownConstraintError
from fieldguard.validation import ValidationRequest


def _check(table, record, *groups):
    validator = Validator()
    return validator.check(record, *groups, adapter=validator.schema(table))


def _constraints(violations):
    return [(violation.path, violation.constraint) for violation in violations]


def test_not_null_rejects_null_and_accepts_any_value():
    violations = _check({"name": ["NotNull"]}, {"name": None})

    assert len(violations) == 1
    assert violations[0].path == "name"
    assert violations[0].message == "must not be null"
    assert violations[0].constraint == "NotNull"

    for value in ("", 0, False, [], "Argo"):
        assert _check({"name": ["NotNull"]}, {"name": value}) == []


def test_missing_mapping_key_reads_as_null():
    assert _constraints(_check({"name": ["NotNull"]}, {})) == [("name", "NotNull")]


def test_non_null_alias_builds_not_null():
    violations = _check({"name": ["NonNull"]}, {"name": None})
    assert _constraints(violations) == [("name", "NotNull")]


def test_null_requires_absence():
    assert _check({"legacy": ["Null"]}, {"legacy": None}) == []
    violations = _check({"legacy": ["Null"]}, {"legacy": "set"})
    assert violations[0].message == "must be null"


@pytest.mark.parametrize(
    "kind,value,expected",
    [
        ("AssertTrue", True, []),
        ("AssertTrue", False, ["must be true"]),
        ("AssertTrue", None, []),
        ("AssertFalse", False, []),
        ("AssertFalse", True, ["must be false"]),
        ("AssertFalse", None, []),
        ("AssertTrue", "yes", []),
    ],
)
def test_boolean_assertions(kind, value, expected):
    violations = _check({"flag": [kind]}, {"flag": value})
    assert [v.message for v in violations] == expected


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n", b"  "])
def test_not_blank_rejects_null_and_whitespace(value):
    violations = _check({"name": ["NotBlank"]}, {"name": value})
    assert [v.message for v in violations] == ["must not be blank"]


@pytest.mark.parametrize("value", ["a", " a ", b"x", 42])
def test_not_blank_accepts_text_with_content_and_other_shapes(value):
    assert _check({"name": ["NotBlank"]}, {"name": value}) == []


@pytest.mark.parametrize("value", [None, "", [], (), {}, set(), b""])
def test_not_empty_rejects_null_and_zero_length(value):
    violations = _check({"items": ["NotEmpty"]}, {"items": value})
    assert [v.message for v in violations] == ["must not be empty"]


@pytest.mark.parametrize("value", [" ", [None], {"k": 1}, 0])
def test_not_empty_accepts_non_empty_and_unsized(value):
    assert _check({"items": ["NotEmpty"]}, {"items": value}) == []


def test_size_treats_null_as_valid_but_rejects_empty_collection():
    table = {"tasks": [{"constraint": "Size", "min": 1, "max": 3}]}

    assert _check(table, {"tasks": None}) == []
    assert _check(table, {"tasks": ["a"]}) == []

    violations = _check(table, {"tasks": []})
    assert _constraints(violations) == [("tasks", "Size")]
    assert violations[0].message == "size must be between 1 and 3"


@pytest.mark.parametrize(
    "value,valid",
    [("ab", True), ("abcd", False), ({"a": 1, "b": 2, "c": 3, "d": 4}, False), ((1, 2), True), (42, True)],
)
def test_size_measures_text_collections_and_mappings(value, valid):
    table = {"value": [{"constraint": "Size", "min": 1, "max": 3}]}
    assert (_check(table, {"value": value}) == []) is valid


def test_size_null_policy_can_be_overridden():
    table = {"tasks": [{"constraint": "Size", "min": 1, "nulls": "invalid"}]}
    assert _constraints(_check(table, {"tasks": None})) == [("tasks", "Size")]


def test_halt_null_policy_stops_without_recording(validator):
    adapter = validator.context.adapter("Size", min=1, nulls="halt")
    request = ValidationRequest()

    assert adapter.validate(None, request, "tasks") is False
    assert request.violations == []


def test_pattern_requires_a_full_match_and_passes_null():
    table = {"code": [{"constraint": "Pattern", "regexp": "^[a-z]+$"}]}

    assert _check(table, {"code": "abc"}) == []
    assert _check(table, {"code": None}) == []

    violations = _check(table, {"code": "ABC"})
    assert violations[0].message == 'must match "^[a-z]+$"'

    partial = {"code": [{"constraint": "Pattern", "regexp": "[a-z]+"}]}
    assert len(_check(partial, {"code": "abc1"})) == 1


@pytest.mark.parametrize("flags", ["CASE_INSENSITIVE", ["IGNORECASE"], ["i"]])
def test_pattern_flags_are_applied(flags):
    table = {"code": [{"constraint": "Pattern", "regexp": "[a-z]+", "flags": flags}]}
    assert _check(table, {"code": "ABC"}) == []


def test_pattern_accepts_flags_without_python_equivalent():
    table = {"code": [{"constraint": "Pattern", "regexp": "[a-z]+", "flags": ["UNICODE_CASE", "CANON_EQ"]}]}
    assert _check(table, {"code": "abc"}) == []


@pytest.mark.parametrize(
    "value,valid",
    [
        ("ops@example.com", True),
        ("first.last+tag@mail.example.org", True),
        ("not-an-email", False),
        ("missing@", False),
        ("", True),
        (None, True),
    ],
)
def test_email(value, valid):
    violations = _check({"contact": ["Email"]}, {"contact": value})
    assert (violations == []) is valid


def test_email_can_be_narrowed_with_a_pattern():
    table = {"contact": [{"constraint": "Email", "regexp": r".*@example\.com"}]}

    assert _check(table, {"contact": "ops@example.com"}) == []
    assert len(_check(table, {"contact": "ops@elsewhere.org"})) == 1


@pytest.mark.parametrize(
    "kind,bound,value,valid",
    [
        ("Min", 10, 10, True),
        ("Min", 10, 9, False),
        ("Min", 10, 9.99, False),
        ("Min", 10, Decimal("10.5"), True),
        ("Min", 10, Decimal("9.5"), False),
        ("Max", 10, 10, True),
        ("Max", 10, 11, False),
        ("Max", 10, Decimal("NaN"), False),
        ("Min", 10, True, True),
        ("Min", 10, "text", True),
        ("Max", 10, None, True),
    ],
)
def test_numeric_bounds(kind, bound, value, valid):
    table = {"count": [{"constraint": kind, "value": bound}]}
    assert (_check(table, {"count": value}) == []) is valid


def test_bound_message_interpolates_value():
    violations = _check({"count": [{"constraint": "Min", "value": 5}]}, {"count": 1})
    assert violations[0].message == "must be greater than or equal to 5"


@pytest.mark.parametrize(
    "kind,value,valid",
    [
        ("Positive", 1, True),
        ("Positive", 0, False),
        ("Positive", -1, False),
        ("Positive", Decimal("0.01"), True),
        ("Positive", float("nan"), False),
        ("PositiveOrZero", 0, True),
        ("PositiveOrZero", -0.5, False),
        ("Negative", -0.5, True),
        ("Negative", 0, False),
        ("NegativeOrZero", 0, True),
        ("NegativeOrZero", Decimal("1"), False),
        ("Positive", None, True),
        ("Positive", False, True),
    ],
)
def test_sign_constraints(kind, value, valid):
    assert (_check({"count": [kind]}, {"count": value}) == []) is valid


def test_constraints_on_one_property_all_run_in_declared_order():
    table = {"code": ["NotBlank", {"constraint": "Size", "min": 3}, {"constraint": "Pattern", "regexp": "[A-Z]+"}]}

    violations = _check(table, {"code": " "})

    assert [v.constraint for v in violations] == ["NotBlank", "Size", "Pattern"]


# ---------------------------------------------------------------------------
# Construction-time errors
# ---------------------------------------------------------------------------


def _build(table):
    Validator().schema(table)


@pytest.mark.parametrize(
    "table,fragment",
    [
        ({"tasks": [{"constraint": "Size", "min": -1}]}, "invalid bounds"),
        ({"tasks": [{"constraint": "Size", "min": 3, "max": 1}]}, "invalid bounds"),
        ({"tasks": [{"constraint": "Size", "min": "one"}]}, "has invalid attribute 'min'"),
        ({"tasks": [{"constraint": "Size", "mni": 1}]}, "did you mean 'min'"),
        ({"code": ["Pattern"]}, "requires attribute 'regexp'"),
        ({"code": [{"constraint": "Pattern", "regexp": "["}]}, "Invalid regex pattern"),
        ({"code": [{"constraint": "Pattern", "regexp": "a", "flags": ["BOGUS"]}]}, "has invalid attribute 'flags'"),
        ({"count": ["Min"]}, "requires attribute 'value'"),
        ({"count": [{"constraint": "Max", "value": "ten"}]}, "has invalid attribute 'value'"),
        ({"count": [{"constraint": "Size", "nulls": "sometimes"}]}, "Unknown null policy"),
    ],
)
def test_malformed_declarations_fail_at_build_time(table, fragment):
    with pytest.raises(ConfigurationError) as exc:
        _build(table)
    assert fragment in str(exc.value)


def test_unknown_constraint_suggests_close_matches():
    with pytest.raises(UnknownConstraintError) as exc:
        _build({"name": ["NotBlnk"]})

    assert isinstance(exc.value, ConfigurationError)
    assert exc.value.name == "NotBlnk"
    assert "NotBlank" in exc.value.suggestions
    assert "did you mean" in str(exc.value)
