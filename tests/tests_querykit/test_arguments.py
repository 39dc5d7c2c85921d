"""
========================================================
Comprehensive pytest suite for querykit/arguments.py
========================================================

Sections:
---------
1. Unit tests - constructors, predicates, accessors, display strings
2. Integration tests - pair-list builder and from_python coercion
3. Edge case tests - range limits and rejected inputs

How to Execute:
---------------
All tests:          pytest tests/tests_querykit/test_arguments.py -v
By category:        pytest tests/tests_querykit/test_arguments.py -m unit
"""

import math

import pytest

from querykit.arguments import INT64_MAX, INT64_MIN, ArgumentKind, ArgumentValue
from querykit.exceptions import TypeMismatch, UnsupportedConversion
from querykit.statement import Statement

# ===============
# 1. UNIT TESTS
# ===============


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, predicate, kind",
    [
        (ArgumentValue.null(), "is_null", ArgumentKind.NULL),
        (ArgumentValue.boolean(True), "is_bool", ArgumentKind.BOOL),
        (ArgumentValue.integer(3), "is_int", ArgumentKind.INT),
        (ArgumentValue.double(1.5), "is_double", ArgumentKind.DOUBLE),
        (ArgumentValue.string("x"), "is_string", ArgumentKind.STRING),
        (ArgumentValue.list([1]), "is_list", ArgumentKind.LIST),
        (ArgumentValue.pair("a", 1), "is_pair_list", ArgumentKind.PAIR_LIST),
        (ArgumentValue.raw(Statement("SELECT 1")), "is_raw_statement", ArgumentKind.RAW_STATEMENT),
    ],
)
def test_exactly_one_predicate_holds(value, predicate, kind):
    """Each value answers True to its own predicate and False to all others."""
    predicates = [
        "is_null", "is_bool", "is_int", "is_double",
        "is_string", "is_list", "is_pair_list", "is_raw_statement",
    ]
    results = {name: getattr(value, name)() for name in predicates}

    assert results.pop(predicate) is True
    assert not any(results.values())
    assert value.kind is kind


@pytest.mark.unit
def test_accessors_return_held_value():
    """Accessors hand back the stored value for the matching variant."""
    stmt = Statement("SELECT 1")

    assert ArgumentValue.boolean(False).get_bool() is False
    assert ArgumentValue.integer(-9).get_int() == -9
    assert ArgumentValue.double(2.25).get_double() == 2.25
    assert ArgumentValue.string("abc").get_string() == "abc"
    assert ArgumentValue.raw(stmt).get_statement() is stmt
    assert ArgumentValue.list([1, "a"]).get_list() == (
        ArgumentValue.integer(1), ArgumentValue.string("a")
    )
    assert ArgumentValue.pair("k", None).get_pairs() == (("k", ArgumentValue.null()),)


@pytest.mark.unit
def test_accessor_on_wrong_variant_raises_type_mismatch():
    """Requesting another variant fails with TypeMismatch naming both kinds."""
    with pytest.raises(TypeMismatch, match="expected int, value holds string"):
        ArgumentValue.string("7").get_int()

    with pytest.raises(TypeMismatch):
        ArgumentValue.null().get_string()

    with pytest.raises(TypeMismatch):
        ArgumentValue.list([]).get_pairs()


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        (ArgumentValue.boolean(True), "1"),
        (ArgumentValue.boolean(False), "0"),
        (ArgumentValue.integer(-42), "-42"),
        (ArgumentValue.integer(INT64_MAX), "9223372036854775807"),
        (ArgumentValue.double(1.5), "1.5"),
        (ArgumentValue.double(0.1), "0.1"),
        (ArgumentValue.string("it's"), "it's"),
    ],
)
def test_to_display_string_scalars(value, expected):
    """Bool, Int, Double and String convert to their plain text."""
    assert value.to_display_string() == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    [
        ArgumentValue.null(),
        ArgumentValue.list([1, 2]),
        ArgumentValue.pair("a", 1),
        ArgumentValue.raw(Statement("SELECT 1")),
    ],
)
def test_to_display_string_rejects_non_scalars(value):
    """Null, lists, objects and sub-queries have no display string."""
    with pytest.raises(UnsupportedConversion):
        value.to_display_string()


@pytest.mark.unit
def test_type_names_used_in_messages():
    """type_name gives the short name used in error messages."""
    assert ArgumentValue.pair("a", 1).type_name == "object"
    assert ArgumentValue.raw(Statement("SELECT 1")).type_name == "query"
    assert ArgumentValue.double(1.0).type_name == "double"


# =====================
# 2. INTEGRATION TESTS
# =====================


@pytest.mark.integration
def test_pair_builder_accumulates_bindings():
    """Chained calls append bindings in call order."""
    value = ArgumentValue.pair("b", 2)("a", 1)("c", None)

    assert [key for key, _ in value.get_pairs()] == ["b", "a", "c"]
    assert value.get_pairs()[2][1].is_null()


@pytest.mark.integration
def test_pair_builder_returns_new_value():
    """Adding a binding never changes the value it was called on."""
    base = ArgumentValue.pair("a", 1)
    extended = base.with_pair("b", 2)

    assert len(base.get_pairs()) == 1
    assert len(extended.get_pairs()) == 2


@pytest.mark.integration
def test_pair_builder_on_non_pair_list_raises():
    """Only pair lists accept additional bindings."""
    with pytest.raises(TypeMismatch):
        ArgumentValue.integer(1)("a", 2)


@pytest.mark.integration
def test_pairs_keep_mapping_insertion_order():
    """Dicts passed to pairs() keep their insertion order (no sorting)."""
    value = ArgumentValue.pairs({"z": 1, "a": 2})

    assert [key for key, _ in value.get_pairs()] == ["z", "a"]


@pytest.mark.integration
def test_from_python_coerces_nested_structures():
    """Plain Python values map onto matching variants, recursively."""
    stmt = Statement("SELECT 1")
    value = ArgumentValue.from_python([None, True, 1, 1.5, "s", stmt, {"k": [1]}])
    items = value.get_list()

    assert [item.kind for item in items] == [
        ArgumentKind.NULL, ArgumentKind.BOOL, ArgumentKind.INT, ArgumentKind.DOUBLE,
        ArgumentKind.STRING, ArgumentKind.RAW_STATEMENT, ArgumentKind.PAIR_LIST,
    ]
    assert items[6].get_pairs()[0][1].get_list() == (ArgumentValue.integer(1),)


@pytest.mark.integration
def test_from_python_passes_argument_values_through():
    """An existing ArgumentValue is reused as-is."""
    value = ArgumentValue.string("x")

    assert ArgumentValue.from_python(value) is value


# ==================
# 3. EDGE CASE TESTS
# ==================


@pytest.mark.edge_case
def test_integer_range_limits():
    """Integers must fit in a signed 64-bit range."""
    assert ArgumentValue.integer(INT64_MIN).get_int() == INT64_MIN

    with pytest.raises(ValueError):
        ArgumentValue.integer(INT64_MAX + 1)

    with pytest.raises(ValueError):
        ArgumentValue.from_python(INT64_MIN - 1)


@pytest.mark.edge_case
@pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
def test_double_must_be_finite(bad):
    """Non-finite doubles have no SQL literal and are refused up front."""
    with pytest.raises(ValueError):
        ArgumentValue.double(bad)


@pytest.mark.edge_case
def test_bool_is_not_an_integer():
    """True stays a Bool even though bool subclasses int."""
    assert ArgumentValue.from_python(True).is_bool()

    with pytest.raises(TypeError):
        ArgumentValue.integer(True)


@pytest.mark.edge_case
@pytest.mark.parametrize("bad", [b"bytes", {1, 2}, object()])
def test_from_python_rejects_unknown_types(bad):
    """Values with no variant raise TypeError."""
    with pytest.raises(TypeError):
        ArgumentValue.from_python(bad)


@pytest.mark.edge_case
def test_pair_keys_must_be_strings():
    """Keys are identifiers, so they must be str."""
    with pytest.raises(TypeError):
        ArgumentValue.pairs([(1, "a")])


@pytest.mark.edge_case
def test_equality_distinguishes_variants():
    """Int 1, Double 1.0 and Bool True are different arguments."""
    assert ArgumentValue.integer(1) != ArgumentValue.double(1.0)
    assert ArgumentValue.integer(1) != ArgumentValue.boolean(True)
    assert ArgumentValue.integer(1) == ArgumentValue.from_python(1)
    assert len({ArgumentValue.integer(1), ArgumentValue.from_python(1)}) == 1
