"""Unit tests for TemplateExpander (via fragment.build())."""

from __future__ import annotations

import math

import pytest

from fragql import SqlTag, create_mock_sql_tag
from fragql.errors import UnsupportedValueError
from fragql.template.expander import ExpansionContext, TemplateExpander, same_value
from fragql.template.fragment import Fragment, Primitive
from fragql.template.placeholders import NamedStyle


def _sql() -> SqlTag:
    return create_mock_sql_tag()


def _assert_builds(fragment: Fragment, query: str, values: list[Primitive]) -> None:
    stmt = fragment.build()
    assert stmt.query == query
    assert stmt.values == values


# ---------------------------------------------------------------------------
# Primitives and nesting
# ---------------------------------------------------------------------------


def test_number_value():
    sql = _sql()
    _assert_builds(
        sql("SELECT * FROM users WHERE id = {}", 1),
        "SELECT * FROM users WHERE id = ?1",
        [1],
    )


def test_fragment_without_values_is_inlined():
    sql = _sql()
    _assert_builds(
        sql("SELECT * FROM users WHERE {} IS NULL", sql("column")),
        "SELECT * FROM users WHERE column IS NULL",
        [],
    )


def test_fragment_with_values():
    sql = _sql()
    _assert_builds(
        sql("SELECT * FROM users WHERE {}", sql("column = {}", 123)),
        "SELECT * FROM users WHERE column = ?1",
        [123],
    )


def test_nested_fragments_with_values():
    sql = _sql()
    inner = sql("column = {}", 123)
    outer = sql("{} AND foo = {}", inner, "bar")
    _assert_builds(
        sql("SELECT * FROM users WHERE {}", outer),
        "SELECT * FROM users WHERE column = ?1 AND foo = ?2",
        [123, "bar"],
    )


def test_nested_fragment_is_renumbered_globally():
    sql = _sql()
    inner = sql("b = {}", "x")
    _assert_builds(inner, "b = ?1", ["x"])
    _assert_builds(sql("a = {} AND {}", 5, inner), "a = ?1 AND b = ?2", [5, "x"])


def test_same_fragment_used_twice_shares_placeholder():
    sql = _sql()
    cond = sql("x = {}", 9)
    _assert_builds(sql("{} OR {}", cond, cond), "x = ?1 OR x = ?1", [9])


def test_deeply_nested_fragment():
    sql = _sql()
    frag = sql("v = {}", 0)
    for depth in range(1, 40):
        frag = sql("({} OR v = {})", frag, depth)
    stmt = frag.build()
    assert stmt.values == list(range(40))
    assert stmt.query.count("?") == 40


# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


def test_repeated_value_is_bound_once():
    sql = _sql()
    _assert_builds(
        sql("SELECT * FROM users WHERE foo = {} OR bar = {}", "hello", "hello"),
        "SELECT * FROM users WHERE foo = ?1 OR bar = ?1",
        ["hello"],
    )


def test_repeated_keyword_value_is_bound_once():
    sql = _sql()
    _assert_builds(
        sql("a = {v} OR b = {v}", v=3),
        "a = ?1 OR b = ?1",
        [3],
    )


def test_value_inside_nested_fragment_matches_outer_value():
    sql = _sql()
    _assert_builds(sql("{} OR c = {}", sql("c = {}", 7), 7), "c = ?1 OR c = ?1", [7])


def test_join_with_values_and_repeated_primitive():
    sql = _sql()
    _assert_builds(
        sql(
            "SELECT * FROM users WHERE id IN ({}) AND name = {} AND code = {}",
            sql.join([1, 2]),
            "Alice",
            1,
        ),
        "SELECT * FROM users WHERE id IN (?1, ?2) AND name = ?3 AND code = ?1",
        [1, 2, "Alice"],
    )


def test_join_reuses_earlier_placeholders():
    sql = _sql()
    _assert_builds(
        sql("{} AND id IN ({})", 2, sql.join([1, 2, 3])),
        "?1 AND id IN (?2, ?1, ?3)",
        [2, 1, 3],
    )


def test_distinct_value_count_across_tree():
    sql = _sql()
    shared = sql("tenant = {}", "acme")
    tree = sql(
        "{} AND ({} OR {}) AND id IN ({}) AND flag = {}",
        shared,
        sql("{} AND name = {}", shared, "bob"),
        sql("age > {}", 30),
        sql.join([30, 31, "bob"]),
        None,
    )
    stmt = tree.build()
    assert len(stmt.values) == 5
    assert stmt.values == ["acme", "bob", 30, 31, None]


def test_bool_and_int_are_distinct():
    sql = _sql()
    stmt = sql("{} {}", True, 1).build()
    assert stmt.query == "?1 ?2"
    assert stmt.values[0] is True
    assert stmt.values[1] == 1


def test_int_and_float_share_placeholder():
    sql = _sql()
    _assert_builds(sql("{} {}", 1, 1.0), "?1 ?1", [1])


def test_none_is_deduplicated():
    sql = _sql()
    _assert_builds(sql("{} {}", None, None), "?1 ?1", [None])


def test_nan_is_never_deduplicated():
    sql = _sql()
    stmt = sql("{} {}", math.nan, math.nan).build()
    assert stmt.query == "?1 ?2"
    assert len(stmt.values) == 2


def test_same_value_kinds():
    assert same_value("a", "a")
    assert same_value(b"x", b"x")
    assert not same_value("1", 1)
    assert not same_value(False, 0)
    assert not same_value(None, 0)


def test_expansion_context_indices():
    ctx = ExpansionContext()
    assert ctx.add_value("a") == 1
    assert ctx.add_value("b") == 2
    assert ctx.add_value("a") == 1
    assert ctx.values == ["a", "b"]


# ---------------------------------------------------------------------------
# Join lists
# ---------------------------------------------------------------------------


def test_empty_join_expands_to_null():
    sql = _sql()
    _assert_builds(sql("id IN ({})", sql.join([])), "id IN (NULL)", [])


def test_single_element_join():
    sql = _sql()
    _assert_builds(sql("{}", sql.join(["x"])), "?1", ["x"])


def test_two_element_join():
    sql = _sql()
    _assert_builds(sql("{}", sql.join(["x", "y"])), "?1, ?2", ["x", "y"])


def test_join_accepts_any_iterable():
    sql = _sql()
    _assert_builds(sql("{}", sql.join(n for n in (4, 5))), "?1, ?2", [4, 5])


# ---------------------------------------------------------------------------
# Build properties
# ---------------------------------------------------------------------------


def test_build_is_idempotent():
    sql = _sql()
    frag = sql("a = {} AND b IN ({})", "x", sql.join([1, 2]))
    first = frag.build()
    second = frag.build()
    assert (first.query, first.values) == (second.query, second.values)


def test_unsupported_value_raises_on_build():
    sql = _sql()
    frag = sql("a = {}", object())
    with pytest.raises(UnsupportedValueError):
        frag.build()


def test_dict_value_is_unsupported():
    sql = _sql()
    with pytest.raises(TypeError):
        sql("a = {}", {"k": 1}).build()


def test_named_style_escapes_literal_colons():
    sql = _sql()
    frag = sql("start = '10:30' AND id = {} AND other = {}", 1, sql.join([1, 2]))
    query, values = TemplateExpander(NamedStyle()).expand(frag)
    assert query == "start = '10\\:30' AND id = :p1 AND other = :p1, :p2"
    assert values == [1, 2]
    assert NamedStyle().bind(values) == {"p1": 1, "p2": 2}
