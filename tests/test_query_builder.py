"""Unit tests for QueryBuilder rendering, parameters and copies."""

from __future__ import annotations

import copy

import pytest
from sqlalchemy import Integer, String

from cteql.errors import QueryBuilderError
from cteql.expression import Comparison, IsNull
from cteql.expression.predicates import In
from cteql.query.builder import QueryBuilder
from cteql.query.parameters import ParameterSequence
from cteql.schema.column import Column


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def test_select_from_aliased_derived_table():
    qb = QueryBuilder().select("memory.foo").from_("(VALUES (1), (2))", "memory (foo)")
    assert qb.get_sql() == "SELECT memory.foo FROM (VALUES (1), (2)) memory (foo)"


def test_empty_builder_selects_star():
    qb = QueryBuilder()
    assert qb.is_empty
    assert qb.get_sql() == "SELECT *"


def test_select_without_from():
    assert QueryBuilder().select("2").get_sql() == "SELECT 2"


def test_add_select_and_distinct():
    qb = QueryBuilder().select("a").add_select("b", Column("c", "t")).from_("t").distinct()
    assert qb.get_sql() == "SELECT DISTINCT a, b, t.c FROM t"


def test_all_clauses_in_order():
    qb = (
        QueryBuilder()
        .select("dept", "COUNT(*)")
        .from_("emp")
        .where("active = 1")
        .group_by("dept")
        .having("COUNT(*) > 1")
        .order_by("dept", "desc")
        .set_max_results(10)
        .set_first_result(5)
    )
    assert qb.get_sql() == (
        "SELECT dept, COUNT(*) FROM emp WHERE active = 1 GROUP BY dept "
        "HAVING COUNT(*) > 1 ORDER BY dept DESC LIMIT 10 OFFSET 5"
    )


def test_order_by_replaces_and_add_order_by_appends():
    qb = QueryBuilder().select("a").from_("t").order_by("a").order_by("b").add_order_by("c", "asc")
    assert qb.get_sql() == "SELECT a FROM t ORDER BY b, c ASC"


def test_rendering_is_repeatable():
    qb = QueryBuilder().select("a").from_("t").where("a > 1")
    assert qb.get_sql() == qb.get_sql() == str(qb)


# ---------------------------------------------------------------------------
# Joins
# ---------------------------------------------------------------------------


def test_joins_follow_their_from_entry():
    qb = (
        QueryBuilder()
        .select("a.id")
        .from_("a")
        .from_("b", "bb")
        .inner_join("bb", "c", "c", "c.id = bb.id")
        .left_join("a", "d", "d", "d.id = a.id")
    )
    assert qb.get_sql() == (
        "SELECT a.id FROM a LEFT JOIN d d ON d.id = a.id, b bb INNER JOIN c c ON c.id = bb.id"
    )


def test_joins_of_joins_nest():
    qb = (
        QueryBuilder()
        .select("*")
        .from_("a")
        .join("a", "b", "b", "b.a_id = a.id")
        .right_join("b", "c", "c", Comparison.equal(Column("b_id", "c"), Column("id", "b")))
    )
    assert qb.get_sql() == (
        "SELECT * FROM a INNER JOIN b b ON b.a_id = a.id RIGHT JOIN c c ON c.b_id = b.id"
    )


def test_join_without_condition():
    qb = QueryBuilder().from_("numbers").inner_join("numbers", "regular", "regular")
    assert qb.get_sql() == "SELECT * FROM numbers INNER JOIN regular regular"


def test_join_on_unknown_alias_raises():
    qb = QueryBuilder().select("a.id").from_("a").inner_join("nope", "b", "b", "1=1")
    with pytest.raises(QueryBuilderError) as exc_info:
        qb.get_sql()
    assert exc_info.value.clause == "JOIN"
    assert "'nope'" in str(exc_info.value)


def test_duplicate_join_alias_raises():
    qb = QueryBuilder().from_("a").inner_join("a", "b", "x").inner_join("a", "c", "x")
    with pytest.raises(QueryBuilderError, match="not unique"):
        qb.get_sql()


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def test_and_where_then_or_where():
    qb = QueryBuilder().select("*").from_("t").where("a = 1").and_where("b = 2")
    assert qb.get_sql() == "SELECT * FROM t WHERE (a = 1) AND (b = 2)"

    qb.or_where("c = 3")
    assert qb.get_sql() == "SELECT * FROM t WHERE ((a = 1) AND (b = 2)) OR (c = 3)"


def test_and_where_without_where():
    qb = QueryBuilder().from_("t").and_where("a = 1")
    assert qb.get_sql() == "SELECT * FROM t WHERE a = 1"


def test_where_replaces_previous_predicates():
    qb = QueryBuilder().from_("t").where("a = 1").and_where("b = 2").where("c = 3")
    assert qb.get_sql() == "SELECT * FROM t WHERE c = 3"


def test_where_accepts_expressions():
    qb = QueryBuilder().from_("t").where(IsNull(Column("x", "t")))
    assert qb.get_sql() == "SELECT * FROM t WHERE t.x IS NULL"


def test_and_having():
    qb = QueryBuilder().select("d").from_("t").group_by("d").having("COUNT(*) > 1").and_having(
        "SUM(x) < 10"
    )
    assert qb.get_sql().endswith("HAVING (COUNT(*) > 1) AND (SUM(x) < 10)")


def test_builder_as_in_operand():
    sub = QueryBuilder().select("id").from_("s")
    assert In("t.id", sub).to_sql() == "t.id IN (SELECT id FROM s)"


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


def test_set_parameter_with_and_without_type():
    qb = QueryBuilder()
    qb.set_parameter("id", 1, Integer)
    qb.set_parameter(":name", "x")
    assert qb.get_parameters() == {"id": 1, "name": "x"}
    assert qb.get_parameter_types() == {"id": Integer}
    assert qb.get_parameter(":id") == 1
    assert qb.get_parameter_type("name") is None

    qb.set_parameter("id", 2)
    assert qb.get_parameter_types() == {}


def test_set_parameters_replaces_everything():
    qb = QueryBuilder().set_parameter("old", 1)
    qb.set_parameters({"a": 1, ":b": "x"}, {"b": String})
    assert qb.get_parameters() == {"a": 1, "b": "x"}
    assert qb.get_parameter_types() == {"b": String}


def test_get_parameters_returns_copies():
    qb = QueryBuilder().set_parameter("a", 1)
    qb.get_parameters()["a"] = 99
    assert qb.get_parameter("a") == 1


def test_named_parameters_are_unique_across_shared_sequence():
    sequence = ParameterSequence()
    first = QueryBuilder(parameter_sequence=sequence)
    second = QueryBuilder(parameter_sequence=sequence)

    assert first.create_named_parameter(10) == ":cteqlValue1"
    assert second.create_named_parameter(20, Integer) == ":cteqlValue2"
    assert first.get_parameters() == {"cteqlValue1": 10}
    assert second.get_parameter_types() == {"cteqlValue2": Integer}


def test_named_parameter_with_explicit_placeholder():
    qb = QueryBuilder()
    assert qb.create_named_parameter("acme", placeholder=":tenant") == ":tenant"
    assert qb.get_parameters() == {"tenant": "acme"}


# ---------------------------------------------------------------------------
# Copies
# ---------------------------------------------------------------------------


def test_copy_is_independent():
    original = QueryBuilder().select("a").from_("t").where("a = 1").set_parameter("x", 1)
    clone = original.copy()

    clone.and_where("b = 2").add_select("b").inner_join("t", "u", "u", "u.id = t.id")
    clone.set_parameter("y", 2)

    assert original.get_sql() == "SELECT a FROM t WHERE a = 1"
    assert original.get_parameters() == {"x": 1}
    assert clone.get_sql() == "SELECT a, b FROM t INNER JOIN u u ON u.id = t.id WHERE (a = 1) AND (b = 2)"


def test_copy_module_uses_builder_copy(connection):
    original = connection.create_query_builder().select("1")
    for clone in (copy.copy(original), copy.deepcopy(original)):
        assert clone is not original
        assert clone.connection is connection
        assert clone.get_sql() == original.get_sql()


def test_copies_share_the_parameter_sequence(connection):
    original = connection.create_query_builder()
    clone = original.copy()
    assert original.create_named_parameter(1) != clone.create_named_parameter(1)


def test_execute_without_connection_raises():
    with pytest.raises(QueryBuilderError):
        QueryBuilder().select("1").execute_query()
