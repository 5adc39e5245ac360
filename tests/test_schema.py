"""Unit tests for Column references and table metadata."""

from __future__ import annotations

import pydantic
import pytest

from cteql.errors import SchemaError
from cteql.schema.column import Column
from cteql.schema.tables import ColumnInfo, TableInfo
from tests.fixtures import COMPOSITE_TABLE


def test_parse_qualified_and_bare():
    assert Column.parse("employees.id") == Column("id", "employees")
    assert Column.parse("id") == Column("id")
    assert Column.parse("id").qualified is False


def test_empty_table_is_not_a_qualifier():
    col = Column("id", "")
    assert col.qualified is False
    assert col.to_sql() == "id"


def test_with_table_returns_rebound_copy():
    col = Column("id")
    bound = col.with_table("lookup")
    assert bound == Column("id", "lookup")
    assert col.table is None


def test_rendering():
    col = Column("id", "lookup")
    assert col.to_sql() == "lookup.id"
    assert str(col) == "lookup.id"
    assert col.select() == "lookup.id"
    assert col.select("lookup_id") == "lookup.id AS lookup_id"
    assert Column("id").select() == "id"


def test_table_column_lookup():
    assert COMPOSITE_TABLE.column("id") == Column("id", "composite_expressions")
    assert COMPOSITE_TABLE.select("id") == "composite_expressions.id"
    assert COMPOSITE_TABLE.column_names == ["id"]


def test_unknown_column_raises_schema_error():
    with pytest.raises(SchemaError) as exc_info:
        COMPOSITE_TABLE.column("name")
    assert exc_info.value.details == {
        "table": "composite_expressions",
        "column": "name",
        "allowed_columns": ["id"],
    }


def test_table_info_forbids_extra_fields():
    with pytest.raises(pydantic.ValidationError):
        TableInfo(name="t", columns=[ColumnInfo(name="a", type="TEXT")], alias="x")
