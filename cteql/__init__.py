"""cteql – compose SQL statements out of a main query and named CTEs.

Public API
----------
``CompositeQuery``
    A main query plus plain and recursive Common Table Expressions,
    rendered as one ``WITH [RECURSIVE] …`` statement and executed in a
    single round-trip with the bound parameters of every fragment merged.

``QueryBuilder``
    Mutable single-statement builder tracking its bound parameters.

``Connection``
    Wraps a caller-owned SQLAlchemy connection; creates builders and
    executes the assembled SQL.

Quick start::

    from sqlalchemy import create_engine
    from cteql import CompositeQuery, Connection

    engine = create_engine("sqlite://")
    with engine.connect() as sa_conn:
        composite = CompositeQuery.from_connection(Connection(sa_conn))

        numbers = composite.create_recursive_sub_query("numbers")
        numbers.base.select("1 AS n")
        numbers.recursive.select("n + 1 AS n").from_("numbers").where("n < 5")

        composite.main_query.select("n").from_("numbers")
        composite.execute().scalars().all()  # [1, 2, 3, 4, 5]
"""

from __future__ import annotations

import logging

from cteql.config import CompositeQueryConfig
from cteql.connection import Connection
from cteql.errors import (
    CteQLError,
    DuplicateAliasError,
    InvariantViolationError,
    PreconditionError,
    QueryBuilderError,
    SchemaError,
    SubQueryNotFoundError,
)
from cteql.expression import (
    And,
    Comparison,
    CompositeExpression,
    Expression,
    Expressions,
    In,
    IsNotNull,
    IsNull,
    Not,
    Or,
    SqlExpression,
)
from cteql.query.builder import QueryBuilder
from cteql.query.composite import CompositeQuery, RecursiveSubQuery
from cteql.query.join import JoinInfo, join_onto_cte
from cteql.schema.column import Column
from cteql.schema.converters import table_from_sqlalchemy, tables_from_sqlalchemy
from cteql.schema.tables import ColumnInfo, TableInfo

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core
    "CompositeQuery",
    "RecursiveSubQuery",
    "CompositeQueryConfig",
    "QueryBuilder",
    "Connection",
    # Joins
    "JoinInfo",
    "join_onto_cte",
    # Schema
    "Column",
    "ColumnInfo",
    "TableInfo",
    "table_from_sqlalchemy",
    "tables_from_sqlalchemy",
    # Expressions
    "Expression",
    "Comparison",
    "CompositeExpression",
    "And",
    "Or",
    "Not",
    "In",
    "IsNull",
    "IsNotNull",
    "Expressions",
    "SqlExpression",
    # Errors
    "CteQLError",
    "PreconditionError",
    "SubQueryNotFoundError",
    "InvariantViolationError",
    "DuplicateAliasError",
    "QueryBuilderError",
    "SchemaError",
]
