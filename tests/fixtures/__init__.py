"""Test fixtures: the sample table and helpers for in-line row sets."""

from __future__ import annotations

from sqlalchemy import Column as SAColumn
from sqlalchemy import Integer, MetaData, Table
from sqlalchemy.engine import Connection as SAConnection

from cteql.schema.converters import table_from_sqlalchemy
from cteql.schema.tables import TableInfo

METADATA = MetaData()

#: Single-column table seeded with ids 1, 2 and 3.
COMPOSITE_SA_TABLE = Table(
    "composite_expressions",
    METADATA,
    SAColumn("id", Integer, nullable=False),
)

COMPOSITE_TABLE: TableInfo = table_from_sqlalchemy(COMPOSITE_SA_TABLE)


def seed_composite_table(conn: SAConnection, ids: tuple[int, ...] = (1, 2, 3)) -> None:
    """Create ``composite_expressions`` and insert one row per id."""
    METADATA.create_all(conn)
    conn.execute(COMPOSITE_SA_TABLE.insert(), [{"id": i} for i in ids])


def values_table(*values: int) -> str:
    """Return an in-line row set, e.g. ``(VALUES (1), (2))``.

    SQLite names the single column of such a set ``column1``.
    """
    rows = ", ".join(f"({v})" for v in values)
    return f"(VALUES {rows})"
