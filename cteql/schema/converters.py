"""Utilities for building :class:`TableInfo` models from SQLAlchemy.

Example::

    from sqlalchemy import create_engine
    from cteql.schema.converters import tables_from_sqlalchemy

    engine = create_engine("sqlite:///mydb.db")
    tables = tables_from_sqlalchemy(engine)
    id_column = tables["employees"].column("employee_id")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import MetaData

from cteql.schema.tables import ColumnInfo, TableInfo

if TYPE_CHECKING:
    from sqlalchemy import Engine, Table


def table_from_sqlalchemy(table: Table) -> TableInfo:
    """Convert a SQLAlchemy :class:`~sqlalchemy.schema.Table` to a :class:`TableInfo`.

    Works for declared tables as well as reflected ones.
    """
    return TableInfo(
        name=table.name,
        columns=[
            ColumnInfo(
                name=col.name,
                type=str(col.type),
                # Reflected columns report True/False; treat an unset value
                # (None) as nullable.
                nullable=col.nullable is not False,
            )
            for col in table.columns
        ],
    )


def tables_from_sqlalchemy(
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> dict[str, TableInfo]:
    """Reflect a SQLAlchemy engine into :class:`TableInfo` models.

    Args:
        engine: A SQLAlchemy engine.
        include_tables: Optional allowlist of table names to reflect.
            When ``None`` all tables in the schema are reflected.
        schema: Optional database schema name (e.g. ``"public"`` for
            PostgreSQL), passed to :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        Mapping of table name to :class:`TableInfo`, in dependency order.
    """
    metadata = MetaData()
    with engine.connect() as conn:
        metadata.reflect(bind=conn, only=include_tables, schema=schema)

    return {table.name: table_from_sqlalchemy(table) for table in metadata.sorted_tables}
