"""cteql schema layer: column references and table metadata."""
from cteql.schema.column import Column
from cteql.schema.converters import table_from_sqlalchemy, tables_from_sqlalchemy
from cteql.schema.tables import ColumnInfo, TableInfo

__all__ = [
    "Column",
    "ColumnInfo",
    "TableInfo",
    "table_from_sqlalchemy",
    "tables_from_sqlalchemy",
]
