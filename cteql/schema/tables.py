"""Pydantic models describing tables and their columns.

Table metadata is only needed to produce qualified :class:`Column`
references for joins and select lists; cteql never validates SQL against
it.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from cteql.errors import SchemaError
from cteql.schema.column import Column


class ColumnInfo(BaseModel):
    """Metadata for a single column.

    Attributes:
        name: Column name.
        type: SQL type string (e.g. ``'TEXT'``, ``'INTEGER'``).
        nullable: Whether the column can be NULL.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str
    nullable: bool = True


class TableInfo(BaseModel):
    """Metadata for a single table.

    Attributes:
        name: Table name.
        columns: Ordered list of column metadata.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    columns: list[ColumnInfo]

    @property
    def column_names(self) -> list[str]:
        """Returns all column names for this table."""
        return [c.name for c in self.columns]

    def has_column(self, name: str) -> bool:
        return name in self.column_names

    def column(self, name: str) -> Column:
        """Return a :class:`Column` for ``name`` qualified by this table.

        Args:
            name: The column to look up.

        Returns:
            ``Column(name, table=self.name)``.

        Raises:
            SchemaError: If the table has no such column.
        """
        if not self.has_column(name):
            raise SchemaError(
                f"Column '{name}' does not exist on table '{self.name}'.",
                details={
                    "table": self.name,
                    "column": name,
                    "allowed_columns": self.column_names,
                },
            )
        return Column(name, self.name)

    def select(self, name: str, alias: str | None = None) -> str:
        """Shortcut for ``table.column(name).select(alias)``."""
        return self.column(name).select(alias)
