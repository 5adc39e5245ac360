"""Typed column reference.

A :class:`Column` couples a column name with the table or alias that
qualifies it.  It is the unit the join helpers operate on: a column can be
re-bound to another alias (for example the alias of a CTE) without touching
its name.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Column:
    """A ``table.column`` or bare ``column`` reference.

    Attributes:
        name: Column name.
        table: Table name or alias qualifier, or ``None`` for unqualified
            references.
    """

    name: str
    table: str | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, ref: str) -> Column:
        """Parse a ``"table.column"`` or bare ``"column"`` string.

        Args:
            ref: The raw column reference.

        Returns:
            A :class:`Column` instance.
        """
        if "." in ref:
            table, name = ref.split(".", 1)
            return cls(name=name, table=table)
        return cls(name=ref)

    def with_table(self, table: str) -> Column:
        """Return a copy of this column qualified by ``table``."""
        return replace(self, table=table)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def qualified(self) -> bool:
        """True when the reference includes a table qualifier."""
        return bool(self.table)

    def to_sql(self) -> str:
        if self.table:
            return f"{self.table}.{self.name}"
        return self.name

    def select(self, alias: str | None = None) -> str:
        """Render the column as a select-list item.

        Args:
            alias: Optional output name.  Defaults to no ``AS`` clause, so
                the database reports the bare column name.

        Returns:
            ``table.name`` or ``table.name AS alias``.
        """
        if alias:
            return f"{self.to_sql()} AS {alias}"
        return self.to_sql()

    def __str__(self) -> str:
        return self.to_sql()
