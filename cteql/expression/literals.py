"""Literal SQL expressions and expression lists."""
from __future__ import annotations

from cteql.expression.base import Expression, Operand, render


class SqlExpression(Expression):
    """A literal SQL fragment.

    The named constructors take care of rendering::

        SqlExpression.int(42)          # 42
        SqlExpression.string("O'Neil") # 'O''Neil'
        SqlExpression.parameter("id")  # :id
        SqlExpression.raw("NOW()")     # NOW()
    """

    def __init__(self, sql: str) -> None:
        self.sql = sql

    @classmethod
    def raw(cls, sql: str) -> SqlExpression:
        return cls(sql)

    @classmethod
    def int(cls, value: int) -> SqlExpression:
        return cls(str(int(value)))

    @classmethod
    def string(cls, value: str) -> SqlExpression:
        escaped = value.replace("'", "''")
        return cls(f"'{escaped}'")

    @classmethod
    def parameter(cls, name: str) -> SqlExpression:
        """Placeholder for a named bound parameter."""
        return cls(f":{name}")

    @classmethod
    def null(cls) -> SqlExpression:
        return cls("NULL")

    def to_sql(self) -> str:
        return self.sql


class Expressions(Expression):
    """A comma-separated list of operands, e.g. the right side of ``IN``."""

    def __init__(self, *items: Operand) -> None:
        self.items = items

    def __len__(self) -> int:
        return len(self.items)

    def to_sql(self) -> str:
        return ", ".join(render(item) for item in self.items)
