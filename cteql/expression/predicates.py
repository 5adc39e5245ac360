"""Boolean predicates: null checks, membership and logical connectives."""
from __future__ import annotations

from enum import Enum

from cteql.expression.base import Expression, Operand, render


class IsNull(Expression):
    """``<operand> IS NULL``."""

    def __init__(self, operand: Operand) -> None:
        self.operand = operand

    def to_sql(self) -> str:
        return f"{render(self.operand)} IS NULL"


class IsNotNull(Expression):
    """``<operand> IS NOT NULL``."""

    def __init__(self, operand: Operand) -> None:
        self.operand = operand

    def to_sql(self) -> str:
        return f"{render(self.operand)} IS NOT NULL"


class In(Expression):
    """``<operand> IN (<values>)``.

    ``values`` is usually an :class:`~cteql.expression.literals.Expressions`
    list, but any renderable works, including a query builder for
    ``IN (SELECT ...)``.
    """

    def __init__(self, operand: Operand, values: Operand) -> None:
        self.operand = operand
        self.values = values

    def to_sql(self) -> str:
        return f"{render(self.operand)} IN ({render(self.values)})"


class Not(Expression):
    """``NOT (<operand>)``."""

    def __init__(self, operand: Operand) -> None:
        self.operand = operand

    def to_sql(self) -> str:
        return f"NOT ({render(self.operand)})"


class LogicalOp(str, Enum):
    AND = "AND"
    OR = "OR"


class CompositeExpression(Expression):
    """Predicates joined by ``AND`` or ``OR``.

    A single part renders bare; several parts are each parenthesised::

        CompositeExpression.and_("a = 1")             # a = 1
        CompositeExpression.and_("a = 1", "b = 2")    # (a = 1) AND (b = 2)

    Instances are immutable; :meth:`with_` returns a new expression.
    """

    def __init__(self, type_: LogicalOp, *parts: Operand) -> None:
        self.type = LogicalOp(type_)
        self.parts: tuple[Operand, ...] = parts

    @classmethod
    def and_(cls, *parts: Operand) -> CompositeExpression:
        return cls(LogicalOp.AND, *parts)

    @classmethod
    def or_(cls, *parts: Operand) -> CompositeExpression:
        return cls(LogicalOp.OR, *parts)

    def with_(self, *parts: Operand) -> CompositeExpression:
        return CompositeExpression(self.type, *self.parts, *parts)

    def __len__(self) -> int:
        return len(self.parts)

    def to_sql(self) -> str:
        if len(self.parts) == 1:
            return render(self.parts[0])
        return f" {self.type.value} ".join(f"({render(p)})" for p in self.parts)


def And(*parts: Operand) -> CompositeExpression:  # noqa: N802
    """Shorthand for :meth:`CompositeExpression.and_`."""
    return CompositeExpression.and_(*parts)


def Or(*parts: Operand) -> CompositeExpression:  # noqa: N802
    """Shorthand for :meth:`CompositeExpression.or_`."""
    return CompositeExpression.or_(*parts)
