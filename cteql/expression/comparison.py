"""Binary comparison expressions."""
from __future__ import annotations

from enum import Enum

from cteql.expression.base import Expression, Operand, render


class ComparisonOp(str, Enum):
    """Binary comparison operators and their SQL spelling."""

    EQ = "="
    NE = "<>"
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="


class Comparison(Expression):
    """``<left> <op> <right>``.

    Use the named constructors rather than the initializer::

        Comparison.equal(Column("id", "orders"), Column("id", "lookup"))
        # orders.id = lookup.id
    """

    def __init__(self, left: Operand, op: ComparisonOp, right: Operand) -> None:
        self.left = left
        self.op = ComparisonOp(op)
        self.right = right

    @classmethod
    def equal(cls, left: Operand, right: Operand) -> Comparison:
        return cls(left, ComparisonOp.EQ, right)

    @classmethod
    def not_equal(cls, left: Operand, right: Operand) -> Comparison:
        return cls(left, ComparisonOp.NE, right)

    @classmethod
    def greater_than(cls, left: Operand, right: Operand) -> Comparison:
        return cls(left, ComparisonOp.GT, right)

    @classmethod
    def greater_than_or_equal(cls, left: Operand, right: Operand) -> Comparison:
        return cls(left, ComparisonOp.GTE, right)

    @classmethod
    def less_than(cls, left: Operand, right: Operand) -> Comparison:
        return cls(left, ComparisonOp.LT, right)

    @classmethod
    def less_than_or_equal(cls, left: Operand, right: Operand) -> Comparison:
        return cls(left, ComparisonOp.LTE, right)

    def to_sql(self) -> str:
        return f"{render(self.left)} {self.op.value} {render(self.right)}"
