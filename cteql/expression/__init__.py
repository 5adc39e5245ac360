"""cteql expression layer: renderable SQL predicates and literals."""
from cteql.expression.base import Expression, Operand, SQLRenderable, render
from cteql.expression.comparison import Comparison, ComparisonOp
from cteql.expression.literals import Expressions, SqlExpression
from cteql.expression.predicates import (
    And,
    CompositeExpression,
    In,
    IsNotNull,
    IsNull,
    LogicalOp,
    Not,
    Or,
)

__all__ = [
    "Expression",
    "Operand",
    "SQLRenderable",
    "render",
    "Comparison",
    "ComparisonOp",
    "Expressions",
    "SqlExpression",
    "And",
    "Or",
    "Not",
    "In",
    "IsNull",
    "IsNotNull",
    "CompositeExpression",
    "LogicalOp",
]
