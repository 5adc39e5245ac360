"""Expression base class and operand rendering."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class SQLRenderable(Protocol):
    """Anything that renders itself to a SQL fragment."""

    def to_sql(self) -> str: ...


class Expression(ABC):
    """A SQL fragment that renders to text.

    Expressions are immutable value objects; rendering never has side
    effects and can be repeated.
    """

    @abstractmethod
    def to_sql(self) -> str:
        """Return the SQL text of this expression."""

    def __str__(self) -> str:
        return self.to_sql()


#: An operand is either raw SQL text or anything with ``to_sql()``
#: (expressions, :class:`~cteql.schema.column.Column`, builders).
Operand = Union[SQLRenderable, str]


def render(operand: Operand) -> str:
    """Render an operand to SQL text."""
    if isinstance(operand, str):
        return operand
    return operand.to_sql()
