"""Join descriptors and the CTE join-predicate helper."""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from cteql.expression.comparison import Comparison
from cteql.schema.column import Column


class JoinType(str, Enum):
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class JoinInfo(NamedTuple):
    """Arguments for a builder join call.

    Being a tuple, it can be splatted straight into a join method::

        builder.inner_join(*join_onto_cte("linked2", "linked1", Column("foo")))

    Attributes:
        from_alias: Alias (or unaliased table name) of the FROM entry the
            join hangs off.
        join: Table, CTE name or derived table being joined.
        alias: Alias for the joined relation.
        condition: Rendered ``ON`` condition.
    """

    from_alias: str
    join: str
    alias: str
    condition: str


def join_onto_cte(
    with_alias: str,
    from_alias: str,
    column: Column,
    right_column: Column | None = None,
) -> JoinInfo:
    """Build the join descriptor that correlates ``from_alias`` with a CTE.

    Args:
        with_alias: Name of the CTE to join; also used as its alias.
        from_alias: Alias of the relation the join starts from.
        column: Column compared on the ``from_alias`` side.
        right_column: Column compared on the CTE side.  Defaults to
            ``column``.

    Returns:
        ``JoinInfo`` whose condition is
        ``<from_alias>.<column> = <with_alias>.<right_column>``.
    """
    right_column = right_column or column
    condition = Comparison.equal(
        column.with_table(from_alias),
        right_column.with_table(with_alias),
    )
    return JoinInfo(
        from_alias=from_alias,
        join=with_alias,
        alias=with_alias,
        condition=condition.to_sql(),
    )
