"""Clause-level SQL renderers for :class:`~cteql.query.builder.QueryBuilder`.

Each class renders exactly one clause from the builder's
:class:`QueryParts`.  Rendering is pure: the parts are read, never
modified, so a builder can be rendered any number of times.

Classes
-------
SelectClauseBuilder   : ``SELECT [DISTINCT] <items>``
FromClauseBuilder     : ``<table alias> [<type> JOIN … ON …], …``
"""
from __future__ import annotations

from dataclasses import dataclass, field

from cteql.errors import QueryBuilderError
from cteql.expression.predicates import CompositeExpression
from cteql.query.join import JoinType


@dataclass
class FromEntry:
    """One relation in the FROM list."""

    table: str
    alias: str | None = None

    @property
    def key(self) -> str:
        """The name joins refer to: the alias, or the table when unaliased."""
        return self.alias or self.table


@dataclass
class JoinEntry:
    """One join hanging off a FROM entry or another join."""

    type: JoinType
    join: str
    alias: str
    condition: str | None = None


@dataclass
class QueryParts:
    """The mutable state of a single SQL statement.

    Every value is plain text or a container of plain text, so a deep copy
    is a full, independent copy.
    """

    select: list[str] = field(default_factory=list)
    distinct: bool = False
    from_: list[FromEntry] = field(default_factory=list)
    joins: dict[str, list[JoinEntry]] = field(default_factory=dict)
    where: CompositeExpression | None = None
    group_by: list[str] = field(default_factory=list)
    having: CompositeExpression | None = None
    order_by: list[str] = field(default_factory=list)
    max_results: int | None = None
    first_result: int = 0


class SelectClauseBuilder:
    """Builds the ``SELECT [DISTINCT] …`` clause."""

    def build(self, parts: QueryParts) -> str:
        prefix = "SELECT DISTINCT" if parts.distinct else "SELECT"
        if not parts.select:
            return f"{prefix} *"
        return f"{prefix} {', '.join(parts.select)}"


class FromClauseBuilder:
    """Builds the FROM list, with every join placed after its source.

    A join is rendered directly after the FROM entry (or the earlier join)
    whose key equals the join's ``from_alias``; joins of joins nest
    recursively.  Joins whose ``from_alias`` matches nothing are reported
    instead of being dropped.
    """

    def build(self, parts: QueryParts) -> str:
        known: list[str] = []
        rendered: list[str] = []
        for entry in parts.from_:
            sql = entry.table if entry.alias is None else f"{entry.table} {entry.alias}"
            known.append(entry.key)
            sql += self._build_joins(entry.key, parts.joins, known)
            rendered.append(sql)

        dangling = [alias for alias in parts.joins if alias not in known]
        if dangling:
            raise QueryBuilderError(
                f"The given alias '{dangling[0]}' is not part of any FROM or JOIN "
                f"clause table. The currently registered aliases are: {', '.join(known)}.",
                clause="JOIN",
            )
        return ", ".join(rendered)

    def _build_joins(
        self,
        from_alias: str,
        joins: dict[str, list[JoinEntry]],
        known: list[str],
    ) -> str:
        sql = ""
        for join in joins.get(from_alias, []):
            if join.alias in known:
                raise QueryBuilderError(
                    f"The given alias '{join.alias}' is not unique in FROM and JOIN "
                    "clause table.",
                    clause="JOIN",
                )
            known.append(join.alias)
            sql += f" {join.type.value} JOIN {join.join} {join.alias}"
            if join.condition:
                sql += f" ON {join.condition}"
            sql += self._build_joins(join.alias, joins, known)
        return sql
