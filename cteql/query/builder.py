"""Mutable single-statement SQL query builder.

``QueryBuilder`` holds the shape of one ``SELECT`` statement (select list,
sources, joins, predicates, ordering, paging) together with the values and
types of the parameters it binds.  Every mutator returns the builder so
calls can be chained::

    builder = connection.create_query_builder()
    builder.select("e.id", "e.name").from_("employees", "e").where(
        Comparison.equal("e.department_id", builder.create_named_parameter(3))
    )
    builder.get_sql()
    # SELECT e.id, e.name FROM employees e WHERE e.department_id = :cteqlValue1

Predicates and select items may be plain SQL strings or any object with a
``to_sql()`` method; they are rendered when they are added.

Clause order
------------
``SELECT`` → ``FROM``/``JOIN`` → ``WHERE`` → ``GROUP BY`` → ``HAVING`` →
``ORDER BY`` → ``LIMIT`` → ``OFFSET``, separated by single spaces.
"""

from __future__ import annotations

import copy as _copy
from typing import TYPE_CHECKING, Any

from cteql.errors import QueryBuilderError
from cteql.expression.base import Operand, render
from cteql.expression.predicates import CompositeExpression, LogicalOp
from cteql.query.clause_builders import (
    FromClauseBuilder,
    FromEntry,
    JoinEntry,
    QueryParts,
    SelectClauseBuilder,
)
from cteql.query.join import JoinType
from cteql.query.parameters import ParameterSequence, ParameterType

if TYPE_CHECKING:
    from sqlalchemy.engine import CursorResult

    from cteql.connection import Connection


class QueryBuilder:
    """Builds one SQL statement and tracks its bound parameters.

    Args:
        connection: Connection used by :meth:`execute_query`.  Optional;
            a builder without a connection can still render SQL.
        parameter_sequence: Name generator for
            :meth:`create_named_parameter`.  Builders created by the same
            :class:`~cteql.connection.Connection` share one sequence.
    """

    _select_builder = SelectClauseBuilder()
    _from_builder = FromClauseBuilder()

    def __init__(
        self,
        connection: Connection | None = None,
        parameter_sequence: ParameterSequence | None = None,
    ) -> None:
        self._connection = connection
        self._sequence = parameter_sequence or ParameterSequence()
        self._parts = QueryParts()
        self._params: dict[str, Any] = {}
        self._types: dict[str, ParameterType] = {}

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def select(self, *expressions: Operand) -> QueryBuilder:
        """Replace the select list."""
        self._parts.select = [render(e) for e in expressions]
        return self

    def add_select(self, *expressions: Operand) -> QueryBuilder:
        self._parts.select.extend(render(e) for e in expressions)
        return self

    def distinct(self, distinct: bool = True) -> QueryBuilder:
        self._parts.distinct = distinct
        return self

    # ------------------------------------------------------------------
    # FROM / JOIN
    # ------------------------------------------------------------------

    def from_(self, table: str, alias: str | None = None) -> QueryBuilder:
        """Add a relation to the FROM list.

        Args:
            table: Table name, CTE name or parenthesised derived table.
            alias: Optional alias, rendered as ``table alias``.
        """
        self._parts.from_.append(FromEntry(table, alias))
        return self

    def join(
        self, from_alias: str, join: str, alias: str, condition: Operand | None = None
    ) -> QueryBuilder:
        """Alias of :meth:`inner_join`."""
        return self.inner_join(from_alias, join, alias, condition)

    def inner_join(
        self, from_alias: str, join: str, alias: str, condition: Operand | None = None
    ) -> QueryBuilder:
        return self._add_join(JoinType.INNER, from_alias, join, alias, condition)

    def left_join(
        self, from_alias: str, join: str, alias: str, condition: Operand | None = None
    ) -> QueryBuilder:
        return self._add_join(JoinType.LEFT, from_alias, join, alias, condition)

    def right_join(
        self, from_alias: str, join: str, alias: str, condition: Operand | None = None
    ) -> QueryBuilder:
        return self._add_join(JoinType.RIGHT, from_alias, join, alias, condition)

    def _add_join(
        self,
        type_: JoinType,
        from_alias: str,
        join: str,
        alias: str,
        condition: Operand | None,
    ) -> QueryBuilder:
        entry = JoinEntry(
            type=type_,
            join=join,
            alias=alias,
            condition=render(condition) if condition is not None else None,
        )
        self._parts.joins.setdefault(from_alias, []).append(entry)
        return self

    # ------------------------------------------------------------------
    # WHERE / GROUP BY / HAVING
    # ------------------------------------------------------------------

    def where(self, *predicates: Operand) -> QueryBuilder:
        """Replace the WHERE clause with the AND of ``predicates``."""
        self._parts.where = CompositeExpression.and_(*(render(p) for p in predicates))
        return self

    def and_where(self, *predicates: Operand) -> QueryBuilder:
        self._parts.where = self._combine(self._parts.where, LogicalOp.AND, predicates)
        return self

    def or_where(self, *predicates: Operand) -> QueryBuilder:
        self._parts.where = self._combine(self._parts.where, LogicalOp.OR, predicates)
        return self

    def group_by(self, *expressions: Operand) -> QueryBuilder:
        self._parts.group_by = [render(e) for e in expressions]
        return self

    def add_group_by(self, *expressions: Operand) -> QueryBuilder:
        self._parts.group_by.extend(render(e) for e in expressions)
        return self

    def having(self, *predicates: Operand) -> QueryBuilder:
        self._parts.having = CompositeExpression.and_(*(render(p) for p in predicates))
        return self

    def and_having(self, *predicates: Operand) -> QueryBuilder:
        self._parts.having = self._combine(self._parts.having, LogicalOp.AND, predicates)
        return self

    def or_having(self, *predicates: Operand) -> QueryBuilder:
        self._parts.having = self._combine(self._parts.having, LogicalOp.OR, predicates)
        return self

    @staticmethod
    def _combine(
        current: CompositeExpression | None,
        type_: LogicalOp,
        predicates: tuple[Operand, ...],
    ) -> CompositeExpression:
        rendered = [render(p) for p in predicates]
        if current is None or len(current) == 0:
            return CompositeExpression(type_, *rendered)
        if current.type == type_:
            return current.with_(*rendered)
        # Mixing AND/OR: the existing clause becomes a single operand.
        return CompositeExpression(type_, current.to_sql(), *rendered)

    # ------------------------------------------------------------------
    # ORDER BY / LIMIT / OFFSET
    # ------------------------------------------------------------------

    def order_by(self, sort: Operand, order: str | None = None) -> QueryBuilder:
        """Replace the ORDER BY clause."""
        self._parts.order_by = []
        return self.add_order_by(sort, order)

    def add_order_by(self, sort: Operand, order: str | None = None) -> QueryBuilder:
        item = render(sort)
        if order:
            item = f"{item} {order.upper()}"
        self._parts.order_by.append(item)
        return self

    def set_max_results(self, max_results: int | None) -> QueryBuilder:
        """Set the LIMIT; ``None`` removes it."""
        self._parts.max_results = max_results
        return self

    def set_first_result(self, first_result: int) -> QueryBuilder:
        """Set the OFFSET; ``0`` removes it."""
        self._parts.first_result = first_result
        return self

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def set_parameter(
        self, key: str, value: Any, type_: ParameterType | None = None
    ) -> QueryBuilder:
        """Bind ``value`` to the ``:key`` placeholder.

        Args:
            key: Parameter name, with or without the leading colon.
            value: The value to bind.
            type_: Optional SQLAlchemy type; omitting it clears a previously
                set type for ``key``.
        """
        key = key.lstrip(":")
        self._params[key] = value
        if type_ is None:
            self._types.pop(key, None)
        else:
            self._types[key] = type_
        return self

    def set_parameters(
        self,
        params: dict[str, Any],
        types: dict[str, ParameterType] | None = None,
    ) -> QueryBuilder:
        """Replace all bound parameters and their types."""
        self._params = {k.lstrip(":"): v for k, v in params.items()}
        self._types = {k.lstrip(":"): t for k, t in (types or {}).items()}
        return self

    def get_parameter(self, key: str) -> Any:
        return self._params.get(key.lstrip(":"))

    def get_parameters(self) -> dict[str, Any]:
        return dict(self._params)

    def get_parameter_type(self, key: str) -> ParameterType | None:
        return self._types.get(key.lstrip(":"))

    def get_parameter_types(self) -> dict[str, ParameterType]:
        return dict(self._types)

    def create_named_parameter(
        self,
        value: Any,
        type_: ParameterType | None = None,
        placeholder: str | None = None,
    ) -> str:
        """Bind ``value`` under a generated (or given) name.

        Returns:
            The placeholder to embed in SQL, e.g. ``":cteqlValue1"``.
        """
        name = placeholder.lstrip(":") if placeholder else self._sequence.next_name()
        self.set_parameter(name, value, type_)
        return f":{name}"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def get_sql(self) -> str:
        """Render the statement.

        Raises:
            QueryBuilderError: If a join refers to an alias that is not part
                of the FROM or JOIN clauses.
        """
        p = self._parts
        parts: list[str] = [self._select_builder.build(p)]

        from_sql = self._from_builder.build(p)
        if from_sql:
            parts.append(f"FROM {from_sql}")

        if p.where is not None and len(p.where):
            parts.append(f"WHERE {p.where.to_sql()}")

        if p.group_by:
            parts.append(f"GROUP BY {', '.join(p.group_by)}")

        if p.having is not None and len(p.having):
            parts.append(f"HAVING {p.having.to_sql()}")

        if p.order_by:
            parts.append(f"ORDER BY {', '.join(p.order_by)}")

        if p.max_results is not None:
            parts.append(f"LIMIT {p.max_results}")

        if p.first_result:
            parts.append(f"OFFSET {p.first_result}")

        return " ".join(parts)

    def to_sql(self) -> str:
        """Render the statement; lets a builder be used as an operand."""
        return self.get_sql()

    def __str__(self) -> str:
        return self.get_sql()

    @property
    def is_empty(self) -> bool:
        """True while nothing has been selected, sourced or filtered."""
        p = self._parts
        return not (p.select or p.from_ or p.joins or p.where or p.group_by or p.having)

    # ------------------------------------------------------------------
    # Copy / execution
    # ------------------------------------------------------------------

    @property
    def connection(self) -> Connection | None:
        return self._connection

    def copy(self) -> QueryBuilder:
        """Return an independent copy.

        Statement parts and parameter maps are copied; the connection and
        the parameter-name sequence are shared.
        """
        new = type(self)(self._connection, self._sequence)
        new._parts = _copy.deepcopy(self._parts)
        new._params = dict(self._params)
        new._types = dict(self._types)
        return new

    def __copy__(self) -> QueryBuilder:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> QueryBuilder:
        return self.copy()

    def execute_query(self) -> CursorResult:
        """Execute this statement alone through its connection.

        Raises:
            QueryBuilderError: If the builder has no connection.
        """
        if self._connection is None:
            raise QueryBuilderError("QueryBuilder has no connection to execute on.")
        return self._connection.execute_query(
            self.get_sql(), self.get_parameters(), self.get_parameter_types()
        )
