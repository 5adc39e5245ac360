"""Composite queries: a main query plus named (recursive) CTEs.

``CompositeQuery`` owns one main :class:`~cteql.query.builder.QueryBuilder`
and two ordered registries of sub-queries:

* plain sub-queries, rendered as ``name AS (<sql>)``;
* recursive sub-queries, an anchor/step pair rendered as
  ``name AS (<anchor> UNION ALL <step>)``.

Every builder stays independently mutable until :meth:`CompositeQuery.to_sql`
or :meth:`CompositeQuery.execute` renders the statement::

    composite = CompositeQuery.from_connection(connection)
    composite.create_sub_query("active").select("id").from_("users").where("active = 1")
    composite.main_query.select("active.id").from_("active")

    composite.to_sql()
    # WITH active AS (SELECT id FROM users WHERE active = 1) SELECT active.id FROM active

Assembly
--------
1. With both registries empty, the main query's SQL is returned verbatim.
2. Plain sub-queries come first, then recursive ones, each in insertion
   order, joined with ``", "``.
3. The prefix is ``WITH RECURSIVE`` when at least one recursive sub-query
   is registered, ``WITH`` otherwise.

Parameters
----------
:meth:`CompositeQuery.execute` merges the bound parameters of every plain
sub-query (in insertion order) and then the main query on top, later
entries overwriting earlier ones.  Recursive sub-queries only contribute
when ``CompositeQueryConfig.merge_recursive_parameters`` is enabled.

Copies
------
Derived queries (:meth:`~CompositeQuery.copy`, :meth:`~CompositeQuery.map`,
:meth:`~CompositeQuery.move_main_query_to_sub_query`) never share a builder
with the query they were derived from.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal, NamedTuple

from cteql.config import CompositeQueryConfig
from cteql.errors import DuplicateAliasError, InvariantViolationError, SubQueryNotFoundError
from cteql.expression.base import Expression
from cteql.query.builder import QueryBuilder
from cteql.query.join import JoinInfo, join_onto_cte
from cteql.query.parameters import HasParameters, ParameterType, merge_parameters
from cteql.schema.column import Column

if TYPE_CHECKING:
    from sqlalchemy.engine import CursorResult

    from cteql.connection import Connection

logger = logging.getLogger(__name__)


class RecursiveSubQuery(NamedTuple):
    """The two halves of a recursive CTE.

    Attributes:
        base: Anchor query, evaluated once.
        recursive: Step query, referencing the CTE by its own name.
    """

    base: QueryBuilder
    recursive: QueryBuilder

    def copy(self) -> RecursiveSubQuery:
        return RecursiveSubQuery(self.base.copy(), self.recursive.copy())


class CompositeQuery(Expression):
    """A main query composed with named and recursive sub-queries.

    Prefer :meth:`from_connection` over calling the constructor directly.

    Args:
        connection: Connection used to create builders and execute.
        query: The main query builder.
        with_: Plain sub-queries by alias, in rendering order.
        recursive_with: Recursive sub-queries by alias, in rendering order.
        config: Behavioural switches; defaults to ``CompositeQueryConfig()``.
    """

    def __init__(
        self,
        connection: Connection,
        query: QueryBuilder,
        with_: dict[str, QueryBuilder] | None = None,
        recursive_with: dict[str, RecursiveSubQuery] | None = None,
        config: CompositeQueryConfig | None = None,
    ) -> None:
        self._connection = connection
        self._query = query
        self._with: dict[str, QueryBuilder] = dict(with_ or {})
        self._recursive_with: dict[str, RecursiveSubQuery] = dict(recursive_with or {})
        self._config = config or CompositeQueryConfig()

    @classmethod
    def from_connection(
        cls,
        connection: Connection,
        config: CompositeQueryConfig | None = None,
    ) -> CompositeQuery:
        """Start an empty composite query: fresh main query, no sub-queries."""
        return cls(connection, connection.create_query_builder(), config=config)

    # ------------------------------------------------------------------
    # Main query
    # ------------------------------------------------------------------

    @property
    def main_query(self) -> QueryBuilder:
        return self._query

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def config(self) -> CompositeQueryConfig:
        return self._config

    def move_main_query_to_sub_query(self, name: str) -> CompositeQuery:
        """Return a new composite query whose sub-query ``name`` is the current main query.

        The new composite query starts with a fresh, empty main query.
        Existing sub-queries are carried over (as copies) ahead of ``name``;
        this composite query is left untouched.
        """
        moved = self.copy()
        moved._check_alias(name)
        moved._with[name] = moved._query
        moved._query = self._connection.create_query_builder()
        return moved

    # ------------------------------------------------------------------
    # Plain sub-queries
    # ------------------------------------------------------------------

    @property
    def sub_queries(self) -> MappingProxyType[str, QueryBuilder]:
        """Read-only view of the plain sub-queries, in rendering order."""
        return MappingProxyType(self._with)

    def sub_query(self, name: str) -> QueryBuilder:
        """Return the plain sub-query registered as ``name``.

        Raises:
            SubQueryNotFoundError: If ``name`` is not registered.
        """
        try:
            return self._with[name]
        except KeyError:
            raise SubQueryNotFoundError(name, "plain", list(self._with)) from None

    def has_sub_query(self, name: str) -> bool:
        return name in self._with

    def create_sub_query(self, name: str) -> QueryBuilder:
        """Register a fresh builder as ``name`` and return it for mutation."""
        query = self._connection.create_query_builder()
        self.add_sub_query(name, query)
        return query

    def add_sub_query(self, name: str, query_builder: QueryBuilder) -> CompositeQuery:
        """Register ``query_builder`` as the plain sub-query ``name``.

        An existing entry with the same alias is replaced, unless the config
        sets ``on_duplicate_alias="error"``.
        """
        self._check_alias(name)
        if name in self._with:
            logger.debug("Replacing subquery %r", name)
        self._with[name] = query_builder
        return self

    # ------------------------------------------------------------------
    # Recursive sub-queries
    # ------------------------------------------------------------------

    @property
    def recursive_sub_queries(self) -> MappingProxyType[str, RecursiveSubQuery]:
        """Read-only view of the recursive sub-queries, in rendering order."""
        return MappingProxyType(self._recursive_with)

    def recursive_sub_query(self, name: str) -> RecursiveSubQuery:
        """Return both halves of the recursive sub-query ``name``.

        Raises:
            SubQueryNotFoundError: If ``name`` is not registered.
        """
        try:
            return self._recursive_with[name]
        except KeyError:
            raise SubQueryNotFoundError(
                name, "recursive", list(self._recursive_with)
            ) from None

    def recursive_sub_query_base(self, name: str) -> QueryBuilder:
        """Return the anchor half of the recursive sub-query ``name``."""
        return self.recursive_sub_query(name).base

    def recursive_sub_query_recursive(self, name: str) -> QueryBuilder:
        """Return the step half of the recursive sub-query ``name``."""
        return self.recursive_sub_query(name).recursive

    def has_recursive_sub_query(self, name: str) -> bool:
        return name in self._recursive_with

    def create_recursive_sub_query(self, name: str) -> RecursiveSubQuery:
        """Register two fresh builders as the recursive sub-query ``name``."""
        queries = RecursiveSubQuery(
            base=self._connection.create_query_builder(),
            recursive=self._connection.create_query_builder(),
        )
        self.add_recursive_sub_query(name, queries.base, queries.recursive)
        return queries

    def add_recursive_sub_query(
        self,
        name: str,
        base_query: QueryBuilder,
        recursive_query: QueryBuilder,
    ) -> CompositeQuery:
        """Register an anchor/step pair as the recursive sub-query ``name``."""
        self._check_alias(name)
        if name in self._recursive_with:
            logger.debug("Replacing recursive subquery %r", name)
        self._recursive_with[name] = RecursiveSubQuery(base_query, recursive_query)
        return self

    # ------------------------------------------------------------------
    # Alias policy
    # ------------------------------------------------------------------

    def _check_alias(self, name: str) -> None:
        if not name:
            raise InvariantViolationError("Subquery alias must be a non-empty string.")
        if self._config.strict_aliases:
            self._guard_alias(name)

    def _guard_alias(self, name: str) -> None:
        if name in self._with:
            raise DuplicateAliasError(name, "plain")
        if name in self._recursive_with:
            raise DuplicateAliasError(name, "recursive")

    # ------------------------------------------------------------------
    # Join helpers
    # ------------------------------------------------------------------

    def join_onto_cte(
        self,
        with_alias: str,
        from_alias: str,
        column: Column,
        right_column: Column | None = None,
    ) -> JoinInfo:
        """See :func:`cteql.query.join.join_onto_cte`."""
        return join_onto_cte(with_alias, from_alias, column, right_column)

    def join_on_matching_lookup_table_records(
        self,
        sub_query_alias: str,
        sub_query: QueryBuilder,
        join_column: Column,
        target_query: QueryBuilder | None = None,
    ) -> Column:
        """Left join a pre-filtered lookup set and return its join column.

        Use this when the main query searches a table and another query
        already selects the records of interest.  This method:

        * registers ``sub_query`` as the plain sub-query ``sub_query_alias``;
        * left joins it onto ``target_query`` (the main query by default) on
          ``join_column``;
        * returns ``join_column`` bound to the sub-query alias.

        Test the returned column with
        :class:`~cteql.expression.predicates.IsNotNull` to keep matching
        rows, or :class:`~cteql.expression.predicates.IsNull` to keep rows
        without a match.

        Raises:
            InvariantViolationError: If ``join_column`` has no table
                qualifier.
        """
        if not join_column.qualified:
            raise InvariantViolationError(
                "Table name must be set on lookup join column.",
                details={"column": join_column.name},
            )

        self.add_sub_query(sub_query_alias, sub_query)
        target = target_query if target_query is not None else self._query
        target.left_join(*self.join_onto_cte(sub_query_alias, join_column.table, join_column))

        return self.cte_column(sub_query_alias, join_column.name)

    def cte_column(self, with_alias: str, name: str) -> Column:
        """Return the column ``name`` qualified by the CTE ``with_alias``."""
        return Column(name, with_alias)

    # ------------------------------------------------------------------
    # Parameters / execution
    # ------------------------------------------------------------------

    def _parameter_sources(self) -> Iterator[HasParameters]:
        yield from self._with.values()
        if self._config.merge_recursive_parameters:
            for queries in self._recursive_with.values():
                yield queries.base
                yield queries.recursive
        yield self._query

    def get_parameters(self) -> dict[str, Any]:
        """The merged parameter values :meth:`execute` binds."""
        params, _ = merge_parameters(self._parameter_sources())
        return params

    def get_parameter_types(self) -> dict[str, ParameterType]:
        """The merged parameter types :meth:`execute` binds."""
        _, types = merge_parameters(self._parameter_sources())
        return types

    def execute(self) -> CursorResult:
        """Render the full statement and execute it in one round-trip.

        Returns:
            SQLAlchemy's :class:`~sqlalchemy.engine.CursorResult`.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the backend rejects the
                statement.  Errors are not wrapped or retried.
        """
        params, types = merge_parameters(self._parameter_sources())
        sql = self.to_sql()
        logger.debug(
            "Executing composite query with %d subqueries and %d recursive subqueries",
            len(self._with),
            len(self._recursive_with),
        )
        return self._connection.execute_query(sql, params, types)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_sql(self) -> str:
        if not self._with and not self._recursive_with:
            return self._query.get_sql()

        ctes = [f"{alias} AS ({query.get_sql()})" for alias, query in self._with.items()]
        ctes.extend(
            f"{alias} AS ({queries.base.get_sql()} UNION ALL {queries.recursive.get_sql()})"
            for alias, queries in self._recursive_with.items()
        )

        keyword: Literal["WITH RECURSIVE", "WITH"] = (
            "WITH RECURSIVE" if self._recursive_with else "WITH"
        )
        return f"{keyword} {', '.join(ctes)} {self._query.get_sql()}"

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------

    def copy(self) -> CompositeQuery:
        """Return a copy sharing only the connection and config.

        The main query and both halves of every sub-query are copied, so
        mutating either composite afterwards never affects the other.
        """
        return type(self)(
            self._connection,
            self._query.copy(),
            {alias: query.copy() for alias, query in self._with.items()},
            {alias: queries.copy() for alias, queries in self._recursive_with.items()},
            self._config,
        )

    def __copy__(self) -> CompositeQuery:
        return self.copy()

    def __deepcopy__(self, memo: dict) -> CompositeQuery:
        return self.copy()

    def map(self, modifier: Callable[[QueryBuilder], QueryBuilder]) -> CompositeQuery:
        """Immutably map over the main query.

        ``modifier`` receives a copy of the main query and returns the main
        query of the new composite; it may return the copy (mutated or not)
        or a different builder altogether.  This composite is left
        untouched.
        """
        new = self.copy()
        new._query = modifier(new._query)
        return new
