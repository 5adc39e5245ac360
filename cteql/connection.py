"""Connection collaborator: builder factory and statement execution.

:class:`Connection` wraps a SQLAlchemy connection owned by the caller.
cteql never opens, commits or closes it; transactions and connection
lifecycle stay with the application::

    engine = create_engine("sqlite://")
    with engine.connect() as sa_conn:
        connection = Connection(sa_conn)
        composite = CompositeQuery.from_connection(connection)
        ...
        rows = composite.execute().mappings().all()

Statements are executed as :func:`sqlalchemy.text` constructs, so
placeholders use the ``:name`` style on every backend.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import bindparam, text

from cteql.query.builder import QueryBuilder
from cteql.query.parameters import ParameterSequence, ParameterType, bind_types

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection as SAConnection
    from sqlalchemy.engine import CursorResult

logger = logging.getLogger(__name__)


class Connection:
    """Creates query builders and executes final SQL text.

    Args:
        bind: An open SQLAlchemy :class:`~sqlalchemy.engine.Connection`.
    """

    def __init__(self, bind: SAConnection) -> None:
        self._bind = bind
        self._sequence = ParameterSequence()

    @property
    def bind(self) -> SAConnection:
        return self._bind

    @property
    def dialect_name(self) -> str:
        """Backend name reported by SQLAlchemy (``'sqlite'``, ``'postgresql'``, ...)."""
        return self._bind.dialect.name

    def create_query_builder(self) -> QueryBuilder:
        """Return a fresh, empty builder bound to this connection."""
        return QueryBuilder(self, self._sequence)

    def execute_query(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
        types: dict[str, ParameterType] | None = None,
    ) -> CursorResult:
        """Execute ``sql`` and return SQLAlchemy's result unchanged.

        Args:
            sql: The statement, with ``:name`` placeholders.
            params: Values for the placeholders.
            types: SQLAlchemy types for some or all placeholders.  Types for
                names the statement does not reference are ignored.

        Returns:
            A :class:`~sqlalchemy.engine.CursorResult`; the caller owns it.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: Whatever the backend raises,
                unwrapped.
        """
        statement = text(sql)
        typed = bind_types(types or {}, statement.compile().params)
        if typed:
            statement = statement.bindparams(
                *(bindparam(name, type_=type_) for name, type_ in typed.items())
            )

        logger.debug("Executing %s with parameters %s", sql, sorted(params or {}))
        return self._bind.execute(statement, params or {})
