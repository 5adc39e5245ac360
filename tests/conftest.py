"""Shared pytest fixtures for cteql unit and integration tests."""
from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection as SAConnection
from sqlalchemy.engine import Engine

from cteql.connection import Connection
from cteql.query.composite import CompositeQuery
from tests.fixtures import seed_composite_table


@pytest.fixture()
def engine() -> Iterator[Engine]:
    """Fresh in-memory SQLite database per test."""
    engine = create_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture()
def sa_connection(engine: Engine) -> Iterator[SAConnection]:
    with engine.connect() as conn:
        yield conn


@pytest.fixture()
def connection(sa_connection: SAConnection) -> Connection:
    return Connection(sa_connection)


@pytest.fixture()
def composite(connection: Connection) -> CompositeQuery:
    return CompositeQuery.from_connection(connection)


@pytest.fixture()
def db(sa_connection: SAConnection, connection: Connection) -> Connection:
    """Connection to a database holding ``composite_expressions`` rows 1, 2, 3."""
    seed_composite_table(sa_connection)
    return connection
