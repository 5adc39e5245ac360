"""Bound-parameter bookkeeping shared by builders and composite queries.

Parameter *types* are SQLAlchemy types (``Integer``, ``String(50)``, ...),
given either as a class or an instance.  They are applied as typed bind
parameters when the statement is executed.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union

from sqlalchemy.types import TypeEngine

#: A SQLAlchemy type class or instance used to bind a parameter.
ParameterType = Union[TypeEngine, type[TypeEngine]]


class HasParameters(Protocol):
    """Anything exposing bound parameters and their types."""

    def get_parameters(self) -> dict[str, Any]: ...

    def get_parameter_types(self) -> dict[str, ParameterType]: ...


@dataclass
class ParameterSequence:
    """Generates placeholder names for :meth:`QueryBuilder.create_named_parameter`.

    A single instance is shared by every builder a
    :class:`~cteql.connection.Connection` creates (and by their copies), so
    generated names stay unique across all fragments of a composite query
    and never overwrite each other when merged.
    """

    prefix: str = "cteqlValue"
    _counter: int = 0

    def next_name(self) -> str:
        self._counter += 1
        return f"{self.prefix}{self._counter}"


def merge_parameters(
    sources: Iterable[HasParameters],
) -> tuple[dict[str, Any], dict[str, ParameterType]]:
    """Merge the parameters and types of several fragments.

    Later sources overwrite earlier ones on key collision.

    Returns:
        ``(params, types)``.
    """
    params: dict[str, Any] = {}
    types: dict[str, ParameterType] = {}
    for source in sources:
        params.update(source.get_parameters())
        types.update(source.get_parameter_types())
    return params, types


def bind_types(
    types: Mapping[str, ParameterType], names: Iterable[str]
) -> dict[str, ParameterType]:
    """Restrict ``types`` to the parameter ``names`` a statement references."""
    wanted = set(names)
    return {name: type_ for name, type_ in types.items() if name in wanted}
