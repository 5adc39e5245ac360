"""Runtime configuration for :class:`~cteql.query.composite.CompositeQuery`.

The defaults reproduce the historical behaviour exactly: re-registering an
alias silently replaces the previous sub-query, and the bound parameters of
recursive sub-queries are not merged into the executed statement.

Example: strict aliasing and recursive parameter merging::

    config = CompositeQueryConfig(
        on_duplicate_alias="error",
        merge_recursive_parameters=True,
    )
    composite = CompositeQuery.from_connection(connection, config)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

#: What to do when an alias is registered a second time.
DuplicateAliasPolicy = Literal["replace", "error"]


@dataclass(frozen=True)
class CompositeQueryConfig:
    """Behavioural switches for a composite query.

    Attributes:
        on_duplicate_alias: ``"replace"`` (default) silently overwrites an
            existing entry.  ``"error"`` raises
            :class:`~cteql.errors.DuplicateAliasError` when the alias is
            already registered, in either the plain or the recursive
            registry.
        merge_recursive_parameters: When ``False`` (default) only plain
            sub-queries and the main query contribute bound parameters to
            :meth:`~cteql.query.composite.CompositeQuery.execute`.  When
            ``True`` the anchor and step halves of every recursive
            sub-query are merged as well, after the plain sub-queries and
            before the main query.
    """

    on_duplicate_alias: DuplicateAliasPolicy = "replace"
    merge_recursive_parameters: bool = False

    @property
    def strict_aliases(self) -> bool:
        """True when duplicate aliases must be rejected."""
        return self.on_duplicate_alias == "error"
