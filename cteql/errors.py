"""Custom exception hierarchy for cteql.

All public errors inherit from :class:`CteQLError` so callers can catch the
base class for any cteql-specific failure.

Two severities exist:

* :class:`PreconditionError` and its subclasses signal a caller programming
  error (unknown alias, missing table qualifier, ...).  They are raised
  synchronously, before any SQL is sent to the database.
* Backend errors are *not* part of this hierarchy.  Anything the database
  rejects surfaces as the SQLAlchemy exception raised by the driver.
"""
from __future__ import annotations

from typing import Any, Literal


class CteQLError(Exception):
    """Base exception for all cteql errors."""


class PreconditionError(CteQLError):
    """Raised when a caller violates a precondition of the API.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. ``SUBQUERY_NOT_FOUND``).
        details: Extra context about the violation.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class SubQueryNotFoundError(PreconditionError, LookupError):
    """Raised when a sub-query alias is not registered.

    Args:
        name: The alias that was looked up.
        kind: ``"plain"`` for WITH sub-queries, ``"recursive"`` for
            recursive ones.
        available: Aliases that are registered in the same registry.
    """

    def __init__(
        self,
        name: str,
        kind: Literal["plain", "recursive"] = "plain",
        available: list[str] | None = None,
    ) -> None:
        label = "Subquery" if kind == "plain" else "Recursive subquery"
        super().__init__(
            f'{label} "{name}" does not exist.',
            code="SUBQUERY_NOT_FOUND",
            details={"name": name, "kind": kind, "available": available or []},
        )
        self.name = name
        self.kind = kind


class InvariantViolationError(PreconditionError):
    """Raised when an argument breaks an invariant the caller must uphold."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="INVARIANT_VIOLATION", details=details)


class DuplicateAliasError(PreconditionError):
    """Raised when an alias is registered twice and the config forbids it.

    Only raised with ``CompositeQueryConfig(on_duplicate_alias="error")``;
    the default configuration silently replaces the previous entry.
    """

    def __init__(self, name: str, existing_kind: Literal["plain", "recursive"]) -> None:
        super().__init__(
            f'Alias "{name}" is already registered as a {existing_kind} subquery.',
            code="DUPLICATE_ALIAS",
            details={"name": name, "existing_kind": existing_kind},
        )
        self.name = name


class QueryBuilderError(CteQLError):
    """Raised when a query builder cannot render its SQL.

    Args:
        message: Human-readable description.
        clause: The clause being rendered when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class SchemaError(CteQLError):
    """Raised when table metadata is asked for a column it does not have.

    Args:
        message: Human-readable description.
        details: Extra context (table, column, allowed columns).
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}
