"""Error taxonomy for schema rendering and reconciliation.

Every failure the library reports is a ``SqlowError`` subclass so callers can
branch on the kind without parsing messages.  Rendering and context creation
raise these directly; reconciliation returns them inside
``ReconcileResult.error``.

Usage:
    from sqlow.errors import DefaultTypeMismatch, SqlowError

    try:
        ddl = table.render(context)
    except DefaultTypeMismatch as e:
        print(e.details["column"])
"""

from typing import Any


class SqlowError(Exception):
    """Base class for all sqlow errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            result += f" [{details_str}]"
        if self.cause:
            result += f" (caused by: {self.cause})"
        return result


class UnsupportedDialect(SqlowError):
    """Raised when the requested SQL engine is not supported."""

    pass


class SchemaUninitialized(SqlowError):
    """Raised when rendering or reconciling without a schema context."""

    pass


class PropertyRequired(SqlowError):
    """Raised when a required property (e.g. ENUM values) is missing."""

    pass


class DefaultTypeMismatch(SqlowError):
    """Raised when a default value does not fit its column's storage category."""

    pass


class MultipleAutoIncrement(SqlowError):
    """Raised when a table declares more than one AUTO_INCREMENT column."""

    pass


class TableNotFound(SqlowError):
    """Raised when an update workflow references a table that does not exist."""

    pass


class QueryFailure(SqlowError):
    """Raised when the database client fails; the client error is ``cause``."""

    pass


class UnsupportedModifier(SqlowError):
    """Raised by strict columns when a modifier is not allowed for the type."""

    pass


class InvalidParameter(SqlowError):
    """Raised when a length/precision parameter cannot be rendered."""

    pass


class UnsupportedAlteration(SqlowError):
    """Raised when a live table cannot be brought in line with one ALTER."""

    pass
