"""
Exception classes for schemakit.
"""

from typing import Any, Dict, Optional


class SchemakitError(Exception):
    """Base exception for all schemakit errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
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


class ConfigurationError(SchemakitError):
    """Raised when there's an error in configuration."""

    pass


class DatabaseError(SchemakitError):
    """Raised when there's an error with database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database engine or connection cannot be opened."""

    pass


class DatabaseConfigurationError(DatabaseError):
    """Raised when there's an error in database configuration."""

    pass


class UnsupportedDialectError(DatabaseConfigurationError):
    """Raised when no dialect is registered under the requested name."""

    def __init__(self, name: str, known: Optional[list] = None) -> None:
        details = {"known": ", ".join(known)} if known else None
        super().__init__(f"Unsupported database dialect '{name}'", details)
        self.name = name


class StatementExecutionError(DatabaseError):
    """Raised when the database rejects a statement (DDL or query)."""

    def __init__(self, sql: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Unable to execute statement: {sql}", cause=cause)
        self.sql = sql


class CatalogQueryError(DatabaseError):
    """Raised when a catalog lookup fails.

    Carries the logical operation and the identifiers it was asked about so
    that a failed lookup is never mistaken for "not found".
    """

    def __init__(
        self,
        operation: str,
        message: str,
        identifiers: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        details = {"operation": operation}
        details.update(identifiers or {})
        super().__init__(message, details, cause)
        self.operation = operation
        self.identifiers = identifiers or {}


class SchemaError(DatabaseError):
    """Raised when there's an error with schema operations."""

    pass


class UnsupportedObjectKindError(SchemaError):
    """Raised when a dialect is asked about an object kind it does not have."""

    def __init__(self, dialect: str, kind: str) -> None:
        super().__init__(f"Dialect '{dialect}' has no {kind} objects")
        self.dialect = dialect
        self.kind = kind


class CleanDisabledError(SchemaError):
    """Raised when clean is requested while it is disabled in configuration."""

    def __init__(self, schema: str) -> None:
        super().__init__(
            f"Unable to clean schema {schema}: clean is disabled in configuration"
        )
        self.schema = schema
