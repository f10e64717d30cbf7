"""
schemakit: dialect-aware schema inspection and cleanup.

schemakit lets a migration tool check, create, drop and empty database
schemas without knowing the SQL of the target database.
"""

__version__ = "0.1.0"
__author__ = "schemakit Contributors"

from .config import SchemakitConfig
from .database import DatabaseSession, Dialect, ObjectKind, SqlTemplate, get_dialect
from .exceptions import (
    CatalogQueryError,
    ConfigurationError,
    DatabaseError,
    SchemakitError,
    StatementExecutionError,
)
from .schema import CleanResult, Schema, Table

__all__ = [
    "__version__",
    "CatalogQueryError",
    "CleanResult",
    "ConfigurationError",
    "DatabaseError",
    "DatabaseSession",
    "Dialect",
    "ObjectKind",
    "Schema",
    "SchemakitConfig",
    "SchemakitError",
    "SqlTemplate",
    "StatementExecutionError",
    "Table",
    "get_dialect",
]
