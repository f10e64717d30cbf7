"""
Database integration package for schemakit.

This package provides:
- Dialect descriptors (quoting, object kinds, locking)
- Catalog queries per dialect
- A synchronous SQL template over one SQLAlchemy connection
"""

from .dialects import (
    CatalogQueries,
    Dialect,
    ObjectKind,
    POSTGRESQL,
    REDSHIFT,
    SNOWFLAKE,
    dialect_for_url,
    get_dialect,
    list_dialects,
    register_dialect,
)
from .connection import ConnectionConfig, DatabaseSession, SqlTemplate
from .catalog import CatalogQuerySet

__all__ = [
    "CatalogQueries",
    "CatalogQuerySet",
    "ConnectionConfig",
    "DatabaseSession",
    "Dialect",
    "ObjectKind",
    "POSTGRESQL",
    "REDSHIFT",
    "SNOWFLAKE",
    "SqlTemplate",
    "dialect_for_url",
    "get_dialect",
    "list_dialects",
    "register_dialect",
]
