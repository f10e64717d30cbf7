"""
Dialect descriptors for schemakit.

A dialect bundles everything that differs between database families:
identifier quoting, the catalog query texts, the object kinds a clean has
to remove, and whether tables can be locked natively.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from ..exceptions import DatabaseConfigurationError, UnsupportedDialectError


logger = logging.getLogger(__name__)


class ObjectKind(str, Enum):
    """Kinds of schema objects a clean knows how to drop."""

    VIEW = "view"
    TABLE = "table"
    STAGE = "stage"
    FILE_FORMAT = "file_format"
    SEQUENCE = "sequence"

    @property
    def keyword(self) -> str:
        """DDL keyword used in DROP statements."""
        return self.value.replace("_", " ").upper()


@dataclass(frozen=True)
class CatalogQueries:
    """Catalog query texts of one dialect.

    Queries use the named bind parameters ``:schema``, ``:table`` and
    ``:column``. Existence queries return a single count, listing queries a
    single column of names.
    """

    schema_exists: str
    table_exists: str
    count_tables: str
    list_tables: str
    column_exists: str
    list_objects: Dict[ObjectKind, str] = field(default_factory=dict)


@dataclass(frozen=True, eq=False)
class Dialect:
    """Immutable capability descriptor of one database family."""

    name: str
    catalog: CatalogQueries
    object_kinds: FrozenSet[ObjectKind]
    quote_char: str = '"'
    supports_locking: bool = False
    lock_template: Optional[str] = None
    aliases: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if ObjectKind.TABLE not in self.object_kinds:
            raise DatabaseConfigurationError(
                f"Dialect '{self.name}' must support {ObjectKind.TABLE.value} objects"
            )
        if self.supports_locking and not self.lock_template:
            raise DatabaseConfigurationError(
                f"Dialect '{self.name}' supports locking but has no lock statement"
            )
        missing = [
            kind.value
            for kind in self.object_kinds
            if kind is not ObjectKind.TABLE and kind not in self.catalog.list_objects
        ]
        if missing:
            raise DatabaseConfigurationError(
                f"Dialect '{self.name}' has no catalog query for: {', '.join(sorted(missing))}"
            )

    def quote_identifier(self, identifier: str) -> str:
        """Quote a single identifier, doubling embedded quote characters."""
        escaped = identifier.replace(self.quote_char, self.quote_char * 2)
        return f"{self.quote_char}{escaped}{self.quote_char}"

    def quote(self, *parts: str) -> str:
        """Quote and join identifier parts, e.g. schema and object name."""
        return ".".join(self.quote_identifier(part) for part in parts)

    def supports(self, kind: ObjectKind) -> bool:
        """Check if objects of this kind exist in this dialect."""
        return kind in self.object_kinds

    def lock_statement(self, quoted_table: str) -> str:
        """Build the statement that locks a table for the current transaction."""
        if not self.supports_locking:
            raise DatabaseConfigurationError(
                f"Dialect '{self.name}' has no native table locking"
            )
        return self.lock_template.format(table=quoted_table)


# ============================================================================
# Reference dialects
# ============================================================================

SNOWFLAKE = Dialect(
    name="snowflake",
    catalog=CatalogQueries(
        schema_exists="SELECT COUNT(*) FROM INFORMATION_SCHEMA.SCHEMATA WHERE SCHEMA_NAME = :schema",
        table_exists=(
            "SELECT COUNT(*) FROM INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE = 'BASE TABLE' AND TABLE_NAME = :table"
        ),
        count_tables=(
            "SELECT COUNT(*) FROM INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE = 'BASE TABLE'"
        ),
        list_tables=(
            "SELECT TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE = 'BASE TABLE'"
        ),
        column_exists=(
            "SELECT COUNT(*) FROM INFORMATION_SCHEMA.COLUMNS "
            "WHERE TABLE_SCHEMA = :schema AND TABLE_NAME = :table AND COLUMN_NAME = :column"
        ),
        list_objects={
            ObjectKind.VIEW: (
                "SELECT TABLE_NAME FROM INFORMATION_SCHEMA.TABLES "
                "WHERE TABLE_SCHEMA = :schema AND TABLE_TYPE = 'VIEW'"
            ),
            ObjectKind.STAGE: (
                "SELECT STAGE_NAME FROM INFORMATION_SCHEMA.STAGES WHERE STAGE_SCHEMA = :schema"
            ),
            ObjectKind.FILE_FORMAT: (
                "SELECT FILE_FORMAT_NAME FROM INFORMATION_SCHEMA.FILE_FORMATS "
                "WHERE FILE_FORMAT_SCHEMA = :schema"
            ),
            ObjectKind.SEQUENCE: (
                "SELECT SEQUENCE_NAME FROM INFORMATION_SCHEMA.SEQUENCES WHERE SEQUENCE_SCHEMA = :schema"
            ),
        },
    ),
    object_kinds=frozenset(ObjectKind),
    supports_locking=False,
)

_POSTGRESQL_CATALOG = CatalogQueries(
    schema_exists="SELECT COUNT(*) FROM information_schema.schemata WHERE schema_name = :schema",
    table_exists=(
        "SELECT COUNT(*) FROM information_schema.tables "
        "WHERE table_schema = :schema AND table_type = 'BASE TABLE' AND table_name = :table"
    ),
    count_tables=(
        "SELECT COUNT(*) FROM information_schema.tables "
        "WHERE table_schema = :schema AND table_type = 'BASE TABLE'"
    ),
    # Partitions go with their parent table, so they are not listed
    list_tables=(
        "SELECT t.table_name FROM information_schema.tables t "
        "WHERE t.table_schema = :schema AND t.table_type = 'BASE TABLE' "
        "AND NOT EXISTS (SELECT 1 FROM pg_catalog.pg_class c "
        "JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
        "WHERE n.nspname = t.table_schema AND c.relname = t.table_name AND c.relispartition)"
    ),
    column_exists=(
        "SELECT COUNT(*) FROM information_schema.columns "
        "WHERE table_schema = :schema AND table_name = :table AND column_name = :column"
    ),
    list_objects={
        ObjectKind.VIEW: "SELECT table_name FROM information_schema.views WHERE table_schema = :schema",
        ObjectKind.SEQUENCE: (
            "SELECT sequence_name FROM information_schema.sequences WHERE sequence_schema = :schema"
        ),
    },
)

POSTGRESQL = Dialect(
    name="postgresql",
    catalog=_POSTGRESQL_CATALOG,
    object_kinds=frozenset({ObjectKind.VIEW, ObjectKind.TABLE, ObjectKind.SEQUENCE}),
    supports_locking=True,
    lock_template="SELECT * FROM {table} FOR UPDATE",
    aliases=frozenset({"postgres"}),
)

# Redshift has no sequences, no SELECT ... FOR UPDATE and no partitions.
# Quoted identifiers are folded to lower case unless
# enable_case_sensitive_identifier is on, so "T1" and "t1" name the same table.
REDSHIFT = Dialect(
    name="redshift",
    catalog=replace(
        _POSTGRESQL_CATALOG,
        list_tables=(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = :schema AND table_type = 'BASE TABLE'"
        ),
        list_objects={ObjectKind.VIEW: _POSTGRESQL_CATALOG.list_objects[ObjectKind.VIEW]},
    ),
    object_kinds=frozenset({ObjectKind.VIEW, ObjectKind.TABLE}),
    supports_locking=True,
    lock_template="DELETE FROM {table} WHERE 1 = 0",
)

_REGISTRY: Dict[str, Dialect] = {}


def register_dialect(dialect: Dialect) -> Dialect:
    """Register a dialect under its name and aliases."""
    for key in {dialect.name, *dialect.aliases}:
        existing = _REGISTRY.get(key)
        if existing is not None and existing is not dialect:
            raise DatabaseConfigurationError(f"Dialect name '{key}' is already registered")
        _REGISTRY[key] = dialect
    logger.debug(f"Registered dialect '{dialect.name}'")
    return dialect


for _dialect in (SNOWFLAKE, POSTGRESQL, REDSHIFT):
    register_dialect(_dialect)


def list_dialects() -> List[str]:
    """List the canonical names of all registered dialects."""
    return sorted({dialect.name for dialect in _REGISTRY.values()})


def get_dialect(name: str) -> Dialect:
    """Get a dialect by name or alias (case-insensitive)."""
    dialect = _REGISTRY.get(name.strip().lower())
    if dialect is None:
        raise UnsupportedDialectError(name, list_dialects())
    return dialect


def dialect_for_url(url: str) -> Dialect:
    """Resolve the dialect from the backend name of a SQLAlchemy URL."""
    try:
        backend = make_url(url).get_backend_name()
    except ArgumentError as e:
        raise DatabaseConfigurationError(f"Invalid database URL: {e}") from e
    return get_dialect(backend)
