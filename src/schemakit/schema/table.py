"""
Table entity for schemakit.

A ``Table`` is a live view of one relation: every call goes to the catalog,
nothing is cached, and two instances naming the same relation are equal.
"""

import logging
from dataclasses import dataclass, field

from ..database.catalog import CatalogQuerySet
from ..database.connection import SqlTemplate
from ..database.dialects import Dialect, ObjectKind


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Table:
    """One base table of a schema."""

    template: SqlTemplate = field(compare=False, repr=False)
    dialect: Dialect = field(compare=False, repr=False)
    schema: str
    name: str

    @property
    def catalog(self) -> CatalogQuerySet:
        return CatalogQuerySet(self.template, self.dialect)

    @property
    def qualified_name(self) -> str:
        """Quoted ``schema.name`` reference."""
        return self.dialect.quote(self.schema, self.name)

    def exists(self) -> bool:
        """Check if this table exists as a base table."""
        return self.catalog.table_exists(self.schema, self.name)

    def has_column(self, column: str) -> bool:
        """Check if this table has a column with this exact name."""
        return self.catalog.column_exists(self.schema, self.name, column)

    def lock(self) -> None:
        """Lock this table for the rest of the current transaction.

        Dialects without native locking make this a no-op; the caller is
        then responsible for coordinating concurrent runs.
        """
        if not self.dialect.supports_locking:
            logger.debug(
                f"Dialect '{self.dialect.name}' has no native locking, not locking {self}"
            )
            return

        logger.debug(f"Locking table {self}")
        self.template.execute_statement(self.dialect.lock_statement(self.qualified_name))

    def drop_statement(self) -> str:
        """DROP statement for this table."""
        return f"DROP {ObjectKind.TABLE.keyword} {self.qualified_name}"

    def drop(self) -> None:
        """Drop this table. No existence check is made."""
        logger.info(f"Dropping table {self}")
        self.template.execute_statement(self.drop_statement())

    def __str__(self) -> str:
        return self.qualified_name
