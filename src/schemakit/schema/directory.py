"""
Schema entity for schemakit.

Provides existence checks, creation and removal of a schema, table
enumeration, and the ordered clean that empties a schema one object at a
time.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .table import Table
from ..database.catalog import CatalogQuerySet
from ..database.connection import SqlTemplate
from ..database.dialects import Dialect, ObjectKind


logger = logging.getLogger(__name__)


# Views first so none is left pointing at a dropped table. Stages, file
# formats and sequences do not depend on tables; sequences go last by
# convention only.
CLEAN_ORDER: Tuple[ObjectKind, ...] = (
    ObjectKind.VIEW,
    ObjectKind.TABLE,
    ObjectKind.STAGE,
    ObjectKind.FILE_FORMAT,
    ObjectKind.SEQUENCE,
)


@dataclass
class CleanResult:
    """Outcome of a successful clean."""

    schema: str
    dropped: Dict[ObjectKind, List[str]] = field(default_factory=dict)
    duration_ms: float = 0.0

    @property
    def total_dropped(self) -> int:
        """Total number of objects dropped."""
        return sum(len(names) for names in self.dropped.values())

    def summary(self) -> Dict[str, Any]:
        """Get summary of the clean."""
        return {
            "schema": self.schema,
            "total_dropped": self.total_dropped,
            "dropped": {kind.value: len(names) for kind, names in self.dropped.items()},
            "duration_ms": self.duration_ms,
        }


@dataclass(frozen=True)
class Schema:
    """One schema (namespace) of a database."""

    template: SqlTemplate = field(compare=False, repr=False)
    dialect: Dialect = field(repr=False)
    name: str

    @property
    def catalog(self) -> CatalogQuerySet:
        return CatalogQuerySet(self.template, self.dialect)

    @property
    def quoted_name(self) -> str:
        return self.dialect.quote(self.name)

    def exists(self) -> bool:
        """Check if this schema exists."""
        return self.catalog.schema_exists(self.name)

    def empty(self) -> bool:
        """Check if this schema holds no base tables.

        Views, sequences and other kinds are not counted.
        """
        return self.catalog.count_tables(self.name) == 0

    def create(self) -> None:
        """Create this schema. No existence check is made."""
        logger.info(f"Creating schema {self}")
        self.template.execute_statement(f"CREATE SCHEMA {self.quoted_name}")

    def drop(self) -> None:
        """Drop this schema and everything in it with one statement."""
        logger.info(f"Dropping schema {self}")
        self.template.execute_statement(f"DROP SCHEMA {self.quoted_name} CASCADE")

    def all_tables(self) -> List[Table]:
        """List all base tables of this schema in catalog order."""
        return [self.get_table(name) for name in self.catalog.list_tables(self.name)]

    def get_table(self, name: str) -> Table:
        """Get a table of this schema (existence is not checked)."""
        return Table(self.template, self.dialect, self.name, name)

    def generate_drop_statements(self, kind: ObjectKind) -> List[str]:
        """Build the DROP statements for all current objects of one kind."""
        if kind is ObjectKind.TABLE:
            return [table.drop_statement() for table in self.all_tables()]

        names = self.catalog.list_object_names(self.name, kind)
        return [self.drop_statement(kind, name) for name in names]

    def drop_statement(self, kind: ObjectKind, name: str) -> str:
        """DROP statement for one object of this schema."""
        return f"DROP {kind.keyword} {self.dialect.quote(self.name, name)}"

    def clean_kinds(self) -> List[ObjectKind]:
        """Object kinds a clean of this schema goes through, in order."""
        return [kind for kind in CLEAN_ORDER if self.dialect.supports(kind)]

    def plan_clean(self) -> List[str]:
        """Statements a clean would issue right now, without executing any.

        Objects that a real clean removes as a side effect of an earlier
        drop are still listed here.
        """
        statements: List[str] = []
        for kind in self.clean_kinds():
            statements.extend(self.generate_drop_statements(kind))
        return statements

    def clean(self) -> CleanResult:
        """Drop every object of this schema, kind by kind.

        Each kind is listed right before its pass and each statement runs on
        its own. The first failure propagates; objects dropped before it
        stay dropped.
        """
        logger.info(f"Cleaning schema {self} ({self.dialect.name})")
        start_time = time.time()
        result = CleanResult(schema=self.name)

        for kind in self.clean_kinds():
            if kind is ObjectKind.TABLE:
                dropped = self._drop_tables()
            else:
                dropped = self._drop_objects(kind)
            result.dropped[kind] = dropped
            if dropped:
                logger.info(f"Dropped {len(dropped)} {kind.value}(s) in schema {self}")

        result.duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Cleaned schema {self}: {result.total_dropped} object(s) "
            f"in {result.duration_ms:.1f}ms"
        )
        return result

    def _drop_tables(self) -> List[str]:
        dropped = []
        for table in self.all_tables():
            try:
                table.drop()
            except Exception as e:
                logger.error(f"Clean of schema {self} stopped at table {table}: {e}")
                raise
            dropped.append(table.name)
        return dropped

    def _drop_objects(self, kind: ObjectKind) -> List[str]:
        dropped = []
        for name in self.catalog.list_object_names(self.name, kind):
            statement = self.drop_statement(kind, name)
            try:
                self.template.execute_statement(statement)
            except Exception as e:
                logger.error(f"Clean of schema {self} stopped at {kind.value} {name}: {e}")
                raise
            dropped.append(name)
        return dropped

    def __str__(self) -> str:
        return self.quoted_name
