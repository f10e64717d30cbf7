"""
Catalog lookups for schemakit.

Runs the read-only catalog queries of a dialect and turns their results into
existence flags and name lists. Any failure is reported as a
``CatalogQueryError`` naming the lookup and the identifiers involved.
"""

import logging
from typing import Any, Callable, Dict, List, TypeVar

from .connection import SqlTemplate
from .dialects import Dialect, ObjectKind
from ..exceptions import CatalogQueryError, UnsupportedObjectKindError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogQuerySet:
    """Catalog queries of one dialect bound to a SQL template."""

    def __init__(self, template: SqlTemplate, dialect: Dialect):
        self.template = template
        self.dialect = dialect
        self.queries = dialect.catalog

    def schema_exists(self, schema: str) -> bool:
        """Check if a schema with this exact name exists."""
        count = self._run(
            "schema_exists",
            f"Unable to check whether schema {self.dialect.quote(schema)} exists",
            {"schema": schema},
            lambda: self.template.query_for_int(self.queries.schema_exists, schema=schema),
        )
        return count > 0

    def table_exists(self, schema: str, table: str) -> bool:
        """Check if a base table exists (views and temporary tables never match)."""
        count = self._run(
            "table_exists",
            f"Unable to check whether table {self.dialect.quote(schema, table)} exists",
            {"schema": schema, "table": table},
            lambda: self.template.query_for_int(
                self.queries.table_exists, schema=schema, table=table
            ),
        )
        return count > 0

    def count_tables(self, schema: str) -> int:
        """Count the base tables of a schema."""
        return self._run(
            "count_tables",
            f"Unable to count tables of schema {self.dialect.quote(schema)}",
            {"schema": schema},
            lambda: self.template.query_for_int(self.queries.count_tables, schema=schema),
        )

    def list_tables(self, schema: str) -> List[str]:
        """List base table names of a schema in catalog order."""
        return self._run(
            "list_tables",
            f"Unable to list tables of schema {self.dialect.quote(schema)}",
            {"schema": schema},
            lambda: self.template.query_for_string_list(self.queries.list_tables, schema=schema),
        )

    def list_object_names(self, schema: str, kind: ObjectKind) -> List[str]:
        """List the names of all objects of one kind in a schema."""
        if kind is ObjectKind.TABLE:
            return self.list_tables(schema)

        sql = self.queries.list_objects.get(kind)
        if sql is None or not self.dialect.supports(kind):
            raise UnsupportedObjectKindError(self.dialect.name, kind.value)

        return self._run(
            f"list_{kind.value}s",
            f"Unable to list {kind.keyword.lower()}s of schema {self.dialect.quote(schema)}",
            {"schema": schema},
            lambda: self.template.query_for_string_list(sql, schema=schema),
        )

    def column_exists(self, schema: str, table: str, column: str) -> bool:
        """Check if a table has a column with this exact name."""
        count = self._run(
            "has_column",
            f"Unable to check whether table {self.dialect.quote(schema, table)} "
            f"has a column named {column}",
            {"schema": schema, "table": table, "column": column},
            lambda: self.template.query_for_int(
                self.queries.column_exists, schema=schema, table=table, column=column
            ),
        )
        return count > 0

    def _run(
        self,
        operation: str,
        message: str,
        identifiers: Dict[str, Any],
        query: Callable[[], T],
    ) -> T:
        try:
            return query()
        except Exception as e:
            logger.error(f"{message}: {e}")
            raise CatalogQueryError(operation, message, identifiers, cause=e) from e
