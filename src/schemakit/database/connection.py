"""
Database connection management for schemakit.

Provides a synchronous SQL template over a single SQLAlchemy connection and
the session object that owns the engine, the connection and the dialect.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .dialects import Dialect, dialect_for_url, get_dialect
from ..exceptions import DatabaseConnectionError, StatementExecutionError


logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Database connection configuration."""

    url: str = Field(..., description="SQLAlchemy database URL")
    dialect: Optional[str] = Field(
        None, description="Dialect name (derived from the URL when omitted)"
    )
    connect_args: Dict[str, Any] = Field(
        default_factory=dict, description="Extra DBAPI connect() arguments"
    )
    echo: bool = Field(False, description="Log every statement SQLAlchemy emits")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        if not v or not v.strip():
            raise ValueError("Database URL is required")
        return v

    @classmethod
    def from_url(cls, url: str, dialect: Optional[str] = None) -> "ConnectionConfig":
        """Create configuration from a database URL."""
        return cls(url=url, dialect=dialect)

    def resolve_dialect(self) -> Dialect:
        """Get the dialect descriptor for this connection."""
        if self.dialect:
            return get_dialect(self.dialect)
        return dialect_for_url(self.url)

    def to_engine_kwargs(self) -> Dict[str, Any]:
        """Convert to create_engine() keyword arguments."""
        kwargs: Dict[str, Any] = {"echo": self.echo}
        if self.connect_args:
            kwargs["connect_args"] = dict(self.connect_args)
        return kwargs


class SqlTemplate:
    """Runs single SQL statements over one shared connection.

    Outside of :meth:`transaction` every call is committed on success and
    rolled back on failure, which matches how most engines auto-commit DDL.
    """

    def __init__(self, connection: Connection):
        self.connection = connection
        self._in_transaction = False

    @property
    def in_transaction(self) -> bool:
        """Check if an explicit transaction is open."""
        return self._in_transaction

    @contextmanager
    def transaction(self) -> Iterator["SqlTemplate"]:
        """Run the enclosed calls in one transaction (nesting joins the outer one)."""
        if self._in_transaction:
            yield self
            return

        if self.connection.in_transaction():
            self.connection.commit()

        self._in_transaction = True
        try:
            with self.connection.begin():
                yield self
        finally:
            self._in_transaction = False

    def execute_statement(self, sql: str) -> None:
        """Execute a statement that returns no rows."""
        logger.debug(f"Executing: {sql}")
        try:
            # no parameters, so pyformat drivers leave % in identifiers alone
            self.connection.exec_driver_sql(sql, execution_options={"no_parameters": True})
        except SQLAlchemyError as e:
            self._discard()
            raise StatementExecutionError(sql, e) from e
        self._finish()

    def query_for_string_list(self, sql: str, **params: Any) -> List[str]:
        """Run a query and return its first column as strings."""
        rows = self._fetch(sql, params)
        return [row[0] for row in rows if row[0] is not None]

    def query_for_int(self, sql: str, **params: Any) -> int:
        """Run a query returning a single number."""
        rows = self._fetch(sql, params)
        if not rows or rows[0][0] is None:
            return 0
        return int(rows[0][0])

    def _fetch(self, sql: str, params: Dict[str, Any]) -> List[Any]:
        logger.debug(f"Querying: {sql} {params}")
        try:
            rows = self.connection.execute(text(sql), params).fetchall()
        except SQLAlchemyError as e:
            self._discard()
            raise StatementExecutionError(sql, e) from e
        self._finish()
        return rows

    def _finish(self) -> None:
        if not self._in_transaction and self.connection.in_transaction():
            self.connection.commit()

    def _discard(self) -> None:
        if not self._in_transaction and self.connection.in_transaction():
            self.connection.rollback()


class DatabaseSession:
    """Owns the engine, the single connection and the dialect of one database."""

    def __init__(self, config: ConnectionConfig, name: str = "default"):
        self.config = config
        self.name = name
        self.dialect = config.resolve_dialect()
        self._engine: Optional[Engine] = None
        self._connection: Optional[Connection] = None
        self._template: Optional[SqlTemplate] = None

    @classmethod
    def from_config(cls, database_config: Any) -> "DatabaseSession":
        """Create a session from a ``DatabaseConfig`` entry."""
        return cls(
            ConnectionConfig(
                url=database_config.url,
                dialect=database_config.dialect,
                connect_args=database_config.connect_args,
                echo=database_config.echo,
            ),
            name=database_config.name,
        )

    def open(self) -> None:
        """Create the engine and open the connection."""
        if self._connection is not None:
            return

        try:
            logger.info(f"Opening {self.dialect.name} connection for database '{self.name}'")
            self._engine = create_engine(self.config.url, **self.config.to_engine_kwargs())
            self._connection = self._engine.connect()
        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to database '{self.name}': {e}")
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
            raise DatabaseConnectionError(
                f"Failed to connect to database '{self.name}'", cause=e
            ) from e

        self._template = SqlTemplate(self._connection)

    def close(self) -> None:
        """Close the connection and dispose of the engine."""
        if self._connection is not None:
            logger.info(f"Closing connection for database '{self.name}'")
            self._connection.close()
            self._connection = None
            self._template = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    @property
    def is_open(self) -> bool:
        """Check if the connection is open."""
        return self._connection is not None

    @property
    def template(self) -> SqlTemplate:
        """SQL template bound to the open connection."""
        if self._template is None:
            raise DatabaseConnectionError(f"Session for database '{self.name}' is not open")
        return self._template

    def get_schema(self, name: str):
        """Get a schema of this database (no round trip)."""
        # Import here to avoid circular imports
        from ..schema.directory import Schema

        return Schema(self.template, self.dialect, name)

    def __enter__(self) -> "DatabaseSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
