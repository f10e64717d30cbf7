"""
Configuration system for schemakit using Pydantic.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from .database.dialects import dialect_for_url, get_dialect, list_dialects
from .exceptions import (
    ConfigurationError,
    DatabaseConfigurationError,
    UnsupportedDialectError,
)


class DatabaseConfig(BaseModel):
    """Configuration for a single database."""

    name: str = Field(..., description="Database configuration name")
    url: str = Field(..., description="SQLAlchemy database URL")
    dialect: Optional[str] = Field(
        None, description="Dialect name (derived from the URL when omitted)"
    )
    schemas: List[str] = Field(
        default_factory=list, description="Schemas managed in this database"
    )
    connect_args: Dict[str, Any] = Field(
        default_factory=dict, description="Extra DBAPI connect() arguments"
    )
    echo: bool = Field(False, description="Log every statement SQLAlchemy emits")

    @field_validator("dialect")
    @classmethod
    def validate_dialect(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            return get_dialect(v).name
        except UnsupportedDialectError:
            raise ValueError(
                f"unknown dialect '{v}' (expected one of: {', '.join(list_dialects())})"
            )


class CleanupConfig(BaseModel):
    """Schema clean configuration."""

    mode: Literal["safe", "force", "dry_run"] = Field(
        "safe", description="safe asks for confirmation, dry_run only prints statements"
    )
    clean_disabled: bool = Field(
        False, description="Refuse to clean any schema (protects production databases)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Log level"
    )
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file: Optional[str] = Field(None, description="Log file path")
    max_size: int = Field(10485760, description="Max log file size in bytes")  # 10MB
    backup_count: int = Field(5, description="Number of backup log files")


class SchemakitConfig(BaseSettings):
    """Main schemakit configuration."""

    databases: List[DatabaseConfig] = Field(
        default_factory=list, description="Database configurations"
    )
    cleanup: CleanupConfig = Field(
        default_factory=CleanupConfig, description="Schema clean configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(
        env_file=".env",
        env_prefix="SCHEMAKIT_",
        case_sensitive=False,
        extra="ignore"
    )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SchemakitConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            # Expand environment variables in the data
            data = cls._expand_env_vars(data)

            return cls(**data)
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    @classmethod
    def _expand_env_vars(cls, data: Any) -> Any:
        """Recursively expand environment variables in configuration data."""
        if isinstance(data, dict):
            return {k: cls._expand_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [cls._expand_env_vars(item) for item in data]
        elif isinstance(data, str):
            return os.path.expandvars(data)
        else:
            return data

    def get_database(self, name: str) -> DatabaseConfig:
        """Get database configuration by name."""
        for db in self.databases:
            if db.name == name:
                return db
        raise ConfigurationError(f"Database configuration '{name}' not found")

    def validate_config(self) -> None:
        """Validate the entire configuration for consistency."""
        names = [db.name for db in self.databases]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(
                f"Duplicate database configuration names: {', '.join(duplicates)}"
            )

        for db in self.databases:
            if not db.dialect:
                # The URL has to name a supported backend when no dialect is given
                try:
                    dialect_for_url(db.url)
                except DatabaseConfigurationError as e:
                    raise ConfigurationError(
                        f"Database '{db.name}' has no usable dialect: {e}"
                    ) from e

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_none=True), f, default_flow_style=False, indent=2,
                sort_keys=False,
            )
