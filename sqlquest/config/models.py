"""Pydantic models for SQL Quest configuration."""

from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError


class DatabaseType(str, Enum):
    """Supported database types."""
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class DatabaseConfig(BaseModel):
    """Database connection configuration.

    Either discrete connection fields or a single ``url`` may be given. When a
    URL is used the database type is taken from its backend name.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[DatabaseType] = Field(default=None, validation_alias=AliasChoices("type", "driver"))
    url: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    username: Optional[str] = Field(default=None, validation_alias=AliasChoices("username", "user"))
    password: Optional[str] = None
    path: Optional[str] = None  # For SQLite
    options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('port')
    def validate_port(cls, v):
        """Validate port number range."""
        if v is not None and (v < 1 or v > 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @model_validator(mode='after')
    def validate_database_config(self):
        """Validate database-specific required fields."""
        if self.url:
            try:
                backend = make_url(self.url).get_backend_name()
            except ArgumentError as e:
                raise ValueError(f"Invalid database URL: {e}") from e
            try:
                url_type = DatabaseType(backend)
            except ValueError:
                raise ValueError(f"Unsupported database backend in URL: {backend}")
            if self.type is not None and self.type != url_type:
                raise ValueError(f"Database type '{self.type.value}' does not match URL backend '{backend}'")
            object.__setattr__(self, "type", url_type)
            return self

        if self.type is None:
            raise ValueError("Database configuration requires a 'type' or a 'url'")

        if self.type == DatabaseType.SQLITE:
            if not (self.path or self.database):
                raise ValueError("SQLite databases require a 'path' or 'database' field")
            if not self.path:
                # Allow configs that specify `database` instead of `path`
                object.__setattr__(self, "path", self.database)
            return self

        required_fields = ['host', 'database', 'username']
        for field in required_fields:
            if not getattr(self, field):
                raise ValueError(f"{self.type.value} databases require '{field}' field")
        return self


class SplitterSettings(BaseModel):
    """Statement splitting settings."""
    service_url: Optional[str] = Field(default=None, description="Dialect-aware splitting service endpoint")
    timeout: float = Field(default=10.0, gt=0, le=300, description="Splitting service timeout in seconds")
    dialect: Optional[str] = Field(default=None, description="Dialect hint sent to the splitting service")


class ExecutionSettings(BaseModel):
    """Statement execution settings."""
    sql_dir: str = Field(default="sql", description="SQL subdirectory of a quest")
    timing: bool = Field(default=True, description="Time and report every statement")

    @field_validator('sql_dir')
    def validate_sql_dir(cls, v):
        """Keep the SQL directory inside the quest directory."""
        path = PurePath(v)
        if not v.strip() or path.is_absolute() or ".." in path.parts:
            raise ValueError(f"sql_dir must be a relative path inside the quest directory, got '{v}'")
        return v


class RetrySettings(BaseModel):
    """Defaults for the retry combinator."""
    times: Optional[int] = Field(default=10, ge=1, description="Attempts, or null for unbounded")
    wait: int = Field(default=5000, ge=0, description="Milliseconds between attempts")


class SQLQuestConfig(BaseModel):
    """Main configuration model for SQL Quest."""
    databases: Dict[str, DatabaseConfig]
    default_database: Optional[str] = None
    splitter: SplitterSettings = Field(default_factory=SplitterSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    view: Dict[str, Any] = Field(default_factory=dict, description="Template bindings every quest renders with")

    @model_validator(mode='after')
    def validate_default_database(self):
        """Ensure default_database exists in databases, or pick the first one."""
        if self.default_database and self.default_database not in self.databases:
            raise ValueError(f"default_database '{self.default_database}' not found in databases")
        if not self.default_database and self.databases:
            self.default_database = next(iter(self.databases))
        return self

    def get_database(self, name: Optional[str] = None) -> DatabaseConfig:
        """Return the named database configuration, or the default one."""
        db_name = name or self.default_database
        if not db_name or db_name not in self.databases:
            available = list(self.databases.keys())
            raise KeyError(f"Database '{db_name}' not found in configuration. Available databases: {available}")
        return self.databases[db_name]

    @classmethod
    def from_url(cls, url: str, name: str = "default") -> "SQLQuestConfig":
        """Build a single-database configuration from a connection URL."""
        return cls(databases={name: DatabaseConfig(url=url)}, default_database=name)


class EnvironmentSettings(BaseSettings):
    """Environment-specific settings."""

    model_config = SettingsConfigDict(env_prefix="SQLQUEST_", case_sensitive=False)

    log_level: str = Field(default="INFO")
    debug: bool = Field(default=False)
    config_file: Optional[str] = Field(default=None)
    database_url: Optional[str] = Field(default=None)
