"""Configuration management for SQL Quest."""

from sqlquest.config.models import (
    DatabaseType,
    DatabaseConfig,
    SplitterSettings,
    ExecutionSettings,
    RetrySettings,
    SQLQuestConfig,
    EnvironmentSettings,
)
from sqlquest.config.parser import (
    ConfigParser,
    load_config,
    validate_config_file,
    create_sample_config,
)

__all__ = [
    # Models
    "DatabaseType",
    "DatabaseConfig",
    "SplitterSettings",
    "ExecutionSettings",
    "RetrySettings",
    "SQLQuestConfig",
    "EnvironmentSettings",
    # Parser
    "ConfigParser",
    "load_config",
    "validate_config_file",
    "create_sample_config",
]
