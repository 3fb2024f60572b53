"""Configuration management for dblink."""

from dblink.config.models import (
    DatabaseType,
    DatabaseConfig,
    DblinkConfig,
    EnvironmentSettings,
)
from dblink.config.parser import (
    ConfigParser,
    get_config,
    validate_config_file,
    create_sample_config,
)

__all__ = [
    # Models
    "DatabaseType",
    "DatabaseConfig",
    "DblinkConfig",
    "EnvironmentSettings",
    # Parser
    "ConfigParser",
    "get_config",
    "validate_config_file",
    "create_sample_config",
]
