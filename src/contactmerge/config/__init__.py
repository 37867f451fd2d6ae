"""Application configuration helpers."""

from __future__ import annotations

from .contacts_api import ContactsApiConfig, get_contacts_api_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import (
    Backend,
    DatabaseConfig,
    StorageConfig,
    get_backend,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "Backend",
    "ConfigurationError",
    "ContactsApiConfig",
    "DatabaseConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "get_backend",
    "get_contacts_api_config",
    "get_database_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
