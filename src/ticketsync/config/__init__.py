"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_bool_env, optional_float_env, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .pretix import PretixConfig, get_pretix_config, load_organizers, parse_organizers
from .storage import DatabaseConfig, data_dir, get_database_config, sqlite_uri
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "PretixConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "data_dir",
    "get_database_config",
    "get_pretix_config",
    "get_sync_config",
    "load_organizers",
    "optional_bool_env",
    "optional_float_env",
    "parse_organizers",
    "require_env_var",
    "require_env_vars",
    "sqlite_uri",
]
