"""Configuration package for the assessments API."""

from assessments.config.app_config import (
    AppConfig,
    ConfigError,
    DatabaseConfig,
    ServerConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "DatabaseConfig",
    "ServerConfig",
    "clear_config_cache",
    "load_app_config",
]
