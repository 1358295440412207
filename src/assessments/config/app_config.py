"""Application configuration loader.

Loads configuration from data/config/app_config_v1.yaml (optional),
then applies overrides from the environment (and a local .env file).

Usage:
    from assessments.config.app_config import load_app_config

    config = load_app_config()
    print(config.database.provider, config.server.port)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml
from dotenv import load_dotenv

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

SUPPORTED_PROVIDERS = ("supabase", "memory")


class ConfigError(Exception):
    """Invalid or incomplete configuration."""

    pass


@dataclass
class DatabaseConfig:
    """Configuration for the database backend."""

    provider: str = "supabase"
    url: str | None = None
    key: str | None = None

    def require_supabase(self) -> tuple[str, str]:
        """Return (url, key), failing fast if either is missing."""
        if not self.url or not self.key:
            raise ConfigError(
                "DB_PROVIDER=supabase requires SUPABASE_URL and SUPABASE_KEY "
                "to be set in environment variables."
            )
        return self.url, self.key


@dataclass
class ServerConfig:
    """Configuration for the HTTP server."""

    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {
            "provider": "supabase",
            "url": None,
            "key": None,
        },
        "server": {
            "host": "0.0.0.0",
            "port": 4000,
            "cors_origins": ["*"],
        },
    }


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay environment variables on top of file/default values."""
    database = data.setdefault("database", {})
    server = data.setdefault("server", {})

    if provider := os.environ.get("DB_PROVIDER"):
        database["provider"] = provider
    if url := os.environ.get("SUPABASE_URL"):
        database["url"] = url
    if key := os.environ.get("SUPABASE_KEY"):
        database["key"] = key

    if host := os.environ.get("HOST"):
        server["host"] = host
    if port := os.environ.get("PORT"):
        server["port"] = port
    if origins := os.environ.get("CORS_ORIGINS"):
        server["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

    return data


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    db_data = data.get("database") or {}
    provider = str(db_data.get("provider", "supabase")).lower().strip()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigError(
            f"DB_PROVIDER='{provider}' is not supported. "
            f"Valid values: {', '.join(SUPPORTED_PROVIDERS)}."
        )

    database = DatabaseConfig(
        provider=provider,
        url=db_data.get("url"),
        key=db_data.get("key"),
    )

    server_data = data.get("server") or {}
    try:
        port = int(server_data.get("port", 4000))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid port: {server_data.get('port')!r}") from e

    server = ServerConfig(
        host=server_data.get("host", "0.0.0.0"),
        port=port,
        cors_origins=list(server_data.get("cors_origins", ["*"])),
    )

    return AppConfig(database=database, server=server)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload.

    Returns:
        AppConfig object with all settings.

    Raises:
        ConfigError: If a value cannot be parsed or the provider is unknown.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    load_dotenv()

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(_apply_env_overrides(data))
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when the environment changes at runtime.
    """
    global _cached_config
    _cached_config = None
