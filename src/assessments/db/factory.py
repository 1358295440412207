"""Database client factory.

Returns the DatabaseClient implementation selected by configuration.

DB_PROVIDER=supabase (default): requires SUPABASE_URL + SUPABASE_KEY
DB_PROVIDER=memory:             empty in-memory store (local development)
"""

from __future__ import annotations

import structlog

from assessments.config import load_app_config
from assessments.db.protocol import DatabaseClient

logger = structlog.get_logger(__name__)

# Process-wide client, created on first use
_client: DatabaseClient | None = None


def get_db_client() -> DatabaseClient:
    """Return the active DatabaseClient.

    Used as a FastAPI dependency, so tests replace it through
    app.dependency_overrides instead of patching this module.

    Raises:
        ConfigError: On missing Supabase credentials.
    """
    global _client
    if _client is not None:
        return _client

    config = load_app_config()
    provider = config.database.provider

    if provider == "memory":
        from assessments.db.memory_adapter import MemoryDatabaseClient

        _client = MemoryDatabaseClient()
    else:
        from assessments.db.supabase_adapter import SupabaseDatabaseClient

        url, key = config.database.require_supabase()
        _client = SupabaseDatabaseClient.from_credentials(url, key)

    logger.info("database_client_initialised", provider=provider)
    return _client


def reset_db_client() -> None:
    """Reset the cached client (for testing)."""
    global _client
    _client = None
