"""Database access layer.

Provides:
- DatabaseClient protocol and APIResponse wrapper
- Supabase and in-memory adapters
- Client factory driven by DB_PROVIDER
"""

from assessments.db.factory import get_db_client, reset_db_client
from assessments.db.memory_adapter import MemoryDatabaseClient
from assessments.db.protocol import APIResponse, DatabaseClient, DatabaseError

__all__ = [
    "APIResponse",
    "DatabaseClient",
    "DatabaseError",
    "MemoryDatabaseClient",
    "get_db_client",
    "reset_db_client",
]
