"""Supabase database client adapter.

Wraps the supabase-py Client and exposes the DatabaseClient interface.
Calls are forwarded unchanged; PostgREST errors become DatabaseError.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from postgrest.exceptions import APIError
from supabase import Client, SupabaseException, create_client

from assessments.config import ConfigError
from assessments.db.protocol import APIResponse, DatabaseError

logger = structlog.get_logger(__name__)


class _SupabaseTableQueryBuilder:
    """Forwards builder calls to the supabase-py request builder."""

    def __init__(self, table: str, native_builder: Any) -> None:
        self._table = table
        self._b = native_builder

    def select(self, columns: str = "*") -> "_SupabaseTableQueryBuilder":
        self._b = self._b.select(columns)
        return self

    def insert(
        self, data: dict[str, Any] | list[dict[str, Any]]
    ) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.insert(data)
        return self

    def eq(self, column: str, value: Any) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.eq(column, value)
        return self

    def in_(self, column: str, values: list[Any]) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.in_(column, values)
        return self

    def order(self, column: str, *, desc: bool = False) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.order(column, desc=desc)
        return self

    def limit(self, count: int) -> "_SupabaseTableQueryBuilder":
        self._b = self._b.limit(count)
        return self

    def execute(self) -> APIResponse:
        try:
            native_response = self._b.execute()
        except APIError as e:
            raise DatabaseError(self._table, e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise DatabaseError(self._table, str(e)) from e
        return APIResponse(
            data=native_response.data,
            count=getattr(native_response, "count", None),
        )


class SupabaseDatabaseClient:
    """Supabase-backed implementation of DatabaseClient."""

    def __init__(self, native_client: Client) -> None:
        self._client = native_client

    @classmethod
    def from_credentials(cls, url: str, key: str) -> "SupabaseDatabaseClient":
        """Create a client for a project URL and API key.

        Raises:
            ConfigError: If supabase-py rejects the URL or key.
        """
        try:
            native = create_client(url, key)
        except SupabaseException as e:
            raise ConfigError(f"Invalid Supabase credentials: {e}") from e
        logger.debug("supabase_client_created", url=url)
        return cls(native)

    def table(self, name: str) -> _SupabaseTableQueryBuilder:
        return _SupabaseTableQueryBuilder(name, self._client.table(name))
