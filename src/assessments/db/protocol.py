"""Database client protocol.

Structural interface implemented by every database adapter. Adapters do
not inherit from these classes; they only need matching methods.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


class DatabaseError(Exception):
    """A table operation failed."""

    def __init__(self, table: str, message: str):
        self.table = table
        self.message = message
        super().__init__(f"{table}: {message}")


@dataclass
class APIResponse:
    """Query result, shaped like the supabase-py APIResponse."""

    data: list[dict[str, Any]] | None = None
    count: int | None = None


@runtime_checkable
class TableQueryBuilder(Protocol):
    """Fluent query builder for a single table."""

    def select(self, columns: str = "*") -> "TableQueryBuilder": ...
    def insert(self, data: dict[str, Any] | list[dict[str, Any]]) -> "TableQueryBuilder": ...
    def eq(self, column: str, value: Any) -> "TableQueryBuilder": ...
    def in_(self, column: str, values: list[Any]) -> "TableQueryBuilder": ...
    def order(self, column: str, *, desc: bool = False) -> "TableQueryBuilder": ...
    def limit(self, count: int) -> "TableQueryBuilder": ...

    def execute(self) -> APIResponse:
        """Run the query.

        Raises:
            DatabaseError: If the backend rejects the query.
        """
        ...


@runtime_checkable
class DatabaseClient(Protocol):
    """Unified database client interface."""

    def table(self, name: str) -> TableQueryBuilder: ...
