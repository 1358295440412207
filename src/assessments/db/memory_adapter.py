"""In-memory database client adapter.

Implements the same fluent builder as the Supabase adapter over plain
lists of dicts. Used by the test-suite and for local runs with
DB_PROVIDER=memory.

Filter values are compared as text, the way PostgREST receives them in
the query string, so eq("tool_id", "3") matches a row whose tool_id is 3.
An eq filter on None is sent by PostgREST as "eq.null", which Postgres
rejects for typed columns; it fails here too.
"""

from __future__ import annotations

import copy
import threading
from enum import Enum, auto
from typing import Any, Iterable

from assessments.db.protocol import APIResponse, DatabaseError


class _Op(Enum):
    SELECT = auto()
    INSERT = auto()


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


class MemoryTableQueryBuilder:
    """Fluent query builder evaluated against an in-memory table."""

    def __init__(self, client: "MemoryDatabaseClient", table: str) -> None:
        self._client = client
        self._table = table
        self._op: _Op = _Op.SELECT
        self._columns: list[str] | None = None
        self._data: list[dict[str, Any]] = []
        self._filters: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, bool]] = []
        self._limit_val: int | None = None

    def select(self, columns: str = "*") -> "MemoryTableQueryBuilder":
        self._op = _Op.SELECT
        names = [c.strip() for c in columns.split(",") if c.strip()]
        self._columns = None if names in ([], ["*"]) else names
        return self

    def insert(
        self, data: dict[str, Any] | list[dict[str, Any]]
    ) -> "MemoryTableQueryBuilder":
        self._op = _Op.INSERT
        self._data = [data] if isinstance(data, dict) else list(data)
        return self

    def eq(self, column: str, value: Any) -> "MemoryTableQueryBuilder":
        self._filters.append(("eq", column, value))
        return self

    def in_(self, column: str, values: list[Any]) -> "MemoryTableQueryBuilder":
        self._filters.append(("in", column, list(values)))
        return self

    def order(self, column: str, *, desc: bool = False) -> "MemoryTableQueryBuilder":
        self._orders.append((column, desc))
        return self

    def limit(self, count: int) -> "MemoryTableQueryBuilder":
        self._limit_val = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        for kind, column, value in self._filters:
            cell = _as_text(row.get(column))
            if kind == "eq" and cell != _as_text(value):
                return False
            if kind == "in" and cell not in {_as_text(v) for v in value}:
                return False
        return True

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        if self._columns is None:
            return copy.deepcopy(row)
        return {c: copy.deepcopy(row.get(c)) for c in self._columns}

    def execute(self) -> APIResponse:
        self._client.record(self._table, self._op.name.lower())
        if self._table in self._client.fail_on:
            raise DatabaseError(self._table, "simulated failure")
        for kind, column, value in self._filters:
            if kind == "eq" and value is None:
                raise DatabaseError(
                    self._table, f"invalid input syntax for filter {column}=eq.null"
                )

        if self._op is _Op.INSERT:
            inserted = self._client.append_rows(self._table, self._data)
            return APIResponse(data=inserted, count=len(inserted))

        rows = [r for r in self._client.rows(self._table) if self._matches(r)]
        # Stable sorts applied last-key-first give multi-column ordering
        for column, desc in reversed(self._orders):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            rows = present + missing
        if self._limit_val is not None:
            rows = rows[: self._limit_val]

        data = [self._project(r) for r in rows]
        return APIResponse(data=data, count=len(data))


class MemoryDatabaseClient:
    """In-memory implementation of DatabaseClient.

    Args:
        tables: Initial rows keyed by table name.
        fail_on: Table names whose queries raise DatabaseError.
    """

    def __init__(
        self,
        tables: dict[str, Iterable[dict[str, Any]]] | None = None,
        fail_on: Iterable[str] = (),
    ) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = {
            name: [dict(r) for r in rows] for name, rows in (tables or {}).items()
        }
        self.fail_on: set[str] = set(fail_on)
        self.queries: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def table(self, name: str) -> MemoryTableQueryBuilder:
        return MemoryTableQueryBuilder(self, name)

    def rows(self, table: str) -> list[dict[str, Any]]:
        """Snapshot of the rows currently stored in a table."""
        with self._lock:
            return list(self._tables.get(table, []))

    def append_rows(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Append rows to a table, returning copies of what was stored."""
        stored = [dict(r) for r in rows]
        with self._lock:
            self._tables.setdefault(table, []).extend(stored)
        return copy.deepcopy(stored)

    def record(self, table: str, operation: str) -> None:
        with self._lock:
            self.queries.append((table, operation))
