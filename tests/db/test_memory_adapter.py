"""Tests for the in-memory database adapter."""

import pytest

from assessments.db import DatabaseClient, DatabaseError, MemoryDatabaseClient
from assessments.db.protocol import TableQueryBuilder


@pytest.fixture
def memory_db():
    return MemoryDatabaseClient({
        "student": [
            {"student_id": 3, "enrollment_year": 2024, "school": "X"},
            {"student_id": 1, "enrollment_year": 2023, "school": "X"},
            {"student_id": 2, "enrollment_year": 2024, "school": "Y"},
        ]
    })


class TestProtocol:
    """The adapter satisfies the client protocol."""

    def test_is_database_client(self, memory_db):
        assert isinstance(memory_db, DatabaseClient)

    def test_builder_is_query_builder(self, memory_db):
        assert isinstance(memory_db.table("student"), TableQueryBuilder)


class TestSelect:
    """Tests for select queries."""

    def test_select_all(self, memory_db):
        """select('*') returns full rows."""
        response = memory_db.table("student").select("*").execute()
        assert len(response.data) == 3
        assert response.count == 3
        assert set(response.data[0]) == {"student_id", "enrollment_year", "school"}

    def test_select_columns(self, memory_db):
        """Named columns are projected."""
        response = memory_db.table("student").select("student_id, school").execute()
        assert all(set(r) == {"student_id", "school"} for r in response.data)

    def test_eq_compares_as_text(self, memory_db):
        """String filter values match numeric cells."""
        response = memory_db.table("student").select("*").eq("student_id", "2").execute()
        assert [r["student_id"] for r in response.data] == [2]

    def test_chained_eq(self, memory_db):
        """Multiple eq filters are AND-ed."""
        response = (
            memory_db.table("student")
            .select("student_id")
            .eq("enrollment_year", 2024)
            .eq("school", "X")
            .execute()
        )
        assert response.data == [{"student_id": 3}]

    def test_in_filter(self, memory_db):
        """in_ keeps rows whose value is in the list."""
        response = memory_db.table("student").select("*").in_("student_id", [1, 2]).execute()
        assert sorted(r["student_id"] for r in response.data) == [1, 2]

    def test_order_ascending_and_descending(self, memory_db):
        """order sorts by the column."""
        asc = memory_db.table("student").select("*").order("student_id").execute()
        desc = memory_db.table("student").select("*").order("student_id", desc=True).execute()
        assert [r["student_id"] for r in asc.data] == [1, 2, 3]
        assert [r["student_id"] for r in desc.data] == [3, 2, 1]

    def test_limit(self, memory_db):
        """limit caps the number of rows."""
        response = memory_db.table("student").select("*").order("student_id").limit(1).execute()
        assert [r["student_id"] for r in response.data] == [1]

    def test_unknown_table_is_empty(self, memory_db):
        """Missing tables read as empty."""
        assert memory_db.table("nothing").select("*").execute().data == []

    def test_results_are_copies(self, memory_db):
        """Mutating a result does not change stored rows."""
        row = memory_db.table("student").select("*").eq("student_id", 1).execute().data[0]
        row["school"] = "Z"
        assert memory_db.table("student").select("*").eq("student_id", 1).execute().data[0]["school"] == "X"


class TestInsert:
    """Tests for inserts."""

    def test_bulk_insert(self, memory_db):
        """A list of rows is appended in one call."""
        response = memory_db.table("student").insert([
            {"student_id": 4, "enrollment_year": 2025, "school": "X"},
            {"student_id": 5, "enrollment_year": 2025, "school": "X"},
        ]).execute()
        assert response.count == 2
        assert len(memory_db.rows("student")) == 5

    def test_insert_creates_table(self, memory_db):
        """Inserting into an unknown table creates it."""
        memory_db.table("student_assessment").insert({"student_id": 1, "tool_id": 1}).execute()
        assert memory_db.rows("student_assessment") == [{"student_id": 1, "tool_id": 1}]


class TestFailures:
    """Tests for simulated failures."""

    def test_fail_on_table(self, memory_db):
        """Queries on a failing table raise DatabaseError."""
        memory_db.fail_on.add("student")
        with pytest.raises(DatabaseError) as exc_info:
            memory_db.table("student").select("*").execute()
        assert exc_info.value.table == "student"

    def test_eq_none_is_rejected(self, memory_db):
        """An eq filter on None fails like PostgREST's eq.null on a typed column."""
        with pytest.raises(DatabaseError) as exc_info:
            memory_db.table("student").select("*").eq("student_id", None).execute()
        assert "eq.null" in exc_info.value.message

    def test_queries_are_recorded(self, memory_db):
        """Executed queries are logged as (table, operation)."""
        memory_db.table("student").select("*").execute()
        memory_db.table("student").insert({"student_id": 9}).execute()
        assert memory_db.queries == [("student", "select"), ("student", "insert")]
