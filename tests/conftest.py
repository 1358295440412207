"""Shared fixtures.

Every test runs against an in-memory database seeded with a small
assessment catalogue; no test talks to Supabase.
"""

from typing import Any

import pytest
from fastapi.testclient import TestClient

from assessments.config import clear_config_cache
from assessments.db import MemoryDatabaseClient, reset_db_client
from assessments.web.api import create_app


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Force the memory provider and drop cached config/client."""
    monkeypatch.setenv("DB_PROVIDER", "memory")
    monkeypatch.setenv("SUPABASE_URL", "")
    monkeypatch.setenv("SUPABASE_KEY", "")
    for name in ("HOST", "PORT", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    clear_config_cache()
    reset_db_client()
    yield
    clear_config_cache()
    reset_db_client()


@pytest.fixture
def sample_tables() -> dict[str, list[dict[str, Any]]]:
    """Two tools, three questions, three scales, four students."""
    return {
        "scale": [
            {"scale_id": 1, "name": "Anxiety"},
            {"scale_id": 2, "name": "Depression"},
            {"scale_id": 3, "name": "Stress"},
        ],
        # Stored out of order; listing must sort by tool_id
        "tool": [
            {"tool_id": 2, "name": "DASS-21", "description": "Depression Anxiety Stress Scales"},
            {"tool_id": 1, "name": "GAD-7", "description": "Generalized Anxiety Disorder"},
        ],
        "question": [
            {"question_id": 10, "tool_id": 1, "question": "Feeling nervous, anxious or on edge"},
            {"question_id": 11, "tool_id": 1, "question": "Not being able to stop worrying"},
            {"question_id": 20, "tool_id": 2, "question": "I found it hard to wind down"},
        ],
        "question_scale": [
            {"question_id": 10, "scale_id": 1},
            {"question_id": 11, "scale_id": 1},
            {"question_id": 11, "scale_id": 3},
            {"question_id": 20, "scale_id": 3},
            {"question_id": 20, "scale_id": 2},
        ],
        "student": [
            {"student_id": 100, "enrollment_year": 2024, "school": "X"},
            {"student_id": 101, "enrollment_year": 2024, "school": "X"},
            {"student_id": 102, "enrollment_year": 2023, "school": "X"},
            {"student_id": 103, "enrollment_year": 2024, "school": "Y"},
        ],
        "student_assessment": [
            {
                "student_id": 100,
                "tool_id": 3,
                "admin_id": 1,
                "assessment_start_date": "2024-02-01",
                "assessment_end_date": "2024-02-28",
            },
            {
                "student_id": 100,
                "tool_id": 1,
                "admin_id": 1,
                "assessment_start_date": "2024-01-01",
                "assessment_end_date": "2024-01-31",
            },
            {
                "student_id": 101,
                "tool_id": 1,
                "admin_id": 1,
                "assessment_start_date": "2024-01-01",
                "assessment_end_date": "2024-01-31",
            },
            {
                "student_id": 100,
                "tool_id": 2,
                "admin_id": 1,
                "assessment_start_date": "2024-01-01",
                "assessment_end_date": "2024-01-31",
            },
        ],
    }


@pytest.fixture
def db(sample_tables) -> MemoryDatabaseClient:
    """Seeded in-memory database."""
    return MemoryDatabaseClient(sample_tables)


@pytest.fixture
def client(db) -> TestClient:
    """Test client wired to the seeded database."""
    return TestClient(create_app(db_client=db))


@pytest.fixture
def make_client(sample_tables):
    """Build a client whose database fails on the given tables."""

    def _make(*fail_on: str) -> tuple[TestClient, MemoryDatabaseClient]:
        failing_db = MemoryDatabaseClient(sample_tables, fail_on=fail_on)
        return TestClient(create_app(db_client=failing_db)), failing_db

    return _make
