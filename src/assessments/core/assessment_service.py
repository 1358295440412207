"""Assessment operations.

Each operation composes table queries on an injected DatabaseClient and
shapes the rows with the functions in assessments.core.aggregation.
Query builders are synchronous, so every execute() runs on a worker
thread; that lets the list operation fan out with asyncio.gather.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from itertools import product
from typing import Any, Mapping

import structlog

from assessments.core.aggregation import (
    CombinedAssessment,
    Row,
    build_assessment_rows,
    dedupe_ids,
    group_student_assessments,
    index_scales,
    resolve_scales,
    scale_ids,
    selected_tool_ids,
)
from assessments.db.protocol import DatabaseClient, TableQueryBuilder

logger = structlog.get_logger(__name__)


class AssessmentNotFoundError(Exception):
    """No tool exists for the requested id."""

    def __init__(self, tool_id: str):
        self.tool_id = tool_id
        super().__init__(f"Assessment tool '{tool_id}' not found")


@dataclass
class PublishRequest:
    """Inputs for publishing an assessment to groups of students."""

    enrollment_years: list[Any]
    schools: list[Any]
    tools: Mapping[Any, bool]
    admin_id: Any
    start_date: Any
    end_date: Any


async def _run(query: TableQueryBuilder) -> list[Row]:
    """Execute a query off the event loop and return its rows."""
    response = await asyncio.to_thread(query.execute)
    return response.data or []


# =============================================================================
# LIST
# =============================================================================


async def _question_with_scales(
    db: DatabaseClient, question: Row, scale_index: dict[Any, Row]
) -> Row:
    links = await _run(
        db.table("question_scale").select("scale_id").eq("question_id", question["question_id"])
    )
    return {**question, "scales": resolve_scales(links, scale_index)}


async def _tool_with_questions(db: DatabaseClient, tool: Row, scale_index: dict[Any, Row]) -> Row:
    questions = await _run(db.table("question").select("*").eq("tool_id", tool["tool_id"]))
    questions = await asyncio.gather(
        *(_question_with_scales(db, q, scale_index) for q in questions)
    )
    return {**tool, "questions": list(questions)}


async def list_assessments(db: DatabaseClient) -> list[Row]:
    """All tools, each with its questions and each question with its scales.

    Raises:
        DatabaseError: If any query fails; nothing partial is returned.
    """
    scale_index = index_scales(await _run(db.table("scale").select("*")))
    tools = await _run(db.table("tool").select("*").order("tool_id"))

    result = await asyncio.gather(*(_tool_with_questions(db, t, scale_index) for t in tools))

    logger.info("assessments_listed", tools=len(result), scales=len(scale_index))
    return list(result)


# =============================================================================
# DETAIL
# =============================================================================


async def get_assessment(db: DatabaseClient, tool_id: str) -> dict[str, Any]:
    """One tool with its questions and their scales.

    Args:
        db: Database client
        tool_id: Tool identifier, passed through unvalidated

    Returns:
        {"tool": {...}, "questions": [...]}

    Raises:
        AssessmentNotFoundError: If no tool has this id
        DatabaseError: If any query fails
    """
    tools = await _run(db.table("tool").select("*").eq("tool_id", tool_id).limit(1))
    if not tools:
        raise AssessmentNotFoundError(tool_id)

    questions = await _run(db.table("question").select("*").eq("tool_id", tool_id))

    for question in questions:
        links = await _run(
            db.table("question_scale").select("scale_id").eq("question_id", question["question_id"])
        )
        ids = scale_ids(links)
        question["scales"] = (
            await _run(db.table("scale").select("*").in_("scale_id", ids)) if ids else []
        )

    logger.info("assessment_fetched", tool_id=tool_id, questions=len(questions))
    return {"tool": tools[0], "questions": questions}


# =============================================================================
# STUDENT
# =============================================================================


async def get_student_assessments(
    db: DatabaseClient, student_id: str | None
) -> list[CombinedAssessment]:
    """A student's assigned tools grouped by date window, oldest start first."""
    rows = await _run(
        db.table("student_assessment")
        .select("tool_id, assessment_start_date, assessment_end_date")
        .eq("student_id", student_id)
        .order("assessment_start_date")
    )
    groups = group_student_assessments(rows)
    logger.info("student_assessments_fetched", student_id=student_id, groups=len(groups))
    return groups


# =============================================================================
# PUBLISH
# =============================================================================


async def resolve_student_ids(db: DatabaseClient, years: list[Any], schools: list[Any]) -> list[Any]:
    """Students matching any (enrollment year, school) pair, deduplicated."""
    found: list[Any] = []
    for year, school in product(years, schools):
        rows = await _run(
            db.table("student")
            .select("student_id")
            .eq("enrollment_year", year)
            .eq("school", school)
        )
        found.extend(row["student_id"] for row in rows)
    return dedupe_ids(found)


async def publish_assessment(db: DatabaseClient, request: PublishRequest) -> int:
    """Assign every selected tool to every matched student.

    Returns:
        Number of student_assessment rows inserted.

    Raises:
        DatabaseError: If a student lookup or the bulk insert fails
    """
    student_ids = await resolve_student_ids(db, request.enrollment_years, request.schools)
    rows = build_assessment_rows(
        student_ids,
        selected_tool_ids(request.tools),
        request.admin_id,
        request.start_date,
        request.end_date,
    )

    if rows:
        await _run(db.table("student_assessment").insert(rows))

    logger.info(
        "assessment_published",
        admin_id=request.admin_id,
        students=len(student_ids),
        rows=len(rows),
    )
    return len(rows)


async def check_connection(db: DatabaseClient) -> bool:
    """Cheap round trip to confirm the database answers."""
    await _run(db.table("tool").select("tool_id").limit(1))
    return True
