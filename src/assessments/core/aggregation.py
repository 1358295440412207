"""Pure functions that reshape database rows into API payloads.

Nothing here touches the database; every function takes rows and
returns new structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import structlog

logger = structlog.get_logger(__name__)

Row = dict[str, Any]


# =============================================================================
# SCALES
# =============================================================================


def index_scales(scales: Iterable[Row]) -> dict[Any, Row]:
    """Map scale_id -> scale row."""
    return {scale["scale_id"]: scale for scale in scales}


def resolve_scales(question_scales: Iterable[Row], scale_index: Mapping[Any, Row]) -> list[Row]:
    """Resolve question_scale join rows to full scale rows.

    Keeps join-row order. Join rows pointing at an unknown scale are
    skipped.
    """
    resolved = []
    for link in question_scales:
        scale = scale_index.get(link["scale_id"])
        if scale is None:
            logger.warning("scale_not_found", scale_id=link["scale_id"])
            continue
        resolved.append(scale)
    return resolved


def scale_ids(question_scales: Iterable[Row]) -> list[Any]:
    """Extract scale ids from question_scale join rows."""
    return [link["scale_id"] for link in question_scales]


# =============================================================================
# STUDENT ASSESSMENT GROUPS
# =============================================================================


@dataclass
class CombinedAssessment:
    """Tools assigned to a student for one exact date window."""

    start_date: Any
    end_date: Any
    tools: list[Any] = field(default_factory=list)

    @property
    def title(self) -> str:
        return f"{self.start_date} to {self.end_date}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "title": self.title,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "tools": list(self.tools),
        }


def group_student_assessments(rows: Iterable[Row]) -> list[CombinedAssessment]:
    """Group student_assessment rows by their (start, end) window.

    Groups keep first-occurrence order of the input, which callers sort
    by start date.

    Example:
        >>> groups = group_student_assessments([
        ...     {"tool_id": 1, "assessment_start_date": "2024-01-01", "assessment_end_date": "2024-01-31"},
        ...     {"tool_id": 2, "assessment_start_date": "2024-01-01", "assessment_end_date": "2024-01-31"},
        ... ])
        >>> groups[0].title, groups[0].tools
        ('2024-01-01 to 2024-01-31', [1, 2])
    """
    groups: dict[tuple[Any, Any], CombinedAssessment] = {}
    for row in rows:
        key = (row["assessment_start_date"], row["assessment_end_date"])
        group = groups.get(key)
        if group is None:
            group = CombinedAssessment(start_date=key[0], end_date=key[1])
            groups[key] = group
        group.tools.append(row["tool_id"])
    return list(groups.values())


# =============================================================================
# PUBLISH
# =============================================================================


def dedupe_ids(ids: Iterable[Any]) -> list[Any]:
    """Remove duplicates, keeping first-seen order."""
    return list(dict.fromkeys(ids))


def selected_tool_ids(tools: Mapping[Any, bool]) -> list[Any]:
    """Tool ids whose selected flag is exactly True."""
    return [tool_id for tool_id, selected in tools.items() if selected is True]


def build_assessment_rows(
    student_ids: Iterable[Any],
    tool_ids: Iterable[Any],
    admin_id: Any,
    start_date: Any,
    end_date: Any,
) -> list[Row]:
    """Build one student_assessment row per (tool, student) pair."""
    students = list(student_ids)
    return [
        {
            "student_id": student_id,
            "tool_id": tool_id,
            "admin_id": admin_id,
            "assessment_start_date": start_date,
            "assessment_end_date": end_date,
        }
        for tool_id in tool_ids
        for student_id in students
    ]
