"""Pydantic schemas for the Web API.

Tool, question and scale rows are passed through as plain dicts so that
every column the database returns reaches the client.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, StrictBool


# =============================================================================
# ASSESSMENT SCHEMAS
# =============================================================================


class AssessmentDetailResponse(BaseModel):
    """A tool together with its questions (each carrying `scales`)."""

    tool: dict[str, Any]
    questions: list[dict[str, Any]]


class CombinedAssessmentResponse(BaseModel):
    """Tools assigned to a student for one date window."""

    title: str
    startDate: Any
    endDate: Any
    tools: list[Any]


# =============================================================================
# PUBLISH SCHEMAS
# =============================================================================


class SelectOption(BaseModel):
    """An option picked in the admin UI; only `value` is used."""

    value: Any
    label: str | None = None


class PublishAssessmentRequest(BaseModel):
    """Request body for publishing tools to groups of students."""

    student_groups: list[SelectOption] = Field(default_factory=list, alias="studentGroups")
    selected_schools: list[SelectOption] = Field(default_factory=list, alias="selectedSchools")
    tools: dict[str, StrictBool] = Field(default_factory=dict)
    admin_id: Any = Field(default=None, alias="adminId")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")

    model_config = {"populate_by_name": True}


class PublishAssessmentResponse(BaseModel):
    """Acknowledgement for a successful publish."""

    success: bool = True
    message: str
    count: int = 0


# =============================================================================
# ERROR SCHEMAS
# =============================================================================


class ErrorResponse(BaseModel):
    """Error body for failed requests."""

    error: str


class PublishErrorResponse(BaseModel):
    """Error body for a failed publish."""

    success: bool = False
    error: str


# =============================================================================
# ROOT / HEALTH SCHEMAS
# =============================================================================


class WelcomeResponse(BaseModel):
    """Root endpoint greeting."""

    mssg: str = "welcome"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    database: str = "ok"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
