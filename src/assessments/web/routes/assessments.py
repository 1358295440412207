"""Assessment endpoints."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse

from assessments.core.assessment_service import (
    PublishRequest,
    get_assessment as fetch_assessment,
    get_student_assessments as fetch_student_assessments,
    list_assessments as fetch_assessments,
    publish_assessment as do_publish_assessment,
)
from assessments.db import DatabaseClient, DatabaseError, get_db_client
from assessments.web.schemas import (
    AssessmentDetailResponse,
    CombinedAssessmentResponse,
    ErrorResponse,
    PublishAssessmentRequest,
    PublishAssessmentResponse,
    PublishErrorResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/assessment", tags=["assessments"])

Db = Annotated[DatabaseClient, Depends(get_db_client)]

PUBLISH_FAILED_MESSAGE = "Failed to publish assessment"


@router.get(
    "/",
    response_model=list[dict[str, Any]],
    responses={500: {"model": ErrorResponse}},
)
async def list_assessments(db: Db) -> list[dict[str, Any]]:
    """List all tools with nested questions and scales."""
    return await fetch_assessments(db)


# Registered before /{tool_id} so "student" is not taken for an id
@router.get(
    "/student",
    response_model=list[CombinedAssessmentResponse],
    responses={500: {"model": ErrorResponse}},
)
async def get_student_assessments(
    db: Db,
    student_id: Annotated[str | None, Header(alias="student-id")] = None,
) -> list[CombinedAssessmentResponse]:
    """Assessments assigned to the student in the `student-id` header, by window."""
    groups = await fetch_student_assessments(db, student_id)
    return [CombinedAssessmentResponse(**g.to_dict()) for g in groups]


@router.get(
    "/{tool_id}",
    response_model=AssessmentDetailResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_assessment(tool_id: str, db: Db) -> AssessmentDetailResponse:
    """Get a tool with its questions and their scales."""
    assessment = await fetch_assessment(db, tool_id)
    return AssessmentDetailResponse(**assessment)


@router.post(
    "/publish",
    response_model=PublishAssessmentResponse,
    responses={500: {"model": PublishErrorResponse}},
)
async def publish_assessment(body: PublishAssessmentRequest, db: Db) -> Any:
    """Assign the selected tools to every student in the chosen groups and schools."""
    request = PublishRequest(
        enrollment_years=[g.value for g in body.student_groups],
        schools=[s.value for s in body.selected_schools],
        tools=body.tools,
        admin_id=body.admin_id,
        start_date=body.start_date,
        end_date=body.end_date,
    )

    try:
        count = await do_publish_assessment(db, request)
    except DatabaseError as e:
        logger.error("assessment_publish_failed", table=e.table, error=e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=PublishErrorResponse(error=PUBLISH_FAILED_MESSAGE).model_dump(),
        )

    return PublishAssessmentResponse(
        success=True,
        message="Assessment published successfully",
        count=count,
    )
