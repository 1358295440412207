"""Root and health check endpoints."""

from datetime import datetime, timezone
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends

from assessments import __version__
from assessments.core.assessment_service import check_connection
from assessments.db import DatabaseClient, DatabaseError, get_db_client
from assessments.web.schemas import HealthResponse, WelcomeResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/", response_model=WelcomeResponse)
async def welcome() -> WelcomeResponse:
    """Welcome message."""
    return WelcomeResponse()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: Annotated[DatabaseClient, Depends(get_db_client)],
) -> HealthResponse:
    """Check API health and database reachability."""
    try:
        await check_connection(db)
        database = "ok"
    except DatabaseError as e:
        logger.warning("health_database_unreachable", table=e.table, error=e.message)
        database = "unreachable"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        version=__version__,
        database=database,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
