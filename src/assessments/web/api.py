"""FastAPI application factory.

Main entry point for the Assessments Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assessments import __version__
from assessments.config import ConfigError, load_app_config
from assessments.core.assessment_service import AssessmentNotFoundError, check_connection
from assessments.db import DatabaseClient, DatabaseError, get_db_client
from assessments.web.routes import assessments_router, health_router

logger = structlog.get_logger(__name__)


def _resolve_client(app: FastAPI) -> DatabaseClient:
    """The client requests will see, honouring dependency overrides."""
    provider = app.dependency_overrides.get(get_db_client, get_db_client)
    return provider()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Verify database connectivity on startup; serve either way."""
    try:
        await check_connection(_resolve_client(app))
        logger.info("api_startup", database="ok")
    except (ConfigError, DatabaseError) as e:
        logger.error("database_unreachable", error=str(e))
    yield


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error(
        "database_error",
        path=request.url.path,
        table=exc.table,
        error=exc.message,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


async def not_found_handler(request: Request, exc: AssessmentNotFoundError) -> JSONResponse:
    logger.info("assessment_not_found", tool_id=exc.tool_id)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Assessment tool not found"},
    )


def create_app(db_client: DatabaseClient | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_client: Client to use for every request instead of the one
            built from configuration.

    Returns:
        Configured FastAPI app instance
    """
    config = load_app_config()

    app = FastAPI(
        title="Assessments API",
        description="Assessment tools, questions, scales and student assignments",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(AssessmentNotFoundError, not_found_handler)

    if db_client is not None:
        app.dependency_overrides[get_db_client] = lambda: db_client

    app.include_router(health_router)
    app.include_router(assessments_router)

    return app


# Default app instance for uvicorn
app = create_app()
