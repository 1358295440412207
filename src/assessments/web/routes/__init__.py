"""Route handlers for Web API."""

from assessments.web.routes.assessments import router as assessments_router
from assessments.web.routes.health import router as health_router

__all__ = [
    "assessments_router",
    "health_router",
]
