"""FastAPI route definitions for the client portal API."""

from __future__ import annotations

from clientportal.web.routes.health import (
    HealthResponse,
    ReadinessResponse,
    create_health_router,
)
from clientportal.web.routes.invoices import create_invoices_router
from clientportal.web.routes.projects import create_projects_router

__all__ = [
    "HealthResponse",
    "ReadinessResponse",
    "create_health_router",
    "create_invoices_router",
    "create_projects_router",
]
