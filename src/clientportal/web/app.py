"""FastAPI application factory for the client portal.

This module provides the application factory that creates and configures
a FastAPI application with:
- CORS middleware for the client and admin frontends
- Request logging middleware with correlation IDs
- Database connection lifecycle management
- The uniform response envelope for every error
- Project, invoice and health routers

Example usage:
    >>> from clientportal.config import load_config
    >>> from clientportal.web.app import create_app
    >>>
    >>> app = create_app(load_config())
    >>>
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=8000)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clientportal import __version__
from clientportal.config import PortalConfig
from clientportal.database.connection import get_engine, get_session_factory
from clientportal.logging import get_logger
from clientportal.notifications.gateway import NotificationGateway
from clientportal.web.middleware import RequestLoggingMiddleware
from clientportal.web.responses import register_exception_handlers
from clientportal.web.routes.health import create_health_router
from clientportal.web.routes.invoices import create_invoices_router
from clientportal.web.routes.projects import create_projects_router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the database engine on startup and dispose of it on shutdown.

    The engine and session factory are stored in app.state, where the
    request dependencies pick them up.
    """
    config: PortalConfig = app.state.config

    logger.info("app_startup_begin", host=config.web.host, port=config.web.port)

    engine = get_engine(config.database)
    app.state.engine = engine
    app.state.session_factory = get_session_factory(engine)

    logger.info(
        "database_pool_initialized",
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )

    yield

    logger.info("app_shutdown_begin")
    await engine.dispose()
    logger.info("database_pool_disposed")


def create_app(config: PortalConfig | None = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Args:
        config: Optional PortalConfig. If None, creates default config.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = PortalConfig()

    app = FastAPI(
        title="Client Project Portal",
        version=__version__,
        description="Projects, invoices, collaborators and revisions for the client portal",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.notifier = NotificationGateway.from_config(config.mail, config.frontend)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(create_health_router())
    app.include_router(create_projects_router())
    app.include_router(create_invoices_router())

    logger.info(
        "app_created",
        cors_origins=config.web.cors_origins,
        version=__version__,
    )

    return app
