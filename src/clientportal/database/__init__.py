"""Database layer for the client portal.

This module handles database connections, session management, and provides
the SQLAlchemy async engine configuration.

Public API:
    get_engine: Create an AsyncEngine from DatabaseConfig.
    get_session_factory: Create an async_sessionmaker from an engine.
    Base: SQLAlchemy declarative base for all models.
"""

from clientportal.database.connection import get_engine, get_session_factory
from clientportal.database.models import (
    Base,
    BriefingImage,
    Collaborator,
    InvoiceStatus,
    InvoiceType,
    PaymentStatus,
    Project,
    ProjectBriefing,
    ProjectType,
    Service,
    TimestampMixin,
)

__all__ = [
    "get_engine",
    "get_session_factory",
    "Base",
    "TimestampMixin",
    "Project",
    "ProjectType",
    "PaymentStatus",
    "InvoiceStatus",
    "InvoiceType",
    "Collaborator",
    "Service",
    "ProjectBriefing",
    "BriefingImage",
]
