"""SQLAlchemy ORM models for the client portal.

This module defines the database schema: projects, collaborators, catalog
services, project briefings and briefing images.

All models use SQLAlchemy 2.0 declarative style with Mapped[] type annotations.
"""

from clientportal.database.models.base import Base, TimestampMixin
from clientportal.database.models.briefing import BriefingImage, ProjectBriefing
from clientportal.database.models.collaborator import Collaborator
from clientportal.database.models.project import (
    InvoiceStatus,
    InvoiceType,
    PaymentStatus,
    Project,
    ProjectType,
)
from clientportal.database.models.service import Service

__all__ = [
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
