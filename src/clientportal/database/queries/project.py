"""Project store query functions.

Provides async functions for creating, reading and updating Project records
using the SQLAlchemy 2.0 select() API. Functions never commit; the calling
service owns the transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clientportal.database.models.base import utcnow
from clientportal.database.models.project import (
    InvoiceStatus,
    InvoiceType,
    Project,
    ProjectType,
)
from clientportal.lifecycle.updates import DecideInvoice, ProjectUpdate

logger = structlog.get_logger(__name__)


async def create_project(session: AsyncSession, **fields: Any) -> Project:
    """Insert a new project.

    Args:
        session: Active async database session.
        **fields: Column values; unset columns take their model defaults.

    Returns:
        The newly created Project instance with references loaded.
    """
    project = Project(**fields)
    session.add(project)
    await session.flush()
    await session.refresh(project)

    logger.info(
        "project_created",
        project_id=str(project.id),
        name=project.name,
        project_type=project.project_type.value,
    )

    return project


async def get_project(
    session: AsyncSession,
    project_id: UUID,
    for_update: bool = False,
) -> Project | None:
    """Retrieve a project by ID with its service and collaborator loaded.

    Args:
        session: Active async database session.
        project_id: UUID of the project to retrieve.
        for_update: Lock the row until the transaction ends.

    Returns:
        The Project instance if found, None otherwise.
    """
    stmt = select(Project).where(Project.id == project_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_projects(session: AsyncSession) -> list[Project]:
    """List all projects, newest first."""
    stmt = select(Project).order_by(Project.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_projects_for_client(
    session: AsyncSession,
    client_email: str,
    client_user_id: str | None = None,
) -> list[Project]:
    """List projects belonging to a client, newest first.

    Args:
        session: Active async database session.
        client_email: Client email to match exactly.
        client_user_id: Optional user id; projects linked to it also match.

    Returns:
        Matching projects.
    """
    conditions = [Project.client_email == client_email]
    if client_user_id:
        conditions.append(Project.client_user_id == client_user_id)

    stmt = select(Project).where(or_(*conditions)).order_by(Project.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_simple_projects(session: AsyncSession) -> list[Project]:
    """List catalog projects: simple ones, or non-custom ones priced like a package."""
    stmt = (
        select(Project)
        .where(
            or_(
                Project.project_type == ProjectType.simple,
                and_(
                    Project.project_type != ProjectType.custom,
                    Project.service_name.is_not(None),
                    Project.service_name != "",
                    Project.service_price > 0,
                ),
            )
        )
        .order_by(Project.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_monthly_invoice_projects(session: AsyncSession) -> list[Project]:
    """List projects billed through an uploaded monthly invoice.

    Ordered by month (newest first), then upload time (newest first).
    """
    stmt = (
        select(Project)
        .where(
            Project.invoice_type == InvoiceType.monthly,
            Project.monthly_invoice_id.is_not(None),
            Project.invoice_url.is_not(None),
        )
        .order_by(Project.monthly_invoice_month.desc(), Project.invoice_uploaded_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_approved_invoice_projects(session: AsyncSession) -> list[Project]:
    """List projects whose uploaded invoice was approved and that have a collaborator.

    Ordered by approval time, newest first.
    """
    stmt = (
        select(Project)
        .where(
            Project.invoice_status == InvoiceStatus.approved,
            Project.invoice_url.is_not(None),
            Project.assigned_collaborator_id.is_not(None),
        )
        .order_by(Project.invoice_approved_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_projects_in_monthly_invoice(
    session: AsyncSession,
    monthly_invoice_id: str,
) -> list[Project]:
    """List every project in a monthly invoice group, re-reading loaded rows."""
    stmt = (
        select(Project)
        .where(Project.monthly_invoice_id == monthly_invoice_id)
        .order_by(Project.created_at)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def apply_update(
    session: AsyncSession,
    project: Project,
    change: ProjectUpdate,
    now: datetime | None = None,
) -> Project:
    """Apply a single mutation to a loaded project.

    Args:
        session: Active async database session.
        project: Project previously loaded in this session.
        change: The mutation to apply.
        now: Timestamp to record (defaults to the current time).

    Returns:
        The updated Project with references reloaded.
    """
    values = change.values(project, now or utcnow())
    for field, value in values.items():
        setattr(project, field, value)

    await session.flush()
    await session.refresh(project)

    logger.info(
        "project_updated",
        project_id=str(project.id),
        change=type(change).__name__,
        fields_updated=sorted(values),
    )

    return project


async def apply_invoice_decision_to_group(
    session: AsyncSession,
    monthly_invoice_id: str,
    decision: DecideInvoice,
    now: datetime | None = None,
) -> int:
    """Apply an invoice decision to every project of a monthly invoice group.

    All rows receive the same timestamp.

    Returns:
        Number of rows updated.
    """
    values = decision.values(None, now or utcnow())
    stmt = (
        update(Project)
        .where(Project.monthly_invoice_id == monthly_invoice_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    count = result.rowcount

    logger.info(
        "monthly_invoice_group_updated",
        monthly_invoice_id=monthly_invoice_id,
        invoice_status=decision.decision.value,
        count=count,
    )

    return count


async def count_projects(session: AsyncSession) -> int:
    """Count all projects."""
    result = await session.execute(select(func.count()).select_from(Project))
    return int(result.scalar_one())
