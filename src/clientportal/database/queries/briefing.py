"""Briefing store query functions.

Briefings and their images are keyed by project id; images are always
returned in display order.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clientportal.database.models.briefing import BriefingImage, ProjectBriefing

logger = structlog.get_logger(__name__)


async def get_briefing(session: AsyncSession, project_id: UUID) -> ProjectBriefing | None:
    """Retrieve the briefing of a project, or None."""
    stmt = (
        select(ProjectBriefing)
        .where(ProjectBriefing.project_id == project_id)
        .order_by(ProjectBriefing.created_at)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_briefing_images(session: AsyncSession, project_id: UUID) -> list[BriefingImage]:
    """List the briefing images of a project by ascending order.

    Images without an order come last, in insertion order.
    """
    stmt = (
        select(BriefingImage)
        .where(BriefingImage.project_id == project_id)
        .order_by(BriefingImage.order.is_(None), BriefingImage.order, BriefingImage.created_at)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_briefing(
    session: AsyncSession,
    project_id: UUID,
    overall_description: str | None,
    submitted_at: datetime | None = None,
) -> ProjectBriefing:
    """Insert a briefing for a project."""
    briefing = ProjectBriefing(
        project_id=project_id,
        overall_description=overall_description,
        submitted_at=submitted_at,
    )
    session.add(briefing)
    await session.flush()
    return briefing


async def create_briefing_image(
    session: AsyncSession,
    project_id: UUID,
    image_url: str,
    notes: str | None = None,
    order: int | None = None,
) -> BriefingImage:
    """Insert a briefing image for a project."""
    image = BriefingImage(project_id=project_id, image_url=image_url, notes=notes, order=order)
    session.add(image)
    await session.flush()
    return image


async def copy_briefing(
    session: AsyncSession,
    source_project_id: UUID,
    target_project_id: UUID,
) -> int:
    """Copy a project's briefing and images onto another project.

    Image order is preserved; images without an order get their list position.

    Returns:
        Number of images copied.
    """
    briefing = await get_briefing(session, source_project_id)
    if briefing is not None:
        await create_briefing(
            session,
            project_id=target_project_id,
            overall_description=briefing.overall_description,
            submitted_at=briefing.submitted_at,
        )

    images = await list_briefing_images(session, source_project_id)
    for position, image in enumerate(images):
        await create_briefing_image(
            session,
            project_id=target_project_id,
            image_url=image.image_url,
            notes=image.notes,
            order=image.order if image.order is not None else position,
        )

    logger.info(
        "briefing_copied",
        source_project_id=str(source_project_id),
        target_project_id=str(target_project_id),
        has_briefing=briefing is not None,
        image_count=len(images),
    )

    return len(images)
