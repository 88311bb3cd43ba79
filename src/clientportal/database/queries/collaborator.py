"""Collaborator and catalog service query functions."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clientportal.database.models.collaborator import Collaborator
from clientportal.database.models.service import Service

logger = structlog.get_logger(__name__)


async def create_collaborator(
    session: AsyncSession,
    first_name: str,
    last_name: str = "",
    email: str | None = None,
) -> Collaborator:
    """Insert a collaborator."""
    collaborator = Collaborator(first_name=first_name, last_name=last_name, email=email)
    session.add(collaborator)
    await session.flush()

    logger.info("collaborator_created", collaborator_id=str(collaborator.id))
    return collaborator


async def get_collaborator(session: AsyncSession, collaborator_id: UUID) -> Collaborator | None:
    """Retrieve a collaborator by ID, or None."""
    result = await session.execute(
        select(Collaborator).where(Collaborator.id == collaborator_id)
    )
    return result.scalar_one_or_none()


async def list_collaborators(session: AsyncSession) -> list[Collaborator]:
    """List collaborators ordered by first name, then last name."""
    stmt = select(Collaborator).order_by(Collaborator.first_name, Collaborator.last_name)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def create_service(
    session: AsyncSession,
    name: str,
    price: Decimal | None = None,
    description: str | None = None,
) -> Service:
    """Insert a catalog service."""
    service = Service(name=name, price=price, description=description)
    session.add(service)
    await session.flush()

    logger.info("service_created", service_id=str(service.id), name=name)
    return service


async def get_service(session: AsyncSession, service_id: UUID) -> Service | None:
    """Retrieve a catalog service by ID, or None."""
    result = await session.execute(select(Service).where(Service.id == service_id))
    return result.scalar_one_or_none()
