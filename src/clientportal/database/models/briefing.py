"""Project briefing models.

A briefing is the client's written description of the work, optionally
accompanied by an ordered list of reference images. Both are keyed by the
project they belong to.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from clientportal.database.models.base import Base, TimestampMixin


class ProjectBriefing(TimestampMixin, Base):
    """The client's briefing for a project.

    Attributes:
        project_id: Owning project.
        overall_description: Free-text description of the requested work.
        submitted_at: When the client submitted the briefing.
    """

    __tablename__ = "project_briefings"

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    overall_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class BriefingImage(TimestampMixin, Base):
    """A reference image attached to a project briefing.

    Attributes:
        project_id: Owning project.
        image_url: Hosted image location.
        notes: Client notes for the image.
        order: Display position; may be unset on legacy rows.
    """

    __tablename__ = "briefing_images"

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int | None] = mapped_column(Integer, nullable=True)
