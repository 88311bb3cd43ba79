"""Collaborator model.

Collaborators are the freelancers assigned to paid projects. Projects
reference them; they are never owned by a project.
"""

from __future__ import annotations

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from clientportal.database.models.base import Base, TimestampMixin


class Collaborator(TimestampMixin, Base):
    """A collaborator who can be assigned to projects and paid per invoice."""

    __tablename__ = "collaborators"

    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    email: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
