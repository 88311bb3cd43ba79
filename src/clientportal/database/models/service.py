"""Service catalog model.

A Service is a catalog entry a client can pick for a project through
service selection.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from clientportal.database.models.base import Base, TimestampMixin


class Service(TimestampMixin, Base):
    """A predefined service offered in the catalog."""

    __tablename__ = "services"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
