"""Project model for the client portal.

Defines the Project table together with the enums for project type,
client payment, invoice status and invoice type.

A project carries its commercial terms (a fixed-price service for simple
projects, a quoted amount for custom ones), a free-form lifecycle status
with per-status notes, the collaborator invoice and payout fields, and the
revision counters.
"""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, Text, Uuid
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clientportal.database.models.base import Base, JSONType, TimestampMixin

if TYPE_CHECKING:
    from clientportal.database.models.collaborator import Collaborator
    from clientportal.database.models.service import Service


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class ProjectType(enum.Enum):
    """Commercial shape of a project.

    States:
        simple: Predefined service at a fixed price.
        custom: Bespoke engagement with a quoted amount.
    """

    simple = "simple"
    custom = "custom"


class PaymentStatus(enum.Enum):
    """Client payment state. Set to paid by the checkout integration."""

    pending = "pending"
    paid = "paid"


class InvoiceStatus(enum.Enum):
    """Review state of the collaborator's invoice.

    States:
        none: No invoice uploaded yet.
        pending: Uploaded and awaiting review.
        approved: Accepted by an admin (terminal).
        rejected: Refused; the collaborator may upload again.
    """

    none = "none"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class InvoiceType(enum.Enum):
    """Whether an invoice covers one project or a monthly group."""

    per_project = "per-project"
    monthly = "monthly"


DEFAULT_MAX_REVISIONS = 3
DEFAULT_DELIVERY_TIMELINE = "30 days"
DEFAULT_CLIENT_NAME = "Client"


class Project(TimestampMixin, Base):
    """A client project tracked by the portal.

    Attributes:
        id: UUID primary key (from TimestampMixin).
        name: Project name shown to client and admin.
        project_type: simple or custom.
        client_name / client_email / client_user_id: Client linkage.
        service_name / service_price: Fixed-price service (simple projects).
        selected_service_id: Catalog service chosen by the client.
        custom_quote_amount: Quoted amount (custom projects).
        status: Free-form lifecycle tag (pending, review, revision, completed...).
        status_notes: Mapping of status name to the latest note for it.
        payment_status: Client payment state.
        invoice_*: Collaborator invoice fields.
        monthly_invoice_id / monthly_invoice_month: Monthly group linkage.
        assigned_collaborator_id: Collaborator doing the work.
        collaborator_payment_amount: Payout owed to the collaborator.
        collaborator_paid / collaborator_paid_at / collaborator_transfer_id: Payout state.
        revisions_used / max_revisions: Revision counters.
        completed_at: First time the project reached "completed".
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    project_type: Mapped[ProjectType] = mapped_column(
        SAEnum(ProjectType, name="project_type", values_callable=_enum_values),
        default=ProjectType.simple,
        nullable=False,
    )

    client_name: Mapped[str] = mapped_column(Text, default=DEFAULT_CLIENT_NAME, nullable=False)
    client_email: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    client_user_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    service_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    service_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    selected_service_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("services.id", ondelete="SET NULL"), nullable=True
    )
    custom_quote_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    delivery_timeline: Mapped[str | None] = mapped_column(Text, nullable=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(Text, default="pending", nullable=False)
    status_notes: Mapped[dict[str, str]] = mapped_column(JSONType, default=dict, nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(PaymentStatus, name="payment_status", values_callable=_enum_values),
        default=PaymentStatus.pending,
        nullable=False,
    )
    stripe_payment_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    invoice_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    invoice_public_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    invoice_status: Mapped[InvoiceStatus] = mapped_column(
        SAEnum(InvoiceStatus, name="invoice_status", values_callable=_enum_values),
        default=InvoiceStatus.none,
        nullable=False,
        index=True,
    )
    invoice_type: Mapped[InvoiceType | None] = mapped_column(
        SAEnum(InvoiceType, name="invoice_type", values_callable=_enum_values),
        nullable=True,
    )
    monthly_invoice_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    monthly_invoice_month: Mapped[str | None] = mapped_column(Text, nullable=True)
    invoice_uploaded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    invoice_approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    assigned_collaborator_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("collaborators.id", ondelete="SET NULL"), nullable=True
    )
    collaborator_payment_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    collaborator_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    collaborator_paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    collaborator_transfer_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    revisions_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    max_revisions: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_MAX_REVISIONS, nullable=False
    )

    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    selected_service: Mapped[Service | None] = relationship(lazy="selectin")
    assigned_collaborator: Mapped[Collaborator | None] = relationship(lazy="selectin")

    @property
    def revisions_remaining(self) -> int:
        return max(self.max_revisions - self.revisions_used, 0)
