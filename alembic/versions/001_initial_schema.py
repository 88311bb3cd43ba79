"""Initial schema for the client portal.

Creates the services catalog, collaborators, projects, project briefings and
briefing images, together with the project enums.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    "project_type": ("simple", "custom"),
    "payment_status": ("pending", "paid"),
    "invoice_status": ("none", "pending", "approved", "rejected"),
    "invoice_type": ("per-project", "monthly"),
}


def _enum(name: str) -> sa.Enum:
    return sa.Enum(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        sa.Enum(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "services",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "collaborators",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=False, server_default=""),
        sa.Column("email", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("project_type", _enum("project_type"), nullable=False, server_default="simple"),
        sa.Column("client_name", sa.Text(), nullable=False, server_default="Client"),
        sa.Column("client_email", sa.Text(), nullable=True),
        sa.Column("client_user_id", sa.Text(), nullable=True),
        sa.Column("service_name", sa.Text(), nullable=True),
        sa.Column("service_price", sa.Numeric(12, 2), nullable=True),
        sa.Column(
            "selected_service_id",
            sa.Uuid(),
            sa.ForeignKey("services.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("custom_quote_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("delivery_timeline", sa.Text(), nullable=True),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("status_notes", JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("payment_status", _enum("payment_status"), nullable=False, server_default="pending"),
        sa.Column("stripe_payment_id", sa.Text(), nullable=True),
        sa.Column("invoice_url", sa.Text(), nullable=True),
        sa.Column("invoice_public_id", sa.Text(), nullable=True),
        sa.Column("invoice_status", _enum("invoice_status"), nullable=False, server_default="none"),
        sa.Column("invoice_type", _enum("invoice_type"), nullable=True),
        sa.Column("monthly_invoice_id", sa.Text(), nullable=True),
        sa.Column("monthly_invoice_month", sa.Text(), nullable=True),
        sa.Column("invoice_uploaded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("invoice_approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "assigned_collaborator_id",
            sa.Uuid(),
            sa.ForeignKey("collaborators.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("collaborator_payment_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("collaborator_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("collaborator_paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("collaborator_transfer_id", sa.Text(), nullable=True),
        sa.Column("revisions_used", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("max_revisions", sa.Integer(), nullable=False, server_default=sa.text("3")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "project_briefings",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("overall_description", sa.Text(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "briefing_images",
        sa.Column("id", sa.Uuid(), server_default=sa.text("gen_random_uuid()"), primary_key=True),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("briefing_images")
    op.drop_table("project_briefings")
    op.drop_table("projects")
    op.drop_table("collaborators")
    op.drop_table("services")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        sa.Enum(name=name).drop(bind, checkfirst=True)
