"""Lookup indexes for the client portal.

Indexes the columns used by client project listings, monthly invoice
grouping, invoice review queues and briefing lookups.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

INDEXES = [
    ("ix_projects_client_email", "projects", ["client_email"]),
    ("ix_projects_monthly_invoice_id", "projects", ["monthly_invoice_id"]),
    ("ix_projects_invoice_status", "projects", ["invoice_status"]),
    ("ix_project_briefings_project_id", "project_briefings", ["project_id"]),
    ("ix_briefing_images_project_id", "briefing_images", ["project_id"]),
]


def upgrade() -> None:
    for name, table, columns in INDEXES:
        op.create_index(name, table, columns)


def downgrade() -> None:
    for name, table, _ in reversed(INDEXES):
        op.drop_index(name, table_name=table)
