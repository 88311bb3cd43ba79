"""Closed set of project mutations.

Every write to an existing project goes through one of the intents below.
Each intent knows exactly which columns it touches; ``values`` returns them
for a given project so the store can apply them to a loaded row, and the
invoice decision can also be applied to a whole monthly group.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Union

from clientportal.database.models.project import InvoiceStatus, Project

COMPLETED_STATUS = "completed"
REVISION_STATUS = "revision"


def _merge_note(project: Project | None, status: str, note: str | None) -> dict[str, Any]:
    if note is None or project is None:
        return {}
    notes = dict(project.status_notes or {})
    notes[status] = note
    return {"status_notes": notes}


def _clean_note(note: str | None) -> str | None:
    if not isinstance(note, str):
        return None
    note = note.strip()
    return note or None


@dataclass(frozen=True)
class SelectService:
    """Client picked a catalog service."""

    service_id: uuid.UUID

    def values(self, project: Project | None, now: datetime) -> dict[str, Any]:
        return {"selected_service_id": self.service_id, "updated_at": now}


@dataclass(frozen=True)
class QuoteCustomAmount:
    """Client accepted a custom quote amount."""

    amount: Decimal

    def values(self, project: Project | None, now: datetime) -> dict[str, Any]:
        return {"custom_quote_amount": self.amount, "updated_at": now}


@dataclass(frozen=True)
class ChangeStatus:
    """Move the project to a new lifecycle status, optionally with a note.

    completed_at is only stamped when the project enters "completed" from a
    different status, so repeated completions keep the first timestamp.
    """

    status: str
    notes: str | None = None

    def values(self, project: Project | None, now: datetime) -> dict[str, Any]:
        values: dict[str, Any] = {"status": self.status, "updated_at": now}
        if self.status == COMPLETED_STATUS and (
            project is None or project.status != COMPLETED_STATUS
        ):
            values["completed_at"] = now
        values.update(_merge_note(project, self.status, _clean_note(self.notes)))
        return values


@dataclass(frozen=True)
class DecideInvoice:
    """Approve or reject the collaborator's invoice."""

    decision: InvoiceStatus

    def __post_init__(self) -> None:
        if self.decision not in (InvoiceStatus.approved, InvoiceStatus.rejected):
            raise ValueError(f"Invoice decision must be approved or rejected, not {self.decision.value}")

    def values(self, project: Project | None, now: datetime) -> dict[str, Any]:
        values: dict[str, Any] = {"invoice_status": self.decision, "updated_at": now}
        if self.decision is InvoiceStatus.approved:
            values["invoice_approved_at"] = now
        return values


@dataclass(frozen=True)
class AssignCollaborator:
    """Assign a collaborator with the payout they will receive."""

    collaborator_id: uuid.UUID
    payment_amount: Decimal

    def values(self, project: Project | None, now: datetime) -> dict[str, Any]:
        return {
            "assigned_collaborator_id": self.collaborator_id,
            "collaborator_payment_amount": self.payment_amount,
            "updated_at": now,
        }


@dataclass(frozen=True)
class UnassignCollaborator:
    """Remove the collaborator and their payout amount."""

    def values(self, project: Project | None, now: datetime) -> dict[str, Any]:
        return {
            "assigned_collaborator_id": None,
            "collaborator_payment_amount": None,
            "updated_at": now,
        }


@dataclass(frozen=True)
class ClaimRevision:
    """Consume one revision and put the project back into "revision"."""

    description: str | None = None

    def values(self, project: Project | None, now: datetime) -> dict[str, Any]:
        if project is None:
            raise ValueError("ClaimRevision needs the current project")
        values: dict[str, Any] = {
            "revisions_used": project.revisions_used + 1,
            "status": REVISION_STATUS,
            "updated_at": now,
        }
        values.update(_merge_note(project, REVISION_STATUS, _clean_note(self.description)))
        return values


ProjectUpdate = Union[
    SelectService,
    QuoteCustomAmount,
    ChangeStatus,
    DecideInvoice,
    AssignCollaborator,
    UnassignCollaborator,
    ClaimRevision,
]
