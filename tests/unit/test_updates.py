"""Unit tests for project update intents."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from clientportal.database.models.project import InvoiceStatus, Project
from clientportal.lifecycle.updates import (
    AssignCollaborator,
    ChangeStatus,
    ClaimRevision,
    DecideInvoice,
    QuoteCustomAmount,
    SelectService,
    UnassignCollaborator,
)

NOW = datetime(2025, 2, 1, 12, 0, tzinfo=timezone.utc)


def make_project(**overrides: object) -> Project:
    fields: dict[str, object] = {
        "name": "Brand refresh",
        "status": "pending",
        "status_notes": {},
        "revisions_used": 0,
        "max_revisions": 3,
    }
    fields.update(overrides)
    return Project(**fields)


class TestChangeStatus:
    def test_sets_status_and_timestamp(self) -> None:
        values = ChangeStatus("in-progress").values(make_project(), NOW)
        assert values == {"status": "in-progress", "updated_at": NOW}

    def test_entering_completed_stamps_completed_at(self) -> None:
        values = ChangeStatus("completed").values(make_project(status="review"), NOW)
        assert values["completed_at"] == NOW

    def test_repeated_completion_keeps_first_timestamp(self) -> None:
        values = ChangeStatus("completed").values(make_project(status="completed"), NOW)
        assert "completed_at" not in values

    def test_note_is_trimmed_and_stored_under_status(self) -> None:
        project = make_project(status_notes={"pending": "waiting on brief"})
        values = ChangeStatus("review", notes="  first draft sent  ").values(project, NOW)
        assert values["status_notes"] == {
            "pending": "waiting on brief",
            "review": "first draft sent",
        }
        # The loaded mapping is copied, not mutated
        assert project.status_notes == {"pending": "waiting on brief"}

    def test_blank_note_is_ignored(self) -> None:
        values = ChangeStatus("review", notes="   ").values(make_project(), NOW)
        assert "status_notes" not in values


class TestDecideInvoice:
    def test_approval_stamps_approved_at(self) -> None:
        values = DecideInvoice(InvoiceStatus.approved).values(None, NOW)
        assert values == {
            "invoice_status": InvoiceStatus.approved,
            "invoice_approved_at": NOW,
            "updated_at": NOW,
        }

    def test_rejection_leaves_approved_at_alone(self) -> None:
        values = DecideInvoice(InvoiceStatus.rejected).values(None, NOW)
        assert values == {"invoice_status": InvoiceStatus.rejected, "updated_at": NOW}

    @pytest.mark.parametrize("decision", [InvoiceStatus.none, InvoiceStatus.pending])
    def test_only_approve_or_reject_allowed(self, decision: InvoiceStatus) -> None:
        with pytest.raises(ValueError):
            DecideInvoice(decision)


class TestClaimRevision:
    def test_increments_and_moves_to_revision(self) -> None:
        values = ClaimRevision("Make the logo bigger").values(make_project(revisions_used=1), NOW)
        assert values["revisions_used"] == 2
        assert values["status"] == "revision"
        assert values["status_notes"] == {"revision": "Make the logo bigger"}

    def test_requires_project(self) -> None:
        with pytest.raises(ValueError):
            ClaimRevision().values(None, NOW)


class TestAssignment:
    def test_assign_sets_collaborator_and_amount(self) -> None:
        collaborator_id = uuid.uuid4()
        values = AssignCollaborator(collaborator_id, Decimal("150")).values(make_project(), NOW)
        assert values["assigned_collaborator_id"] == collaborator_id
        assert values["collaborator_payment_amount"] == Decimal("150")

    def test_unassign_clears_both_fields(self) -> None:
        values = UnassignCollaborator().values(make_project(), NOW)
        assert values["assigned_collaborator_id"] is None
        assert values["collaborator_payment_amount"] is None


class TestServiceSelection:
    def test_select_service(self) -> None:
        service_id = uuid.uuid4()
        assert SelectService(service_id).values(None, NOW)["selected_service_id"] == service_id

    def test_quote_custom_amount(self) -> None:
        values = QuoteCustomAmount(Decimal("1200")).values(None, NOW)
        assert values["custom_quote_amount"] == Decimal("1200")
