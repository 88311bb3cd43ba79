"""Project lifecycle: creation, duplication and state transitions.

The service itself lives in ``clientportal.lifecycle.service``; this package
root only exposes the mutation intents and parsers, which the store layer
depends on.
"""

from __future__ import annotations

from clientportal.lifecycle.parsing import parse_amount, parse_deadline
from clientportal.lifecycle.updates import (
    AssignCollaborator,
    ChangeStatus,
    ClaimRevision,
    DecideInvoice,
    ProjectUpdate,
    QuoteCustomAmount,
    SelectService,
    UnassignCollaborator,
)

__all__ = [
    "parse_amount",
    "parse_deadline",
    "AssignCollaborator",
    "ChangeStatus",
    "ClaimRevision",
    "DecideInvoice",
    "ProjectUpdate",
    "QuoteCustomAmount",
    "SelectService",
    "UnassignCollaborator",
]
