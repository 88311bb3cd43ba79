"""Invoice aggregation for the admin invoice views.

Two read-only views are built here:
- the monthly invoice summary, one entry per uploaded monthly invoice
- the accepted invoices overview, one row per approved invoice plus
  paid/unpaid totals per collaborator

The grouping functions are pure and operate on loaded Project and
Collaborator objects; InvoiceAggregationService loads those objects and
delegates to them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError

from clientportal.database.models.collaborator import Collaborator
from clientportal.database.models.project import InvoiceType, Project
from clientportal.database.queries import collaborator as collaborator_queries
from clientportal.database.queries import project as project_queries
from clientportal.errors import UnexpectedError
from clientportal.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

UNKNOWN_COLLABORATOR = "Unknown"


class CollaboratorRef(BaseModel):
    """Collaborator reference embedded in a monthly invoice summary."""

    id: str
    first_name: str
    last_name: str


class MonthlyInvoiceProject(BaseModel):
    """A project listed inside a monthly invoice summary."""

    id: str
    name: str
    client_name: str | None = None
    collaborator_payment_amount: float | None = None
    status: str | None = None


class MonthlyInvoiceSummary(BaseModel):
    """One uploaded monthly invoice with its projects and total."""

    monthly_invoice_id: str
    month: str | None = None
    invoice_url: str | None = None
    invoice_public_id: str | None = None
    invoice_status: str | None = None
    invoice_uploaded_at: datetime | None = None
    invoice_approved_at: datetime | None = None
    projects: list[MonthlyInvoiceProject]
    total_amount: float
    collaborator: CollaboratorRef | None = None


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InvoiceRow(_CamelModel):
    """A row of the accepted invoices overview."""

    id: str
    type: Literal["per-project", "monthly"]
    label: str
    collaborator_id: str
    collaborator_name: str
    amount: float
    paid: bool
    paid_at: datetime | None = None
    project_id: str | None = None
    monthly_invoice_id: str | None = None
    month: str | None = None


class CollaboratorBalance(_CamelModel):
    """Paid and outstanding payout totals for one collaborator."""

    collaborator_id: str
    collaborator_name: str
    total_paid: float
    total_left_to_pay: float


class AcceptedInvoicesOverview(_CamelModel):
    accepted_invoices: list[InvoiceRow]
    by_collaborator: list[CollaboratorBalance]


def _amount(project: Project) -> Decimal:
    return project.collaborator_payment_amount or Decimal("0")


def _collaborator_name(collaborator: Collaborator | None) -> str:
    if collaborator is None:
        return UNKNOWN_COLLABORATOR
    name = f"{collaborator.first_name or ''} {collaborator.last_name or ''}".strip()
    return name or UNKNOWN_COLLABORATOR


def month_label(month: str | None) -> str:
    """Human label for a "YYYY-MM" month, e.g. "January 2025".

    Missing months read "Monthly"; unparsable values are returned as-is.
    """
    if not month:
        return "Monthly"
    try:
        return datetime.strptime(f"{month}-01", "%Y-%m-%d").strftime("%B %Y")
    except ValueError:
        return month


def summarize_monthly_invoices(projects: Iterable[Project]) -> list[MonthlyInvoiceSummary]:
    """Group monthly-invoiced projects by their monthly invoice id.

    Invoice metadata (month, url, status, timestamps, collaborator) comes
    from the first project seen in each group. Totals sum the collaborator
    payment amounts of the group, missing amounts counting as zero.

    Args:
        projects: Projects with a monthly invoice, in display order.

    Returns:
        One summary per monthly invoice id, newest month first.
    """
    groups: dict[str, MonthlyInvoiceSummary] = {}
    totals: dict[str, Decimal] = {}

    for project in projects:
        invoice_id = project.monthly_invoice_id
        if not invoice_id:
            continue

        summary = groups.get(invoice_id)
        if summary is None:
            collaborator = project.assigned_collaborator
            summary = MonthlyInvoiceSummary(
                monthly_invoice_id=invoice_id,
                month=project.monthly_invoice_month,
                invoice_url=project.invoice_url,
                invoice_public_id=project.invoice_public_id,
                invoice_status=project.invoice_status.value if project.invoice_status else None,
                invoice_uploaded_at=project.invoice_uploaded_at,
                invoice_approved_at=project.invoice_approved_at,
                projects=[],
                total_amount=0,
                collaborator=(
                    CollaboratorRef(
                        id=str(collaborator.id),
                        first_name=collaborator.first_name,
                        last_name=collaborator.last_name or "",
                    )
                    if collaborator is not None
                    else None
                ),
            )
            groups[invoice_id] = summary
            totals[invoice_id] = Decimal("0")

        summary.projects.append(
            MonthlyInvoiceProject(
                id=str(project.id),
                name=project.name,
                client_name=project.client_name,
                collaborator_payment_amount=(
                    float(project.collaborator_payment_amount)
                    if project.collaborator_payment_amount is not None
                    else None
                ),
                status=project.status,
            )
        )
        totals[invoice_id] += _amount(project)

    for invoice_id, summary in groups.items():
        summary.total_amount = float(totals[invoice_id])

    # sorted() is stable, so equal months keep their input order
    return sorted(groups.values(), key=lambda s: s.month or "", reverse=True)


def build_accepted_overview(
    projects: Sequence[Project],
    collaborators: Iterable[Collaborator],
) -> AcceptedInvoicesOverview:
    """Build the accepted invoices overview.

    Per-project invoices yield one row each. Monthly invoices yield a single
    row per monthly invoice id at the position of the group's first project;
    its amount is the group sum, it is paid only when every project in the
    group is paid, and its paid time is the first one found in the group.

    Per-collaborator totals are computed from the individual projects.
    Collaborators with nothing paid and nothing outstanding are left out.
    Collaborator names, in rows and balances alike, read "Unknown" when both
    first and last name are blank, so the admin table never shows an empty
    cell.

    Args:
        projects: Approved-invoice projects, newest approval first.
        collaborators: All collaborators.

    Returns:
        The overview rows and per-collaborator balances.
    """
    rows: list[InvoiceRow] = []
    seen_monthly: set[str] = set()

    for project in projects:
        collaborator = project.assigned_collaborator
        collaborator_id = str(project.assigned_collaborator_id or "")
        collaborator_name = _collaborator_name(collaborator)

        if project.invoice_type is InvoiceType.monthly and project.monthly_invoice_id:
            invoice_id = project.monthly_invoice_id
            if invoice_id in seen_monthly:
                continue
            seen_monthly.add(invoice_id)

            group = [p for p in projects if p.monthly_invoice_id == invoice_id]
            month = project.monthly_invoice_month
            rows.append(
                InvoiceRow(
                    id=invoice_id,
                    type="monthly",
                    label=f"{month_label(month)} - Monthly Invoice",
                    collaborator_id=collaborator_id,
                    collaborator_name=collaborator_name,
                    amount=float(sum((_amount(p) for p in group), Decimal("0"))),
                    paid=all(bool(p.collaborator_paid) for p in group),
                    paid_at=next(
                        (p.collaborator_paid_at for p in group if p.collaborator_paid_at),
                        None,
                    ),
                    monthly_invoice_id=invoice_id,
                    month=month,
                )
            )
        else:
            rows.append(
                InvoiceRow(
                    id=str(project.id),
                    type="per-project",
                    label=project.name,
                    collaborator_id=collaborator_id,
                    collaborator_name=collaborator_name,
                    amount=float(_amount(project)),
                    paid=bool(project.collaborator_paid),
                    paid_at=project.collaborator_paid_at,
                    project_id=str(project.id),
                )
            )

    balances: list[CollaboratorBalance] = []
    for collaborator in collaborators:
        assigned = [p for p in projects if p.assigned_collaborator_id == collaborator.id]
        total_paid = sum((_amount(p) for p in assigned if p.collaborator_paid), Decimal("0"))
        total_unpaid = sum(
            (_amount(p) for p in assigned if not p.collaborator_paid), Decimal("0")
        )
        if total_paid == 0 and total_unpaid == 0:
            continue
        balances.append(
            CollaboratorBalance(
                collaborator_id=str(collaborator.id),
                collaborator_name=_collaborator_name(collaborator),
                total_paid=float(total_paid),
                total_left_to_pay=float(total_unpaid),
            )
        )

    return AcceptedInvoicesOverview(accepted_invoices=rows, by_collaborator=balances)


class InvoiceAggregationService:
    """Load invoice data and build the admin invoice views."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def monthly_invoice_summary(self) -> list[MonthlyInvoiceSummary]:
        try:
            async with self.session_factory() as session:
                projects = await project_queries.list_monthly_invoice_projects(session)
        except SQLAlchemyError as exc:
            logger.error("monthly_invoice_summary_failed", error=str(exc))
            raise UnexpectedError(str(exc)) from exc

        summaries = summarize_monthly_invoices(projects)
        logger.debug("monthly_invoice_summary_built", invoices=len(summaries))
        return summaries

    async def accepted_invoices_overview(self) -> AcceptedInvoicesOverview:
        try:
            async with self.session_factory() as session:
                projects = await project_queries.list_approved_invoice_projects(session)
                collaborators = await collaborator_queries.list_collaborators(session)
        except SQLAlchemyError as exc:
            logger.error("accepted_invoices_overview_failed", error=str(exc))
            raise UnexpectedError(str(exc)) from exc

        overview = build_accepted_overview(projects, collaborators)
        logger.debug(
            "accepted_invoices_overview_built",
            rows=len(overview.accepted_invoices),
            collaborators=len(overview.by_collaborator),
        )
        return overview
