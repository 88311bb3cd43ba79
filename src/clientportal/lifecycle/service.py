"""Project lifecycle service.

This module owns every state change of a Project:
- creation from an admin request (simple or custom pricing)
- duplication for a client ("duplicate for me" and checkout flows)
- service selection, status changes, invoice decisions
- collaborator assignment and revision claims

Each public operation runs in its own session and transaction taken from the
injected session factory. Store failures surface as UnexpectedError; business
rule violations raise the matching PortalError subclass.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError

from clientportal.database.models.base import utcnow
from clientportal.database.models.briefing import BriefingImage, ProjectBriefing
from clientportal.database.models.project import (
    DEFAULT_CLIENT_NAME,
    DEFAULT_DELIVERY_TIMELINE,
    InvoiceStatus,
    InvoiceType,
    PaymentStatus,
    Project,
    ProjectType,
)
from clientportal.database.queries import briefing as briefing_queries
from clientportal.database.queries import collaborator as collaborator_queries
from clientportal.database.queries import project as project_queries
from clientportal.errors import (
    AlreadyOwnedError,
    AuthError,
    ConflictError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from clientportal.lifecycle.parsing import parse_amount, parse_deadline
from clientportal.lifecycle.updates import (
    AssignCollaborator,
    ChangeStatus,
    ClaimRevision,
    DecideInvoice,
    QuoteCustomAmount,
    SelectService,
    UnassignCollaborator,
)
from clientportal.logging import get_logger
from clientportal.notifications.gateway import NotificationGateway, NotificationResult

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

CUSTOM_SERVICE = "Custom Service"

# Columns a duplicate never inherits from its source
DUPLICATE_EXCLUDED_FIELDS = frozenset(
    {
        "id",
        "created_at",
        "updated_at",
        "client_name",
        "client_email",
        "client_user_id",
        "payment_status",
        "stripe_payment_id",
        "assigned_collaborator_id",
        "collaborator_payment_amount",
        "collaborator_paid",
        "collaborator_paid_at",
        "collaborator_transfer_id",
        "invoice_url",
        "invoice_public_id",
        "invoice_status",
        "invoice_uploaded_at",
        "invoice_approved_at",
        "invoice_type",
        "monthly_invoice_id",
        "monthly_invoice_month",
        "revisions_used",
        "completed_at",
    }
)


@dataclass(frozen=True)
class AuthIdentity:
    """Authenticated client forwarded by the auth layer."""

    email: str | None = None
    user_id: str | None = None


@dataclass
class NewProject:
    """Admin request to create a project.

    Prices and amounts are accepted as numbers or display strings.
    """

    name: str | None
    client_name: str | None = None
    client_email: str | None = None
    project_type: str | None = None
    service: str | None = None
    service_price: Any = None
    amount: Any = None
    deadline: Any = None
    notify_client: bool = False


@dataclass
class ProjectDetails:
    """A project with its briefing and ordered briefing images."""

    project: Project
    briefing: ProjectBriefing | None
    images: list[BriefingImage] = field(default_factory=list)


@dataclass
class InvoiceDecisionResult:
    """Projects affected by an invoice approval or rejection."""

    decision: InvoiceStatus
    projects: list[Project]
    count: int
    monthly_invoice_id: str | None = None

    @property
    def is_monthly(self) -> bool:
        return self.monthly_invoice_id is not None

    @property
    def message(self) -> str:
        if self.decision is InvoiceStatus.approved:
            if self.is_monthly:
                return f"Monthly invoice approved successfully for {self.count} project(s)"
            return "Invoice approved successfully"
        if self.is_monthly:
            return f"Monthly invoice rejected for {self.count} project(s)"
        return "Invoice rejected"


@dataclass
class RevisionClaimResult:
    """Project after a revision claim and the revisions left."""

    project: Project
    remaining: int

    @property
    def message(self) -> str:
        return f"Revision claimed successfully. {self.remaining} revision(s) remaining."


def duplicable_fields(project: Project) -> dict[str, Any]:
    """Column values a duplicate copies from its source."""
    values: dict[str, Any] = {}
    for attr in sa_inspect(Project).column_attrs:
        if attr.key in DUPLICATE_EXCLUDED_FIELDS:
            continue
        value = getattr(project, attr.key)
        if isinstance(value, dict):
            value = dict(value)
        values[attr.key] = value
    return values


def is_owned_by(project: Project, email: str | None, user_id: str | None) -> bool:
    """True when the project already belongs to the given client."""
    if project.client_email and email and project.client_email.lower() == email.lower():
        return True
    return bool(user_id and project.client_user_id and str(project.client_user_id) == str(user_id))


def _as_uuid(value: uuid.UUID | str, label: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid {label}: {value}") from exc


def _parse_project_type(value: str | None) -> ProjectType:
    try:
        return ProjectType(value or ProjectType.simple.value)
    except ValueError as exc:
        raise ValidationError(
            f"Invalid project_type: {value}. Valid values: {[t.value for t in ProjectType]}"
        ) from exc


class ProjectLifecycleService:
    """State transitions and duplication workflows for projects.

    Attributes:
        session_factory: Factory producing AsyncSession instances.
        notifier: Gateway used for client emails (optional).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: NotificationGateway | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.notifier = notifier
        self.logger = logger.bind(component="ProjectLifecycleService")

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session, session.begin():
                yield session
        except SQLAlchemyError as exc:
            self.logger.error("store_operation_failed", error=str(exc))
            raise UnexpectedError(str(exc)) from exc

    async def _require_project(
        self,
        session: AsyncSession,
        project_id: uuid.UUID,
        for_update: bool = False,
    ) -> Project:
        project = await project_queries.get_project(session, project_id, for_update=for_update)
        if project is None:
            self.logger.warning("project_not_found", project_id=str(project_id))
            raise NotFoundError("Project not found")
        return project

    # Reads

    async def get_project(self, project_id: uuid.UUID) -> Project:
        async with self._transaction() as session:
            return await self._require_project(session, project_id)

    async def get_project_details(self, project_id: uuid.UUID) -> ProjectDetails:
        """Project plus briefing and briefing images for the client dashboard."""
        async with self._transaction() as session:
            project = await self._require_project(session, project_id)
            briefing = await briefing_queries.get_briefing(session, project_id)
            images = await briefing_queries.list_briefing_images(session, project_id)
        return ProjectDetails(project=project, briefing=briefing, images=images)

    async def list_projects(self) -> list[Project]:
        async with self._transaction() as session:
            return await project_queries.list_projects(session)

    async def list_client_projects(self, client_email: str | None) -> list[Project]:
        if not client_email:
            raise ValidationError("Client email is required")
        async with self._transaction() as session:
            return await project_queries.list_projects_for_client(session, client_email)

    async def list_my_projects(self, identity: AuthIdentity) -> list[Project]:
        """Projects of the authenticated client, matched by email or user id."""
        if not identity.email:
            raise AuthError()
        async with self._transaction() as session:
            return await project_queries.list_projects_for_client(
                session, identity.email, identity.user_id
            )

    async def list_simple_projects(self) -> list[Project]:
        async with self._transaction() as session:
            return await project_queries.list_simple_projects(session)

    # Creation and duplication

    async def create(self, draft: NewProject) -> Project:
        """Create a project from an admin request.

        Simple projects with a named service store the service name and its
        parsed price. Custom projects (or a "Custom Service" request carrying
        an amount) store the parsed quote. Both get the default delivery
        timeline. Unparsable prices are ignored.

        Raises:
            ValidationError: If the name is missing, or the client email,
                deadline or project type is invalid.
        """
        name = (draft.name or "").strip()
        if not name:
            raise ValidationError("Project name is required")

        client_email = (draft.client_email or "").strip() or None
        if client_email and ("\r" in client_email or "\n" in client_email):
            raise ValidationError("Invalid client email")

        project_type = _parse_project_type(draft.project_type)
        fields: dict[str, Any] = {
            "name": name,
            "client_name": draft.client_name or DEFAULT_CLIENT_NAME,
            "client_email": client_email,
            "project_type": project_type,
            "status": "pending",
            "payment_status": PaymentStatus.pending,
        }

        if project_type is ProjectType.simple and draft.service and draft.service != CUSTOM_SERVICE:
            fields["service_name"] = draft.service
            fields["delivery_timeline"] = DEFAULT_DELIVERY_TIMELINE
            price = parse_amount(draft.service_price)
            if price is not None:
                fields["service_price"] = price
        elif project_type is ProjectType.custom or (
            draft.service == CUSTOM_SERVICE and draft.amount
        ):
            fields["project_type"] = ProjectType.custom
            fields["delivery_timeline"] = DEFAULT_DELIVERY_TIMELINE
            amount = parse_amount(draft.amount)
            if amount is not None:
                fields["custom_quote_amount"] = amount

        deadline = parse_deadline(draft.deadline)
        if deadline is not None:
            fields["deadline"] = deadline

        async with self._transaction() as session:
            project = await project_queries.create_project(session, **fields)

        if draft.notify_client and project.client_email:
            await self._notify(project)

        return project

    async def duplicate(
        self,
        source_project_id: uuid.UUID,
        client_email: str,
        client_user_id: str | None = None,
        copy_briefing_and_images: bool = False,
    ) -> Project | None:
        """Clone a project for another client.

        Payment, invoice, collaborator payout, revision usage and completion
        fields start from their defaults on the copy.

        Args:
            source_project_id: Project to copy.
            client_email: Email of the client receiving the copy.
            client_user_id: Optional user id of that client.
            copy_briefing_and_images: Also copy the briefing and its images.

        Returns:
            The new project, or None if the source does not exist.

        Raises:
            AlreadyOwnedError: If the source already belongs to this client.
        """
        async with self._transaction() as session:
            source = await project_queries.get_project(session, source_project_id)
            if source is None:
                self.logger.warning("duplicate_source_not_found", project_id=str(source_project_id))
                return None

            if is_owned_by(source, client_email, client_user_id):
                raise AlreadyOwnedError()

            values = duplicable_fields(source)
            values.update(
                client_name=DEFAULT_CLIENT_NAME,
                client_email=client_email,
                client_user_id=client_user_id,
                payment_status=PaymentStatus.pending,
            )
            duplicate = await project_queries.create_project(session, **values)

            if copy_briefing_and_images:
                await briefing_queries.copy_briefing(session, source.id, duplicate.id)

        self.logger.info(
            "project_duplicated",
            source_project_id=str(source_project_id),
            project_id=str(duplicate.id),
            copied_briefing=copy_briefing_and_images,
        )
        return duplicate

    async def duplicate_for_user(
        self,
        identity: AuthIdentity,
        source_project_id: uuid.UUID,
    ) -> Project:
        """Give the authenticated client their own copy of a catalog project.

        Raises:
            AuthError: If no authenticated email is present.
            NotFoundError: If the source project does not exist.
            AlreadyOwnedError: If the client already owns the source.
        """
        if not identity.email:
            raise AuthError()
        duplicate = await self.duplicate(source_project_id, identity.email, identity.user_id)
        if duplicate is None:
            raise NotFoundError("Project not found")
        return duplicate

    async def duplicate_for_checkout(
        self,
        source_project_id: uuid.UUID,
        client_email: str,
        client_user_id: str | None,
        copy_briefing_and_images: bool,
    ) -> Project | None:
        """Checkout flow: each purchase gets its own project row."""
        return await self.duplicate(
            source_project_id, client_email, client_user_id, copy_briefing_and_images
        )

    # Mutations

    async def update_service_selection(
        self,
        project_id: uuid.UUID,
        service_id: uuid.UUID | str | None = None,
        custom_amount: Any = None,
    ) -> Project:
        """Record the client's choice of catalog service or custom amount.

        A service id takes precedence over a custom amount.
        """
        async with self._transaction() as session:
            project = await self._require_project(session, project_id)

            if service_id:
                service_uuid = _as_uuid(service_id, "service id")
                if await collaborator_queries.get_service(session, service_uuid) is None:
                    raise NotFoundError("Service not found")
                change: SelectService | QuoteCustomAmount = SelectService(service_uuid)
            elif custom_amount:
                amount = parse_amount(custom_amount)
                if amount is None:
                    raise ValidationError(f"Invalid custom amount: {custom_amount}")
                change = QuoteCustomAmount(amount)
            else:
                raise ValidationError("Either serviceId or customAmount is required")

            return await project_queries.apply_update(session, project, change)

    async def update_status(
        self,
        project_id: uuid.UUID,
        status: str | None,
        notes: str | None = None,
    ) -> Project:
        """Set the lifecycle status, storing an optional note under that status."""
        status = (status or "").strip()
        if not status:
            raise ValidationError("Status is required")

        async with self._transaction() as session:
            project = await self._require_project(session, project_id)
            previous = project.status
            project = await project_queries.apply_update(
                session, project, ChangeStatus(status=status, notes=notes)
            )

        self.logger.info(
            "project_status_changed",
            project_id=str(project_id),
            from_status=previous,
            to_status=status,
        )
        return project

    async def approve_invoice(self, project_id: uuid.UUID) -> InvoiceDecisionResult:
        """Approve the project's invoice, or its whole monthly invoice group."""
        return await self._decide_invoice(project_id, InvoiceStatus.approved)

    async def reject_invoice(self, project_id: uuid.UUID) -> InvoiceDecisionResult:
        """Reject the project's invoice, or its whole monthly invoice group."""
        return await self._decide_invoice(project_id, InvoiceStatus.rejected)

    async def _decide_invoice(
        self,
        project_id: uuid.UUID,
        decision: InvoiceStatus,
    ) -> InvoiceDecisionResult:
        change = DecideInvoice(decision)

        async with self._transaction() as session:
            # Row lock serializes concurrent decisions on the same invoice
            project = await self._require_project(session, project_id, for_update=True)

            if not project.invoice_url:
                raise ValidationError("No invoice uploaded for this project")
            if decision is InvoiceStatus.approved and project.invoice_status is InvoiceStatus.approved:
                raise ConflictError("Invoice is already approved")

            if project.invoice_type is InvoiceType.monthly and project.monthly_invoice_id:
                monthly_invoice_id = project.monthly_invoice_id
                count = await project_queries.apply_invoice_decision_to_group(
                    session, monthly_invoice_id, change, utcnow()
                )
                projects = await project_queries.list_projects_in_monthly_invoice(
                    session, monthly_invoice_id
                )
                result = InvoiceDecisionResult(
                    decision=decision,
                    projects=projects,
                    count=count,
                    monthly_invoice_id=monthly_invoice_id,
                )
            else:
                project = await project_queries.apply_update(session, project, change)
                result = InvoiceDecisionResult(decision=decision, projects=[project], count=1)

        self.logger.info(
            "invoice_decided",
            project_id=str(project_id),
            decision=decision.value,
            monthly_invoice_id=result.monthly_invoice_id,
            count=result.count,
        )
        return result

    async def assign_collaborator(
        self,
        project_id: uuid.UUID,
        collaborator_id: uuid.UUID | str | None,
        payment_amount: Any,
    ) -> Project:
        """Assign a collaborator to a paid project with their payout amount.

        Raises:
            ValidationError: If the collaborator id is missing or the amount
                is not a positive number.
            ConflictError: If the client has not paid yet.
            NotFoundError: If the project or collaborator does not exist.
        """
        if not collaborator_id:
            raise ValidationError("Collaborator ID is required")
        amount = parse_amount(payment_amount)
        if amount is None or amount <= 0:
            raise ValidationError("Payment amount is required and must be greater than 0")
        collaborator_uuid = _as_uuid(collaborator_id, "collaborator id")

        async with self._transaction() as session:
            project = await self._require_project(session, project_id, for_update=True)
            if project.payment_status is not PaymentStatus.paid:
                raise ConflictError(
                    "Client must complete payment before you can assign a collaborator."
                )

            collaborator = await collaborator_queries.get_collaborator(session, collaborator_uuid)
            if collaborator is None:
                raise NotFoundError("Collaborator not found")

            project = await project_queries.apply_update(
                session, project, AssignCollaborator(collaborator_uuid, amount)
            )

        self.logger.info(
            "collaborator_assigned",
            project_id=str(project_id),
            collaborator_id=str(collaborator_uuid),
            payment_amount=str(amount),
        )
        return project

    async def unassign_collaborator(self, project_id: uuid.UUID) -> Project:
        """Remove the collaborator and payout amount from a project."""
        async with self._transaction() as session:
            project = await self._require_project(session, project_id)
            project = await project_queries.apply_update(session, project, UnassignCollaborator())

        self.logger.info("collaborator_unassigned", project_id=str(project_id))
        return project

    async def claim_revision(
        self,
        project_id: uuid.UUID,
        description: str | None = None,
    ) -> RevisionClaimResult:
        """Consume one revision of a paid project.

        Raises:
            ConflictError: If the project is unpaid or every revision is used.
        """
        async with self._transaction() as session:
            project = await self._require_project(session, project_id, for_update=True)
            if project.payment_status is not PaymentStatus.paid:
                raise ConflictError("Project must be paid before claiming revisions")

            revisions_used = project.revisions_used or 0
            max_revisions = project.max_revisions
            if max_revisions - revisions_used <= 0:
                raise ConflictError(f"All {max_revisions} revisions have been used")

            project = await project_queries.apply_update(
                session, project, ClaimRevision(description=description)
            )

        remaining = max_revisions - (revisions_used + 1)
        self.logger.info(
            "revision_claimed",
            project_id=str(project_id),
            revisions_used=revisions_used + 1,
            remaining=remaining,
        )
        return RevisionClaimResult(project=project, remaining=remaining)

    # Notifications

    async def send_dashboard_link(self, project_id: uuid.UUID) -> NotificationResult:
        """Email the project's client a link to their dashboard."""
        project = await self.get_project(project_id)
        if not project.client_email:
            raise ValidationError("Project has no client email")
        return await self._notify(project)

    async def _notify(self, project: Project) -> NotificationResult:
        if self.notifier is None:
            self.logger.warning("notifier_not_configured", project_id=str(project.id))
            return NotificationResult(success=False, error="Notifications are not configured")
        return await self.notifier.notify_client_dashboard_ready(
            client_email=project.client_email or "",
            client_name=project.client_name,
            project_id=str(project.id),
            project_name=project.name,
        )
