"""Request and response schemas for the HTTP API.

Response models read straight from ORM objects (``from_attributes``).
Money columns are exposed as JSON numbers.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from clientportal.database.models.project import (
    InvoiceStatus,
    InvoiceType,
    PaymentStatus,
    ProjectType,
)


class ProjectCreate(BaseModel):
    """Request schema for creating a project.

    Attributes:
        name: Project name (required; checked by the service so a missing
            name is reported like any other business validation error)
        client_name: Client display name (defaults to "Client")
        client_email: Client email
        project_type: "simple" or "custom"
        service: Catalog service name for simple projects
        service_price: Service price, number or display string like "$250.00"
        amount: Quoted amount for custom projects
        deadline: ISO date
        notify_client: Email the client their dashboard link after creation
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    client_name: str | None = Field(default=None, alias="clientName")
    client_email: str | None = Field(default=None, alias="clientEmail")
    project_type: str | None = Field(default=None, alias="projectType")
    service: str | None = None
    service_price: float | str | None = Field(default=None, alias="servicePrice")
    amount: float | str | None = None
    deadline: str | None = None
    notify_client: bool = Field(default=False, alias="notifyClient")


class ServiceSelection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service_id: str | None = Field(default=None, alias="serviceId")
    custom_amount: float | str | None = Field(default=None, alias="customAmount")


class StatusChange(BaseModel):
    status: str | None = None
    notes: str | None = None


class CollaboratorAssignment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    collaborator_id: str | None = Field(default=None, alias="collaboratorId")
    payment_amount: float | str | None = Field(default=None, alias="paymentAmount")


class RevisionRequest(BaseModel):
    description: str | None = None


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    price: float | None = None
    description: str | None = None


class CollaboratorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str | None = None


class ProjectResponse(BaseModel):
    """Response schema for project data, with references populated."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    project_type: ProjectType
    client_name: str
    client_email: str | None
    client_user_id: str | None
    service_name: str | None
    service_price: float | None
    selected_service: ServiceResponse | None
    custom_quote_amount: float | None
    delivery_timeline: str | None
    deadline: date | None
    status: str
    status_notes: dict[str, Any]
    payment_status: PaymentStatus
    stripe_payment_id: str | None
    invoice_url: str | None
    invoice_public_id: str | None
    invoice_status: InvoiceStatus
    invoice_type: InvoiceType | None
    monthly_invoice_id: str | None
    monthly_invoice_month: str | None
    invoice_uploaded_at: datetime | None
    invoice_approved_at: datetime | None
    assigned_collaborator: CollaboratorResponse | None
    collaborator_payment_amount: float | None
    collaborator_paid: bool
    collaborator_paid_at: datetime | None
    collaborator_transfer_id: str | None
    revisions_used: int
    max_revisions: int
    revisions_remaining: int
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class BriefingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    overall_description: str | None
    submitted_at: datetime | None


class BriefingImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    image_url: str
    notes: str | None
    order: int | None


class ProjectDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project: ProjectResponse
    briefing: BriefingResponse | None
    images: list[BriefingImageResponse]


class InvoiceDecisionResponse(BaseModel):
    """Projects touched by a monthly invoice decision."""

    projects: list[ProjectResponse]
    count: int


class DuplicateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_project_id: UUID = Field(alias="newProjectId")


class NotificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_id: str | None = Field(default=None, alias="messageId")
    error: str | None = None
