"""Project endpoints for the client portal.

This module exposes the project lifecycle over HTTP:
- Listing (all, catalog, per client, the caller's own)
- Creation and "duplicate for me"
- Service selection, status changes, invoice decisions
- Collaborator assignment, revision claims and dashboard emails

Handlers stay thin: they translate request bodies into service calls and
wrap results in the response envelope. Errors raised by the service are
rendered by the application's exception handlers.

Example:
    >>> from fastapi import FastAPI
    >>> from clientportal.web.routes.projects import create_projects_router
    >>>
    >>> app = FastAPI()
    >>> app.include_router(create_projects_router())
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi import status as http_status
from fastapi.responses import JSONResponse

from clientportal.lifecycle.service import (
    AuthIdentity,
    InvoiceDecisionResult,
    NewProject,
    ProjectLifecycleService,
)
from clientportal.logging import bind_project_context, get_logger
from clientportal.web.dependencies import get_identity, get_lifecycle_service
from clientportal.web.responses import ok
from clientportal.web.schemas import (
    CollaboratorAssignment,
    DuplicateResponse,
    InvoiceDecisionResponse,
    NotificationResponse,
    ProjectCreate,
    ProjectDetailsResponse,
    ProjectResponse,
    RevisionRequest,
    ServiceSelection,
    StatusChange,
)

logger = get_logger(__name__)


def _decision_response(result: InvoiceDecisionResult) -> JSONResponse:
    if result.is_monthly:
        data: object = InvoiceDecisionResponse(
            projects=[ProjectResponse.model_validate(p) for p in result.projects],
            count=result.count,
        )
    else:
        data = ProjectResponse.model_validate(result.projects[0])
    return ok(data, result.message)


def create_projects_router() -> APIRouter:
    """Create projects router.

    Returns:
        Configured APIRouter with the project endpoints.
    """
    router = APIRouter(prefix="/projects", tags=["projects"])

    @router.get("/")
    async def list_projects(
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        projects = await service.list_projects()
        logger.info("projects_listed", count=len(projects))
        return ok(
            [ProjectResponse.model_validate(p) for p in projects],
            "Projects retrieved successfully",
        )

    @router.post("/")
    async def create_project(
        body: ProjectCreate,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        project = await service.create(
            NewProject(
                name=body.name,
                client_name=body.client_name,
                client_email=body.client_email,
                project_type=body.project_type,
                service=body.service,
                service_price=body.service_price,
                amount=body.amount,
                deadline=body.deadline,
                notify_client=body.notify_client,
            )
        )
        logger.info("project_created_via_api", project_id=str(project.id))
        return ok(
            ProjectResponse.model_validate(project),
            "Project created successfully",
            http_status.HTTP_201_CREATED,
        )

    @router.get("/simple")
    async def list_simple_projects(
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        projects = await service.list_simple_projects()
        return ok(
            [ProjectResponse.model_validate(p) for p in projects],
            "Simple projects retrieved successfully",
        )

    @router.get("/mine")
    async def list_my_projects(
        identity: AuthIdentity = Depends(get_identity),  # noqa: B008
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        projects = await service.list_my_projects(identity)
        return ok(
            [ProjectResponse.model_validate(p) for p in projects],
            "Projects retrieved successfully",
        )

    @router.get("/client/{email}")
    async def list_client_projects(
        email: str,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        projects = await service.list_client_projects(email)
        return ok(
            [ProjectResponse.model_validate(p) for p in projects],
            "Client projects retrieved successfully",
        )

    @router.get("/{project_id}")
    async def get_project(
        project_id: UUID,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        project = await service.get_project(project_id)
        return ok(ProjectResponse.model_validate(project), "Project retrieved successfully")

    @router.get("/{project_id}/details")
    async def get_project_details(
        project_id: UUID,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        details = await service.get_project_details(project_id)
        return ok(
            ProjectDetailsResponse.model_validate(details),
            "Project details retrieved successfully",
        )

    @router.put("/{project_id}/service")
    async def update_service_selection(
        project_id: UUID,
        body: ServiceSelection,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        project = await service.update_service_selection(
            project_id, service_id=body.service_id, custom_amount=body.custom_amount
        )
        return ok(ProjectResponse.model_validate(project), "Service selection updated")

    @router.post("/{project_id}/duplicate")
    async def duplicate_project(
        project_id: UUID,
        identity: AuthIdentity = Depends(get_identity),  # noqa: B008
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        """Give the caller their own copy of a catalog project."""
        bind_project_context(str(project_id))
        duplicate = await service.duplicate_for_user(identity, project_id)
        return ok(
            DuplicateResponse(new_project_id=duplicate.id),
            "Project duplicated successfully",
            http_status.HTTP_201_CREATED,
        )

    @router.put("/{project_id}/status")
    async def update_status(
        project_id: UUID,
        body: StatusChange,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        project = await service.update_status(project_id, body.status, body.notes)
        return ok(ProjectResponse.model_validate(project), "Project status updated successfully")

    @router.post("/{project_id}/invoice/approve")
    async def approve_invoice(
        project_id: UUID,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        return _decision_response(await service.approve_invoice(project_id))

    @router.post("/{project_id}/invoice/reject")
    async def reject_invoice(
        project_id: UUID,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        return _decision_response(await service.reject_invoice(project_id))

    @router.post("/{project_id}/collaborator")
    async def assign_collaborator(
        project_id: UUID,
        body: CollaboratorAssignment,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        project = await service.assign_collaborator(
            project_id, body.collaborator_id, body.payment_amount
        )
        return ok(ProjectResponse.model_validate(project), "Collaborator assigned successfully")

    @router.delete("/{project_id}/collaborator")
    async def unassign_collaborator(
        project_id: UUID,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        project = await service.unassign_collaborator(project_id)
        return ok(ProjectResponse.model_validate(project), "Collaborator unassigned successfully")

    @router.post("/{project_id}/revisions")
    async def claim_revision(
        project_id: UUID,
        body: RevisionRequest | None = None,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        bind_project_context(str(project_id))
        result = await service.claim_revision(project_id, body.description if body else None)
        return ok(ProjectResponse.model_validate(result.project), result.message)

    @router.post("/{project_id}/notify")
    async def send_dashboard_link(
        project_id: UUID,
        service: ProjectLifecycleService = Depends(get_lifecycle_service),  # noqa: B008
    ) -> JSONResponse:
        """Email the client their dashboard link.

        Delivery failures are reported in the payload, not as an error status.
        """
        bind_project_context(str(project_id))
        result = await service.send_dashboard_link(project_id)
        message = "Dashboard email sent" if result.success else "Dashboard email could not be sent"
        return ok(
            NotificationResponse(
                success=result.success, message_id=result.message_id, error=result.error
            ),
            message,
        )

    return router
