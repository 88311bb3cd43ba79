"""HTTP tests for the project endpoints."""

from __future__ import annotations

import uuid

from httpx import AsyncClient

from clientportal.database.models.project import InvoiceStatus

IDENTITY = {"X-User-Email": "ada@example.com", "X-User-Id": "user-1"}


def assert_envelope(body: dict, success: bool, status_code: int) -> None:
    assert set(body) == {"success", "message", "data", "statusCode"}
    assert body["success"] is success
    assert body["statusCode"] == status_code


class TestCreateProject:
    async def test_create_returns_201(self, client: AsyncClient) -> None:
        response = await client.post(
            "/projects/",
            json={
                "name": "Logo Design",
                "clientName": "Ada",
                "clientEmail": "ada@example.com",
                "service": "Logo Package",
                "servicePrice": "$250.00",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert_envelope(body, True, 201)
        assert body["message"] == "Project created successfully"
        assert body["data"]["service_price"] == 250
        assert body["data"]["payment_status"] == "pending"
        assert body["data"]["status"] == "pending"

    async def test_missing_name_is_400_and_not_persisted(self, client: AsyncClient) -> None:
        response = await client.post("/projects/", json={"service": "Logo Package"})

        assert response.status_code == 400
        body = response.json()
        assert_envelope(body, False, 400)
        assert body["message"] == "Project name is required"
        assert body["data"] is None

        listing = await client.get("/projects/")
        assert listing.json()["data"] == []

    async def test_invalid_deadline(self, client: AsyncClient) -> None:
        response = await client.post("/projects/", json={"name": "Logo", "deadline": "someday"})
        assert response.status_code == 400
        assert "Invalid deadline" in response.json()["message"]


class TestReadProjects:
    async def test_get_project(self, client: AsyncClient, seed) -> None:
        project = await seed.project(name="Logo Design")

        response = await client.get(f"/projects/{project.id}")

        assert response.status_code == 200
        body = response.json()
        assert_envelope(body, True, 200)
        assert body["data"]["id"] == str(project.id)
        assert body["data"]["revisions_remaining"] == 3

    async def test_unknown_project_is_404(self, client: AsyncClient) -> None:
        response = await client.get(f"/projects/{uuid.uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert_envelope(body, False, 404)
        assert body["message"] == "Project not found"

    async def test_details(self, client: AsyncClient, seed) -> None:
        project = await seed.project()

        response = await client.get(f"/projects/{project.id}/details")

        data = response.json()["data"]
        assert data["project"]["id"] == str(project.id)
        assert data["briefing"] is None
        assert data["images"] == []

    async def test_mine_requires_identity(self, client: AsyncClient) -> None:
        response = await client.get("/projects/mine")

        assert response.status_code == 401
        assert_envelope(response.json(), False, 401)
        assert response.json()["message"] == "User not authenticated"

    async def test_mine_lists_callers_projects(self, client: AsyncClient, seed) -> None:
        await seed.project(name="mine", client_email="ada@example.com")
        await seed.project(name="theirs", client_email="bob@example.com")

        response = await client.get("/projects/mine", headers=IDENTITY)

        assert [p["name"] for p in response.json()["data"]] == ["mine"]

    async def test_client_listing(self, client: AsyncClient, seed) -> None:
        await seed.project(name="mine", client_email="ada@example.com")

        response = await client.get("/projects/client/ada@example.com")

        assert [p["name"] for p in response.json()["data"]] == ["mine"]


class TestDuplicate:
    async def test_requires_identity(self, client: AsyncClient, seed) -> None:
        project = await seed.project(client_email="owner@example.com")

        response = await client.post(f"/projects/{project.id}/duplicate")

        assert response.status_code == 401

    async def test_returns_new_project_id(self, client: AsyncClient, seed) -> None:
        project = await seed.project(client_email="owner@example.com")

        response = await client.post(f"/projects/{project.id}/duplicate", headers=IDENTITY)

        assert response.status_code == 201
        new_id = response.json()["data"]["newProjectId"]
        assert new_id != str(project.id)

        copy = await client.get(f"/projects/{new_id}")
        assert copy.json()["data"]["client_email"] == "ada@example.com"

    async def test_own_project_is_rejected(self, client: AsyncClient, seed) -> None:
        project = await seed.project(client_email="ada@example.com")

        response = await client.post(f"/projects/{project.id}/duplicate", headers=IDENTITY)

        assert response.status_code == 400
        assert response.json()["message"] == "This is already your project"


class TestMutations:
    async def test_status_change(self, client: AsyncClient, seed) -> None:
        project = await seed.project()

        response = await client.put(
            f"/projects/{project.id}/status", json={"status": "completed", "notes": "Done"}
        )

        data = response.json()["data"]
        assert data["status"] == "completed"
        assert data["completed_at"] is not None
        assert data["status_notes"] == {"completed": "Done"}

    async def test_service_selection_requires_a_choice(self, client: AsyncClient, seed) -> None:
        project = await seed.project()

        response = await client.put(f"/projects/{project.id}/service", json={})

        assert response.status_code == 400

    async def test_custom_amount_selection(self, client: AsyncClient, seed) -> None:
        project = await seed.project()

        response = await client.put(
            f"/projects/{project.id}/service", json={"customAmount": "$1,200"}
        )

        assert response.json()["data"]["custom_quote_amount"] == 1200

    async def test_assign_and_unassign(self, client: AsyncClient, seed) -> None:
        collaborator = await seed.collaborator()
        project = await seed.paid_project()

        assigned = await client.post(
            f"/projects/{project.id}/collaborator",
            json={"collaboratorId": str(collaborator.id), "paymentAmount": 150},
        )
        assert assigned.status_code == 200
        assert assigned.json()["data"]["assigned_collaborator"]["first_name"] == "Jane"
        assert assigned.json()["data"]["collaborator_payment_amount"] == 150

        unassigned = await client.delete(f"/projects/{project.id}/collaborator")
        assert unassigned.json()["data"]["assigned_collaborator"] is None

    async def test_assign_unpaid_project(self, client: AsyncClient, seed) -> None:
        collaborator = await seed.collaborator()
        project = await seed.project()

        response = await client.post(
            f"/projects/{project.id}/collaborator",
            json={"collaboratorId": str(collaborator.id), "paymentAmount": 150},
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Client must complete payment before you can assign a collaborator."
        )

    async def test_claim_revision(self, client: AsyncClient, seed) -> None:
        project = await seed.paid_project(revisions_used=2)

        response = await client.post(
            f"/projects/{project.id}/revisions", json={"description": "Bigger logo"}
        )

        body = response.json()
        assert body["message"] == "Revision claimed successfully. 0 revision(s) remaining."
        assert body["data"]["revisions_used"] == 3

        again = await client.post(f"/projects/{project.id}/revisions")
        assert again.status_code == 400
        assert again.json()["message"] == "All 3 revisions have been used"


class TestInvoiceDecisions:
    async def test_approve_single_invoice(self, client: AsyncClient, seed) -> None:
        project = await seed.invoiced_project()

        response = await client.post(f"/projects/{project.id}/invoice/approve")

        body = response.json()
        assert body["message"] == "Invoice approved successfully"
        assert body["data"]["invoice_status"] == "approved"

    async def test_approve_monthly_group(self, client: AsyncClient, seed) -> None:
        first = await seed.invoiced_project(monthly_invoice_id="M-1", month="2025-01")
        await seed.invoiced_project(monthly_invoice_id="M-1", month="2025-01")

        response = await client.post(f"/projects/{first.id}/invoice/approve")

        body = response.json()
        assert body["message"] == "Monthly invoice approved successfully for 2 project(s)"
        assert body["data"]["count"] == 2
        assert {p["invoice_status"] for p in body["data"]["projects"]} == {"approved"}

    async def test_reapproval_conflicts(self, client: AsyncClient, seed) -> None:
        project = await seed.invoiced_project(invoice_status=InvoiceStatus.approved)

        response = await client.post(f"/projects/{project.id}/invoice/approve")

        assert response.status_code == 400
        assert response.json()["message"] == "Invoice is already approved"

    async def test_reject(self, client: AsyncClient, seed) -> None:
        project = await seed.invoiced_project()

        response = await client.post(f"/projects/{project.id}/invoice/reject")

        assert response.json()["message"] == "Invoice rejected"
        assert response.json()["data"]["invoice_status"] == "rejected"


class TestNotify:
    async def test_sends_dashboard_email(self, client: AsyncClient, seed, transport) -> None:
        project = await seed.project(client_email="ada@example.com")

        response = await client.post(f"/projects/{project.id}/notify")

        body = response.json()
        assert body["message"] == "Dashboard email sent"
        assert body["data"]["success"] is True
        assert body["data"]["messageId"] == "<test-1@example.com>"
        assert len(transport.sent) == 1
