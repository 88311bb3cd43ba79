"""Integration tests for InvoiceAggregationService."""

from __future__ import annotations

from datetime import datetime, timezone

from clientportal.database.models.project import InvoiceStatus
from clientportal.invoices.aggregation import InvoiceAggregationService


async def test_accepted_overview_totals(invoices: InvoiceAggregationService, seed) -> None:
    jane = await seed.collaborator("Jane", "Doe")
    await seed.collaborator("Idle", "Person")
    await seed.invoiced_project(
        jane,
        amount="100",
        invoice_status=InvoiceStatus.approved,
        collaborator_paid=True,
        collaborator_paid_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
    )
    await seed.invoiced_project(jane, amount="50", invoice_status=InvoiceStatus.approved)
    await seed.invoiced_project(jane, amount="999")

    overview = await invoices.accepted_invoices_overview()

    assert len(overview.accepted_invoices) == 2
    assert {row.type for row in overview.accepted_invoices} == {"per-project"}
    assert len(overview.by_collaborator) == 1
    balance = overview.by_collaborator[0]
    assert balance.collaborator_name == "Jane Doe"
    assert balance.total_paid == 100
    assert balance.total_left_to_pay == 50


async def test_accepted_overview_collapses_monthly_group(
    invoices: InvoiceAggregationService, seed
) -> None:
    jane = await seed.collaborator()
    for amount in ("40", "60"):
        await seed.invoiced_project(
            jane,
            amount=amount,
            monthly_invoice_id="M-1",
            month="2025-01",
            invoice_status=InvoiceStatus.approved,
            collaborator_paid=True,
        )

    overview = await invoices.accepted_invoices_overview()

    assert len(overview.accepted_invoices) == 1
    row = overview.accepted_invoices[0]
    assert row.type == "monthly"
    assert row.label == "January 2025 - Monthly Invoice"
    assert row.amount == 100
    assert row.paid is True
    assert overview.by_collaborator[0].total_paid == 100


async def test_monthly_summary(invoices: InvoiceAggregationService, seed) -> None:
    jane = await seed.collaborator()
    await seed.invoiced_project(jane, amount="40", monthly_invoice_id="M-1", month="2025-01")
    await seed.invoiced_project(jane, amount="60", monthly_invoice_id="M-1", month="2025-01")
    await seed.invoiced_project(jane, amount="10", monthly_invoice_id="M-2", month="2025-02")
    await seed.invoiced_project(jane, amount="500")

    summaries = await invoices.monthly_invoice_summary()

    assert [s.monthly_invoice_id for s in summaries] == ["M-2", "M-1"]
    january = summaries[1]
    assert january.total_amount == 100
    assert len(january.projects) == 2
    assert january.invoice_status == "pending"
    assert january.collaborator is not None
    assert january.collaborator.first_name == "Jane"


async def test_empty_views(invoices: InvoiceAggregationService) -> None:
    assert await invoices.monthly_invoice_summary() == []
    overview = await invoices.accepted_invoices_overview()
    assert overview.accepted_invoices == []
    assert overview.by_collaborator == []
