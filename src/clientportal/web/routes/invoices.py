"""Invoice overview endpoints for the admin dashboard."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from clientportal.invoices.aggregation import InvoiceAggregationService
from clientportal.logging import get_logger
from clientportal.web.dependencies import get_invoice_service
from clientportal.web.responses import ok

logger = get_logger(__name__)


def create_invoices_router() -> APIRouter:
    """Create invoices router.

    Routes:
        GET /invoices/monthly - Monthly invoices with their projects and totals
        GET /invoices/accepted - Approved invoices and per-collaborator balances
    """
    router = APIRouter(prefix="/invoices", tags=["invoices"])

    @router.get("/monthly")
    async def monthly_invoices(
        service: InvoiceAggregationService = Depends(get_invoice_service),  # noqa: B008
    ) -> JSONResponse:
        summaries = await service.monthly_invoice_summary()
        logger.info("monthly_invoices_listed", count=len(summaries))
        return ok(summaries, "Monthly invoices retrieved successfully")

    @router.get("/accepted")
    async def accepted_invoices(
        service: InvoiceAggregationService = Depends(get_invoice_service),  # noqa: B008
    ) -> JSONResponse:
        overview = await service.accepted_invoices_overview()
        logger.info("accepted_invoices_listed", count=len(overview.accepted_invoices))
        return ok(overview, "Accepted invoices retrieved successfully")

    return router
