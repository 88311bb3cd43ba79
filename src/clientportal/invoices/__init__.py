"""Invoice aggregation views for the admin dashboard."""

from clientportal.invoices.aggregation import (
    AcceptedInvoicesOverview,
    CollaboratorBalance,
    InvoiceAggregationService,
    InvoiceRow,
    MonthlyInvoiceSummary,
    build_accepted_overview,
    month_label,
    summarize_monthly_invoices,
)

__all__ = [
    "AcceptedInvoicesOverview",
    "CollaboratorBalance",
    "InvoiceAggregationService",
    "InvoiceRow",
    "MonthlyInvoiceSummary",
    "build_accepted_overview",
    "month_label",
    "summarize_monthly_invoices",
]
