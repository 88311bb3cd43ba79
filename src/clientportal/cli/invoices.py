"""Invoice review CLI commands."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from clientportal.errors import PortalError

app = typer.Typer(help="Collaborator invoice commands")
console = Console()


@app.command()
def monthly() -> None:
    """Show uploaded monthly invoices with their project totals."""
    from clientportal.main import run_with_services

    try:
        summaries = run_with_services(lambda s: s.invoices.monthly_invoice_summary())
    except PortalError as e:
        console.print(f"[red]Error loading monthly invoices:[/red] {e.message}")
        raise typer.Exit(code=1)

    if not summaries:
        console.print("[yellow]No monthly invoices found[/yellow]")
        return

    table = Table(title="Monthly Invoices")
    table.add_column("Invoice", style="cyan", no_wrap=True)
    table.add_column("Month", style="bold")
    table.add_column("Collaborator")
    table.add_column("Projects", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Status", style="magenta")

    for s in summaries:
        collaborator = (
            f"{s.collaborator.first_name} {s.collaborator.last_name}".strip()
            if s.collaborator
            else "-"
        )
        table.add_row(
            s.monthly_invoice_id,
            s.month or "-",
            collaborator,
            str(len(s.projects)),
            f"{s.total_amount:.2f}",
            s.invoice_status or "-",
        )

    console.print(table)


@app.command()
def accepted() -> None:
    """Show approved invoices and what each collaborator is still owed."""
    from clientportal.main import run_with_services

    try:
        overview = run_with_services(lambda s: s.invoices.accepted_invoices_overview())
    except PortalError as e:
        console.print(f"[red]Error loading accepted invoices:[/red] {e.message}")
        raise typer.Exit(code=1)

    rows = Table(title="Accepted Invoices")
    rows.add_column("Invoice", style="bold")
    rows.add_column("Type", style="dim")
    rows.add_column("Collaborator")
    rows.add_column("Amount", justify="right")
    rows.add_column("Paid")

    for row in overview.accepted_invoices:
        rows.add_row(
            row.label,
            row.type,
            row.collaborator_name,
            f"{row.amount:.2f}",
            "[green]yes[/green]" if row.paid else "[yellow]no[/yellow]",
        )

    balances = Table(title="By Collaborator")
    balances.add_column("Collaborator", style="bold")
    balances.add_column("Paid", justify="right")
    balances.add_column("Left to pay", justify="right")

    for balance in overview.by_collaborator:
        balances.add_row(
            balance.collaborator_name,
            f"{balance.total_paid:.2f}",
            f"{balance.total_left_to_pay:.2f}",
        )

    console.print(rows)
    console.print(balances)


def _decide(project_id: UUID, approve: bool) -> None:
    from clientportal.main import run_with_services

    try:
        result = run_with_services(
            lambda s: (s.lifecycle.approve_invoice if approve else s.lifecycle.reject_invoice)(
                project_id
            )
        )
    except PortalError as e:
        console.print(f"[red]Error deciding invoice:[/red] {e.message}")
        raise typer.Exit(code=1)

    console.print(f"[green]{result.message}[/green]")


@app.command()
def approve(
    project_id: Annotated[UUID, typer.Argument(help="Project ID")],
) -> None:
    """Approve a project's invoice (the whole group for monthly invoices)."""
    _decide(project_id, approve=True)


@app.command()
def reject(
    project_id: Annotated[UUID, typer.Argument(help="Project ID")],
) -> None:
    """Reject a project's invoice (the whole group for monthly invoices)."""
    _decide(project_id, approve=False)
