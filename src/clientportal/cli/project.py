"""Project management CLI commands.

Admin shortcuts for creating, listing and moving projects through their
lifecycle without going through the HTTP API.
"""

from __future__ import annotations

import json
from typing import Annotated, Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from clientportal.errors import PortalError
from clientportal.lifecycle.service import NewProject

app = typer.Typer(help="Project management commands")
console = Console()

STATUS_COLORS = {
    "pending": "dim",
    "in-progress": "green",
    "revision": "yellow",
    "completed": "blue",
}


def _money(value: object) -> str:
    return f"{value:.2f}" if value is not None else "-"


@app.command()
def create(
    name: Annotated[str, typer.Argument(help="Project name")],
    client_email: Annotated[
        Optional[str],
        typer.Option("--client-email", "-e", help="Client email address"),
    ] = None,
    client_name: Annotated[
        Optional[str],
        typer.Option("--client-name", "-n", help="Client display name"),
    ] = None,
    service: Annotated[
        Optional[str],
        typer.Option("--service", "-s", help="Catalog service name (simple projects)"),
    ] = None,
    price: Annotated[
        Optional[str],
        typer.Option("--price", help="Service price, e.g. '$250.00'"),
    ] = None,
    amount: Annotated[
        Optional[str],
        typer.Option("--amount", "-a", help="Quoted amount (custom projects)"),
    ] = None,
    custom: Annotated[
        bool,
        typer.Option("--custom", help="Create a custom-quote project"),
    ] = False,
    notify: Annotated[
        bool,
        typer.Option("--notify", help="Email the client their dashboard link"),
    ] = False,
) -> None:
    """Create a new project."""
    from clientportal.main import run_with_services

    draft = NewProject(
        name=name,
        client_name=client_name,
        client_email=client_email,
        project_type="custom" if custom else "simple",
        service=service,
        service_price=price,
        amount=amount,
        notify_client=notify,
    )

    try:
        project = run_with_services(lambda s: s.lifecycle.create(draft))
    except PortalError as e:
        console.print(f"[red]Error creating project:[/red] {e.message}")
        raise typer.Exit(code=1)

    price_line = (
        f"[bold]Quote:[/bold] {_money(project.custom_quote_amount)}"
        if project.project_type.value == "custom"
        else f"[bold]Service:[/bold] {project.service_name or '-'} ({_money(project.service_price)})"
    )
    panel = Panel(
        f"[green]Project created successfully![/green]\n\n"
        f"[bold]ID:[/bold] {project.id}\n"
        f"[bold]Name:[/bold] {project.name}\n"
        f"[bold]Client:[/bold] {project.client_name} <{project.client_email or '-'}>\n"
        f"{price_line}\n"
        f"[bold]Created:[/bold] {project.created_at.strftime('%Y-%m-%d %H:%M:%S')}",
        title="Project Created",
        border_style="green",
    )
    console.print(panel)


@app.command("list")
def list_projects(
    client: Annotated[
        Optional[str],
        typer.Option("--client", "-c", help="Only projects of this client email"),
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (table or json)"),
    ] = "table",
) -> None:
    """List projects, newest first."""
    from clientportal.main import run_with_services

    try:
        if client:
            projects = run_with_services(lambda s: s.lifecycle.list_client_projects(client))
        else:
            projects = run_with_services(lambda s: s.lifecycle.list_projects())
    except PortalError as e:
        console.print(f"[red]Error listing projects:[/red] {e.message}")
        raise typer.Exit(code=1)

    if format == "json":
        output = [
            {
                "id": str(p.id),
                "name": p.name,
                "client_email": p.client_email,
                "status": p.status,
                "payment_status": p.payment_status.value,
                "invoice_status": p.invoice_status.value,
                "created_at": p.created_at.isoformat(),
            }
            for p in projects
        ]
        console.print(json.dumps(output, indent=2))
        return

    if not projects:
        console.print("[yellow]No projects found[/yellow]")
        return

    table = Table(title="Projects")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Client")
    table.add_column("Status", style="magenta")
    table.add_column("Payment")
    table.add_column("Invoice")
    table.add_column("Created", style="dim")

    for p in projects:
        color = STATUS_COLORS.get(p.status, "white")
        table.add_row(
            str(p.id),
            p.name,
            p.client_email or "-",
            f"[{color}]{p.status}[/{color}]",
            p.payment_status.value,
            p.invoice_status.value,
            p.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command()
def status(
    project_id: Annotated[UUID, typer.Argument(help="Project ID")],
    new_status: Annotated[str, typer.Argument(help="New lifecycle status")],
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Note stored under the new status"),
    ] = None,
) -> None:
    """Change a project's lifecycle status."""
    from clientportal.main import run_with_services

    try:
        project = run_with_services(
            lambda s: s.lifecycle.update_status(project_id, new_status, notes)
        )
    except PortalError as e:
        console.print(f"[red]Error updating status:[/red] {e.message}")
        raise typer.Exit(code=1)

    console.print(f"[green]Project {project.id} is now[/green] [bold]{project.status}[/bold]")


@app.command()
def notify(
    project_id: Annotated[UUID, typer.Argument(help="Project ID")],
) -> None:
    """Email the client a link to their project dashboard."""
    from clientportal.main import run_with_services

    try:
        result = run_with_services(lambda s: s.lifecycle.send_dashboard_link(project_id))
    except PortalError as e:
        console.print(f"[red]Error sending dashboard link:[/red] {e.message}")
        raise typer.Exit(code=1)

    if result.success:
        console.print(f"[green]Dashboard email sent[/green] [dim]({result.message_id})[/dim]")
    else:
        console.print(f"[yellow]Dashboard email not sent:[/yellow] {result.error}")
        raise typer.Exit(code=1)
