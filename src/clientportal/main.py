"""Main CLI entry point for the client portal.

This module provides the Typer application that serves the API and offers
admin sub-commands for projects and invoices.

Usage:
    clientportal serve --port 8000
    clientportal project create "Landing page" --service "Starter" --price '$250.00'
    clientportal invoices accepted
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional, TypeVar

import typer
from rich.console import Console

from clientportal.cli import invoices as invoices_cli
from clientportal.cli import project as project_cli
from clientportal.config import LoggingConfig, PortalConfig, load_config
from clientportal.database.connection import get_engine, get_session_factory
from clientportal.invoices.aggregation import InvoiceAggregationService
from clientportal.lifecycle.service import ProjectLifecycleService
from clientportal.logging import setup_logging
from clientportal.notifications.gateway import NotificationGateway

app = typer.Typer(
    name="clientportal",
    help="Client Project Portal: projects, invoices and collaborators",
    no_args_is_help=True,
)

app.add_typer(project_cli.app, name="project", help="Manage projects")
app.add_typer(invoices_cli.app, name="invoices", help="Review collaborator invoices")

console = Console()

T = TypeVar("T")


class AppContext:
    """Application context shared across CLI commands.

    Holds configuration only. Database resources are opened per command by
    ``open_services`` and released when the command finishes.

    Attributes:
        config: Loaded portal configuration
    """

    def __init__(self, config: PortalConfig):
        self.config = config


@dataclass
class Services:
    """Services available to a CLI command."""

    lifecycle: ProjectLifecycleService
    invoices: InvoiceAggregationService


@asynccontextmanager
async def open_services(config: PortalConfig) -> AsyncIterator[Services]:
    """Create the engine and services for one command; dispose the engine on exit."""
    engine = get_engine(config.database)
    try:
        session_factory = get_session_factory(engine)
        yield Services(
            lifecycle=ProjectLifecycleService(
                session_factory,
                NotificationGateway.from_config(config.mail, config.frontend),
            ),
            invoices=InvoiceAggregationService(session_factory),
        )
    finally:
        await engine.dispose()


def run_with_services(operation: Callable[[Services], Awaitable[T]]) -> T:
    """Run one async service operation with freshly opened services.

    Args:
        operation: Receives the services and returns the awaitable to run.

    Returns:
        The operation's result.
    """
    config = get_app_context().config

    async def runner() -> T:
        async with open_services(config) as services:
            return await operation(services)

    return asyncio.run(runner())


_app_context: AppContext | None = None


def get_app_context() -> AppContext:
    """Get the shared application context.

    Raises:
        RuntimeError: If context has not been initialized
    """
    if _app_context is None:
        raise RuntimeError("Application context not initialized. Call initialize_context first.")
    return _app_context


def initialize_context(config: PortalConfig) -> AppContext:
    global _app_context
    _app_context = AppContext(config)
    return _app_context


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to bind to (defaults to web.host)"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to (defaults to web.port)"),
    ] = None,
) -> None:
    """Start the portal API server with uvicorn."""
    import uvicorn

    from clientportal.web.app import create_app

    ctx = get_app_context()
    bind_host = host or ctx.config.web.host
    bind_port = port or ctx.config.web.port

    console.print("[bold cyan]Starting Client Project Portal[/bold cyan]")
    console.print(f"[dim]Host:[/dim] {bind_host}")
    console.print(f"[dim]Port:[/dim] {bind_port}")
    console.print()

    uvicorn.run(
        create_app(ctx.config),
        host=bind_host,
        port=bind_port,
        log_level="info",
    )


@app.callback()
def main_callback(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Load configuration, set up logging and initialize the application context."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(code=1)

    logging_config: LoggingConfig = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG", "format": "console"})
    setup_logging(logging_config)

    initialize_context(config)

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


if __name__ == "__main__":
    app()
