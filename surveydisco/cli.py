"""SurveyDisco CLI.

Commands:
- init: Create tables, add missing columns and seed default settings
- parse: Parse an inquiry (text file, .eml message or stdin) into a project
- projects: List stored projects
- serve: Run the FastAPI web API
"""

from __future__ import annotations

import asyncio
import sys
from email import policy
from email.parser import BytesParser
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from surveydisco.config import get_config
from surveydisco.core.logging import configure_logging
from surveydisco.db.connection import close_db, get_session, init_db
from surveydisco.exceptions import SurveyDiscoError
from surveydisco.projects import repository
from surveydisco.web.dependencies import build_services

app = typer.Typer(
    name="surveydisco",
    help="SurveyDisco.ai - survey inquiry parsing and project folders",
    no_args_is_help=True,
)

console = Console()


def read_inquiry(source: str) -> str:
    """Inquiry text from ``-`` (stdin), an ``.eml`` message or a plain text file."""
    if source == "-":
        return sys.stdin.read()

    path = Path(source)
    if path.suffix.lower() != ".eml":
        return path.read_text(encoding="utf-8")

    with path.open("rb") as fh:
        message = BytesParser(policy=policy.default).parse(fh)
    body = message.get_body(preferencelist=("plain",))
    parts = [
        f"From: {message['from']}" if message["from"] else "",
        f"Subject: {message['subject']}" if message["subject"] else "",
        body.get_content() if body is not None else "",
    ]
    return "\n".join(part for part in parts if part)


@app.command()
def init():
    """Initialize database schema."""
    config = get_config()
    configure_logging(config.log_level)
    console.print(f"[bold]Initializing database:[/bold] {config.db.url}")

    async def _init():
        try:
            await init_db()
        finally:
            await close_db()

    asyncio.run(_init())
    console.print("[bold green]✓[/bold green] Database initialized")


@app.command()
def parse(
    source: str = typer.Argument(..., help="Text or .eml file, or '-' for stdin"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Extract only, do not store"),
):
    """Parse an inquiry and create a project card."""
    config = get_config()
    configure_logging(config.log_level)
    text = read_inquiry(source)

    async def _parse():
        services = build_services(config)
        try:
            async with get_session() as session:
                if dry_run:
                    return await services.projects.parse_text(session, text)
                return await services.projects.create_from_text(session, text)
        finally:
            await services.aclose()
            await close_db()

    try:
        record = asyncio.run(_parse())
    except SurveyDiscoError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title=f"Job {record.job_number}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in record.model_dump(by_alias=True, exclude={"notes"}).items():
        table.add_row(key, "" if value is None else str(value))
    console.print(table)


@app.command()
def projects(limit: int = typer.Option(50, help="Maximum rows to show")):
    """List projects, newest first."""
    get_config()

    async def _list():
        try:
            async with get_session() as session:
                return await repository.list_projects(session)
        finally:
            await close_db()

    rows = asyncio.run(_list())
    if not rows:
        console.print("[yellow]No projects found[/yellow]")
        return

    table = Table(title=f"Projects ({len(rows)})")
    table.add_column("Job", style="cyan")
    table.add_column("Client")
    table.add_column("Service")
    table.add_column("Address")
    table.add_column("Travel")
    table.add_column("Status")
    for project in rows[:limit]:
        table.add_row(
            project.job_number,
            project.client or "",
            project.service_type or "",
            project.geo_address or project.address or "",
            project.travel_time or "",
            project.status,
        )
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(8080, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the FastAPI web API."""
    import uvicorn

    typer.echo(f"Starting SurveyDisco on http://{host}:{port}")
    uvicorn.run("surveydisco.web.app:app", host=host, port=port, reload=reload, workers=1)


if __name__ == "__main__":
    app()
