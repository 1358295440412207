"""CLI commands for the assessments service.

Commands:
- serve: Run the Web API with uvicorn
- check-db: Verify the configured database answers
"""

import asyncio

import typer
import uvicorn
from rich.console import Console

from assessments.config import ConfigError, load_app_config
from assessments.core.assessment_service import check_connection
from assessments.db import DatabaseError, get_db_client

app = typer.Typer(
    name="assessments",
    help="Assessment tools, questions, scales and student assignments API.",
    no_args_is_help=True,
)

console = Console()


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config / PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API."""
    try:
        config = load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    console.print(f"[green]listening on port {bind_port}[/green]")
    uvicorn.run(
        "assessments.web.api:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
    )


@app.command("check-db")
def check_db() -> None:
    """Check that the configured database is reachable."""
    try:
        config = load_app_config()
        client = get_db_client()
        asyncio.run(check_connection(client))
    except (ConfigError, DatabaseError) as e:
        console.print(f"[red]✗ Database check failed: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Database reachable[/green] (provider: {config.database.provider})")


if __name__ == "__main__":
    app()
