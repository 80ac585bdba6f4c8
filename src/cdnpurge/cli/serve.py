"""CLI command for running the purge API server.

Usage:
    cdnpurge serve
    cdnpurge serve --port 8080 --host 0.0.0.0
"""

from __future__ import annotations

import typer

from cdnpurge.config import settings

app = typer.Typer(help="Run the purge API server")


@app.callback(invoke_without_command=True)
def serve(
    host: str = typer.Option(settings.host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
    log_level: str = typer.Option(
        "info", "--log-level", "-l", help="Log level: debug, info, warning, error"
    ),
) -> None:
    """Start uvicorn with the FastAPI application."""
    import uvicorn

    typer.echo("Starting purge server...")
    typer.echo(f"  Host: {host}")
    typer.echo(f"  Port: {port}")
    typer.echo(f"  Site configs: {settings.site_config_dir}")

    uvicorn.run(
        app="cdnpurge.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
    )
