"""Command-line interface: run the server or synchronize the schema."""

from __future__ import annotations

from typing import Optional

import typer
import uvicorn

from roost.config import get_settings
from roost.db import make_engine, sync_schema
from roost.observability.logging import setup_logging

app = typer.Typer(help="Roost web application")


@app.command()
def serve(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
    """Run the application under uvicorn."""

    settings = get_settings()
    uvicorn.run(
        "roost.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        server_header=not settings.mode.is_production,
        log_level=settings.log_level.lower(),
    )


@app.command("sync-db")
def sync_db() -> None:
    """Create missing database tables and exit."""

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    engine = make_engine(settings.database_url)
    try:
        sync_schema(engine)
    finally:
        engine.dispose()
    typer.echo(f"Schema synchronized for {engine.url.render_as_string(hide_password=True)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
