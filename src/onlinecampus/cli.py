"""CLI entry point for OnlineCampus.

Commands:
- init-db: Create the database tables
- serve: Run the REST API under uvicorn
"""

from __future__ import annotations

import sys
from dataclasses import replace

import click
from sqlalchemy.exc import SQLAlchemyError

from onlinecampus.config import ConfigError, Settings
from onlinecampus.logging import setup_logging


def _load_settings(db_path: str | None) -> Settings:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    if db_path is not None:
        settings = replace(settings, db_path=db_path)
    return settings


@click.group()
@click.version_option(package_name="onlinecampus")
def main() -> None:
    """OnlineCampus - student records with optimistic-concurrency edits."""
    pass


@main.command("init-db")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="SQLite database path (default: ONLINECAMPUS_DB_PATH or onlinecampus.db)",
)
def init_db(db_path: str | None) -> None:
    """Create the database tables if they don't exist."""
    from onlinecampus.state_store import CampusStore  # noqa: PLC0415

    settings = _load_settings(db_path)
    try:
        store = CampusStore(settings.db_path)
    except SQLAlchemyError as e:
        click.echo(f"Database error: {e}", err=True)
        sys.exit(1)
    tables = store.database.table_names()
    store.close()
    click.echo(f"Database ready: {settings.db_path} (tables: {', '.join(tables)})")


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", type=int, default=8000, show_default=True, help="Bind port")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="SQLite database path (default: ONLINECAMPUS_DB_PATH or onlinecampus.db)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def serve(host: str, port: int, db_path: str | None, verbose: bool) -> None:
    """Run the REST API."""
    # Importing the app module reads the environment, so validate it first
    settings = _load_settings(db_path)

    import uvicorn  # noqa: PLC0415

    from onlinecampus.api.app import create_app  # noqa: PLC0415

    setup_logging(level="DEBUG" if verbose else None)
    click.echo(f"Serving OnlineCampus on http://{host}:{port} (db={settings.db_path})")
    uvicorn.run(create_app(settings=settings), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
