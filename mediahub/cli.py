"""Command line interface for MediaHub."""

import asyncio
import sys

import click

from mediahub.config import get_settings
from mediahub.infrastructure.database.init_db import (
    check_database_health,
    get_database_info,
    init_database,
)
from mediahub.infrastructure.database.session import close_db_connections
from mediahub.utils.logging import setup_logging


def _run(coro):
    """Run a coroutine and release pooled connections afterwards."""

    async def runner():
        try:
            return await coro
        finally:
            await close_db_connections()

    return asyncio.run(runner())


@click.group()
def cli():
    """MediaHub CLI."""
    setup_logging()


@cli.command()
def init_db():
    """Create database tables."""
    click.echo("Initializing database...")
    _run(init_database())
    click.echo("Database initialized successfully!")


@cli.command()
def db_info():
    """Check database connectivity and print table statistics."""
    click.echo("Checking database health...")

    if not _run(check_database_health()):
        click.echo("✗ Database connection failed")
        sys.exit(1)

    click.echo("✓ Database connection is healthy")

    info = _run(get_database_info())
    if not info["healthy"]:
        click.echo(f"✗ Could not read statistics: {info['error']}")
        sys.exit(1)

    click.echo(f"\nDatabase: {info['engine_info']}")
    click.echo("Table statistics:")
    for table, count in info["tables"].items():
        click.echo(f"  - {table}: {count} records")


@cli.command()
@click.option("--host", default=None, help="Bind address, defaults to HOST")
@click.option("--port", default=None, type=int, help="Bind port, defaults to PORT")
def serve(host, port):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "mediahub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
