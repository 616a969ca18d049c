"""Database commands for entity-store CLI."""

import asyncio

import typer
from loguru import logger
from rich.console import Console

from entity_store.cli.app import app
from entity_store.config import StoreConfig
from entity_store.context import store_context
from entity_store.repository import SchemaRepository
from entity_store.services.exceptions import UnsupportedDatabaseError
from entity_store.utils import setup_logging

console = Console()


async def run_init_db(config: StoreConfig) -> int:
    """Create the tables and count the schemas already stored."""
    async with store_context(config) as context:
        return await SchemaRepository(context.session_maker).count()


@app.command("init-db")
def init_db() -> None:
    """Create the database tables if they do not exist."""
    config = StoreConfig()
    setup_logging(config.log_level, config.log_path)

    try:
        schema_count = asyncio.run(run_init_db(config))
    except UnsupportedDatabaseError as e:
        logger.error(f"Refusing to start: {e}")
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Database ready[/green] ({schema_count} schemas)")
