"""Validate command for entity-store CLI."""

import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from entity_store.cli.app import app
from entity_store.schemas import Schema, ValidationResult
from entity_store.services import EntityValidationService

console = Console()


def load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read {path}: {e}[/red]")
        raise typer.Exit(2)


def display_result(result: ValidationResult) -> None:
    """Render a validation result."""
    if result.valid:
        console.print("[green]Entity is valid[/green]")
        return

    if result.message:
        console.print(f"[red]{result.message}[/red]")

    if result.messages:
        table = Table(title="Validation errors")
        table.add_column("Attribute", style="bold")
        table.add_column("Message", style="red")
        for name, message in sorted(result.messages.items()):
            table.add_row(name, message)
        console.print(table)


@app.command()
def validate(
    schema_file: Path = typer.Argument(..., help="JSON file holding the schema, including its id"),
    entity_file: Path = typer.Argument(..., help="JSON file holding the entity"),
) -> None:
    """Validate an entity against a schema without a database."""
    try:
        schema = Schema.model_validate(load_json(schema_file))
    except ValidationError as e:
        console.print(f"[red]Invalid schema: {e}[/red]")
        raise typer.Exit(2)

    entity = load_json(entity_file)
    if not isinstance(entity, dict):
        console.print("[red]The entity must be a JSON object[/red]")
        raise typer.Exit(2)

    result = EntityValidationService().validate(schema, entity)
    display_result(result)

    if not result.valid:
        raise typer.Exit(1)
