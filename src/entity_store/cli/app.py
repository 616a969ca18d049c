from typing import Optional

import typer


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import entity_store

        typer.echo(f"entity-store version: {entity_store.__version__}")
        raise typer.Exit()


app = typer.Typer(name="entity-store")


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """entity-store - schema-driven entity storage."""
