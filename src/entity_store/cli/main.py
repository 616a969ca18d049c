"""Main CLI entry point for entity-store."""  # pragma: no cover

from entity_store.cli.app import app  # pragma: no cover

# Register commands
from entity_store.cli.commands import db, validate  # pragma: no cover

__all__ = ["app", "db", "validate"]  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
