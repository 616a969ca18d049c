"""Command line interface for entity-store."""
