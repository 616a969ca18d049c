"""HTTP API for entity-store."""
