"""Command module exports."""

from . import db, validate

__all__ = ["db", "validate"]
