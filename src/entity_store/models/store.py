"""Schema, entity and relationship models."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Integer,
    String,
    Text,
    ForeignKey,
    UniqueConstraint,
    text,
    DateTime,
    Index,
    JSON,
)
from sqlalchemy.orm import Mapped, mapped_column

from entity_store.models.base import Base


def generate_id() -> str:
    return str(uuid.uuid4())


class Schema(Base):
    """
    A runtime-defined entity shape.

    Attributes are kept as one JSON list of attribute descriptors and are
    replaced wholesale on update.
    """

    __tablename__ = "schema"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_id)
    display: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    attributes: Mapped[list] = mapped_column(JSON, default=list, server_default="[]")

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=text("CURRENT_TIMESTAMP"))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), onupdate=text("CURRENT_TIMESTAMP")
    )

    def __repr__(self) -> str:
        return f"Schema(id='{self.id}', display='{self.display}')"


class Entity(Base):
    """
    A record conforming to one schema.

    Only scalar attribute values live on the row. Relationship attributes are
    stored as Relationship rows and attached when the entity is read.
    """

    __tablename__ = "entity"
    __table_args__ = (
        Index("ix_entity_schema_id", "schema_id"),
        Index("ix_entity_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_id)
    schema_id: Mapped[str] = mapped_column(String, ForeignKey("schema.id", ondelete="CASCADE"))
    fields: Mapped[dict] = mapped_column(JSON, default=dict, server_default="{}")

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=text("CURRENT_TIMESTAMP"))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=text("CURRENT_TIMESTAMP"), onupdate=text("CURRENT_TIMESTAMP")
    )

    def __repr__(self) -> str:
        return f"Entity(id='{self.id}', schema_id='{self.schema_id}')"


class Relationship(Base):
    """
    A directed, named edge from a tail entity to a head entity.

    The name is the relationship attribute on the tail's schema.
    """

    __tablename__ = "relationship"
    __table_args__ = (
        UniqueConstraint("tail_id", "name", "head_id", name="uix_relationship"),
        Index("ix_relationship_tail_name", "tail_id", "name"),
        Index("ix_relationship_head_id", "head_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String)
    tail_id: Mapped[str] = mapped_column(String, ForeignKey("entity.id", ondelete="CASCADE"))
    head_id: Mapped[str] = mapped_column(String, ForeignKey("entity.id", ondelete="CASCADE"))

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=text("CURRENT_TIMESTAMP"))

    def __repr__(self) -> str:
        return f"Relationship(id={self.id}, tail_id='{self.tail_id}', name='{self.name}', head_id='{self.head_id}')"
