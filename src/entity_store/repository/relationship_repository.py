"""Repository for managing Relationship edges."""

from typing import List, Sequence

from loguru import logger
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from entity_store import db
from entity_store.models import Entity, Relationship
from entity_store.repository.repository import Repository
from entity_store.services.resolution import RelationshipDiff, diff_targets


class RelationshipRepository(Repository[Relationship]):
    """Repository for Relationship model.

    Methods taking a ``session`` run inside the caller's transaction so edge
    changes commit or roll back together with the entity write they belong to.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        super().__init__(session_maker, Relationship)

    async def find_target_ids(self, session: AsyncSession, tail_id: str, name: str) -> List[str]:
        """Head ids of the edges named ``name`` leaving ``tail_id``, in creation order."""
        query = (
            select(Relationship.head_id)
            .where(Relationship.tail_id == tail_id, Relationship.name == name)
            .order_by(Relationship.id)
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def find_target_entities(
        self, session: AsyncSession, tail_id: str, name: str
    ) -> Sequence[Entity]:
        """Head entities of the edges named ``name`` leaving ``tail_id``, in creation order."""
        query = (
            select(Entity)
            .join(Relationship, Relationship.head_id == Entity.id)
            .where(Relationship.tail_id == tail_id, Relationship.name == name)
            .order_by(Relationship.id)
        )
        result = await session.execute(query)
        return result.scalars().all()

    async def replace_targets(
        self, session: AsyncSession, tail_id: str, name: str, head_ids: Sequence[str]
    ) -> RelationshipDiff:
        """Make the edge set of ``(tail_id, name)`` equal to ``head_ids``.

        Edges only in the old set are deleted, edges only in the new set are
        created and shared edges are left untouched.
        """
        existing = await self.find_target_ids(session, tail_id, name)
        diff = diff_targets(existing, head_ids)

        if diff.deleted:
            await session.execute(
                delete(Relationship).where(
                    Relationship.tail_id == tail_id,
                    Relationship.name == name,
                    Relationship.head_id.in_(diff.deleted),
                )
            )
        for head_id in diff.created:
            session.add(Relationship(name=name, tail_id=tail_id, head_id=head_id))
        await session.flush()

        logger.debug(
            f"Replaced targets of {tail_id}.{name}: "
            f"created={diff.created} deleted={diff.deleted} unchanged={diff.unchanged}"
        )
        return diff

    async def delete_for_entity(self, session: AsyncSession, entity_id: str) -> int:
        """Delete every edge where the entity is the tail or the head."""
        result = await session.execute(
            delete(Relationship).where(
                or_(Relationship.tail_id == entity_id, Relationship.head_id == entity_id)
            )
        )
        return result.rowcount  # pyright: ignore [reportAttributeAccessIssue]

    async def find_targets(self, tail_id: str, name: str) -> List[str]:
        """Head ids of the edges named ``name`` leaving ``tail_id``."""
        async with db.scoped_session(self.session_maker) as session:
            return await self.find_target_ids(session, tail_id, name)

    async def set_targets(self, tail_id: str, name: str, head_ids: Sequence[str]) -> RelationshipDiff:
        """Replace the edge set of ``(tail_id, name)`` in its own transaction.

        The change is committed only when every delete and insert succeeded,
        otherwise it is rolled back and the error is raised.
        """
        async with db.scoped_session(self.session_maker) as session:
            return await self.replace_targets(session, tail_id, name, head_ids)
