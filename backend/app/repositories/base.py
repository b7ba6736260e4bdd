"""
Generic repository over one mapped entity type.

A repository never commits; persist/remove flush so that database errors
surface inside the service call, and the request-scoped session dependency
commits once the whole flow succeeded.
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=Base)


class Repository(Generic[EntityT]):
    """find / find_by / persist / remove for a single model class."""

    model: Type[EntityT]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(self, entity_id: str) -> Optional[EntityT]:
        return await self.db.get(self.model, entity_id)

    async def find_by(self, **criteria: Any) -> List[EntityT]:
        """
        All rows whose columns equal the given values, in primary-key order
        so that "first match" is stable across calls.
        """
        query = select(self.model).filter_by(**criteria).order_by(self.model.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def persist(self, entity: EntityT) -> EntityT:
        self.db.add(entity)
        await self.db.flush()
        logger.debug("Persisted %r", entity)
        return entity

    async def remove(self, entity: EntityT) -> None:
        await self.db.delete(entity)
        await self.db.flush()
        logger.debug("Removed %r", entity)

    def discard_changes(self, entity: EntityT) -> None:
        """
        Forget unsaved in-memory modifications of a loaded entity.

        Used when a merged payload fails validation or the provider refuses
        it, so a later flush in the same session cannot write it.
        """
        if entity in self.db:
            self.db.expire(entity)
