"""
snipshare.db.storage

Generic storage collaborator used by resolvers, gates and services.

Responsibilities:
- Expose entity-type addressed operations: find by id, find by filter,
  create, update, delete.
- Open one short-lived session per call so concurrently resolving fields
  never share an `AsyncSession`.
- Translate SQLAlchemy failures into `StorageError` (no retries).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snipshare.db.base import Base
from snipshare.db.models import ENTITY_MODELS, EntityType
from snipshare.errors import StorageError
from snipshare.observability.logging import get_logger

log = get_logger(__name__)


class Storage:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Unit of work: commits when the block exits cleanly, rolls back otherwise.
        """

        try:
            async with self._session_factory() as session:
                yield session
                await session.commit()
        except SQLAlchemyError as e:
            log.error("storage_failure", error=str(e), error_type=type(e).__name__)
            raise StorageError("storage operation failed") from e

    async def find_by_id(self, entity_type: EntityType, id: str | None) -> Any | None:
        if id is None:
            return None
        async with self.session() as session:
            return await session.get(ENTITY_MODELS[entity_type], id)

    async def find(self, entity_type: EntityType, **filters: Any) -> list[Any]:
        model = ENTITY_MODELS[entity_type]
        async with self.session() as session:
            stmt = select(model).filter_by(**filters)
            return list((await session.execute(stmt)).scalars().all())

    async def create(self, entity_type: EntityType, **fields: Any) -> Any:
        entity = ENTITY_MODELS[entity_type](**fields)
        async with self.session() as session:
            session.add(entity)
            await session.flush()
        return entity

    async def update(self, entity: Base, **fields: Any) -> Any:
        async with self.session() as session:
            current = await session.merge(entity)
            for key, value in fields.items():
                setattr(current, key, value)
            await session.flush()
        return current

    async def delete(self, entity_type: EntityType, id: str) -> None:
        async with self.session() as session:
            entity = await session.get(ENTITY_MODELS[entity_type], id)
            if entity is not None:
                await session.delete(entity)


# --- Module Notes -----------------------------------------------------------
# Multi-step domain operations (e.g. deleting a snip and its assignments) use
# `Storage.session()` with the repositories in `db.repositories` so they commit
# as one unit.
