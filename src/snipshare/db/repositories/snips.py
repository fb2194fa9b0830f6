"""
snipshare.db.repositories.snips

Repository for `Snip` entities.

Responsibilities:
- Create, patch and delete snips.
- Maintain the snip's list of role assignment ids.
- Filter snips by exact name and visibility.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from snipshare.db.models import Snip


class SnipRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, owner_id: str, name: str, public: bool) -> Snip:
        snip = Snip(owner_id=owner_id, name=name, public=public, content="", tags=[], role_ids=[])
        self._session.add(snip)
        await self._session.flush()
        return snip

    async def get(self, snip_id: str) -> Snip | None:
        return await self._session.get(Snip, snip_id)

    async def search(self, *, name: str | None = None, public: bool | None = None) -> list[Snip]:
        stmt = select(Snip).order_by(Snip.created_at)
        if name is not None:
            stmt = stmt.where(Snip.name == name)
        if public is not None:
            stmt = stmt.where(Snip.public == public)
        return list((await self._session.execute(stmt)).scalars().all())

    async def patch(self, snip_id: str, fields: dict[str, Any]) -> Snip | None:
        snip = await self._session.get(Snip, snip_id, with_for_update=True)
        if snip is None:
            return None
        for key, value in fields.items():
            setattr(snip, key, value)
        await self._session.flush()
        return snip

    async def link_role(self, snip_id: str, role_id: str) -> None:
        snip = await self._session.get(Snip, snip_id, with_for_update=True)
        if snip is not None and role_id not in snip.role_ids:
            snip.role_ids = [*snip.role_ids, role_id]

    async def unlink_role(self, snip_id: str, role_id: str) -> None:
        snip = await self._session.get(Snip, snip_id, with_for_update=True)
        if snip is not None:
            snip.role_ids = [rid for rid in snip.role_ids if rid != role_id]

    async def delete(self, snip: Snip) -> None:
        await self._session.delete(snip)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Tag and content matching are not expressed in SQL; see `services.snips.SnipService.search`.
