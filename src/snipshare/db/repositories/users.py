"""
snipshare.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Create users and look them up by id or username.
- Maintain the user's list of owned snip ids.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from snipshare.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, username: str, password_hash: str) -> User:
        user = User(username=username, password_hash=password_hash, snip_ids=[])
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: str) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def add_snip(self, user_id: str, snip_id: str) -> None:
        user = await self._session.get(User, user_id, with_for_update=True)
        if user is None:
            return
        # Reassign rather than mutate: plain JSON columns do not track in-place changes.
        user.snip_ids = [*user.snip_ids, snip_id]

    async def remove_snip(self, user_id: str, snip_id: str) -> int:
        user = await self._session.get(User, user_id, with_for_update=True)
        if user is None:
            return 0
        remaining = [sid for sid in user.snip_ids if sid != snip_id]
        removed = len(user.snip_ids) - len(remaining)
        user.snip_ids = remaining
        return removed


# --- Module Notes -----------------------------------------------------------
# Username uniqueness is checked by `services.accounts` and backed by the
# unique index on `users.username`.
