"""
snipshare.db.repositories.user_roles

Repository for `UserRole` assignments.

Responsibilities:
- Upsert/revoke the single assignment of a user on a snip.
- List and purge assignments of a snip.
"""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from snipshare.authz.roles import Role
from snipshare.db.models import UserRole


class UserRoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for(self, *, user_id: str, snip_id: str) -> UserRole | None:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.snip_id == snip_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def upsert(self, *, user_id: str, snip_id: str, role: Role) -> tuple[UserRole, bool]:
        """
        Returns the assignment and whether it was newly created.
        """

        existing = await self.get_for(user_id=user_id, snip_id=snip_id)
        if existing is not None:
            existing.role = role
            await self._session.flush()
            return existing, False

        assignment = UserRole(user_id=user_id, snip_id=snip_id, role=role)
        self._session.add(assignment)
        await self._session.flush()
        return assignment, True

    async def remove(self, assignment: UserRole) -> None:
        await self._session.delete(assignment)
        await self._session.flush()

    async def purge_snip(self, snip_id: str) -> int:
        result = await self._session.execute(delete(UserRole).where(UserRole.snip_id == snip_id))
        return result.rowcount or 0


# --- Module Notes -----------------------------------------------------------
# The (user_id, snip_id) unique constraint backs the one-assignment-per-pair rule.
