"""
snipshare.services.snips

Snip lifecycle service (transaction owner for multi-step snip operations).

Responsibilities:
- Create snips and the owner's OWNER assignment.
- Search snips visible to a caller.
- Grant, change and revoke roles on a snip.
- Patch and delete snips.

Authorization of the calling user is NOT done here: mutations reach this
service only through the schema's `@role` gates.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from snipshare.authz.membership import holds_role
from snipshare.authz.roles import Role
from snipshare.db.models import Snip, UserRole
from snipshare.db.repositories.snips import SnipRepo
from snipshare.db.repositories.user_roles import UserRoleRepo
from snipshare.db.repositories.users import UserRepo
from snipshare.db.storage import Storage
from snipshare.errors import ConflictError, NotFoundError
from snipshare.observability.logging import get_logger

log = get_logger(__name__)

_PATCHABLE_FIELDS = ("name", "content", "public", "tags")


@dataclass(frozen=True, slots=True)
class SnipFilter:
    name: str | None = None
    public: bool | None = None
    tags: tuple[str, ...] | None = None
    # Accepted for schema compatibility; full-text matching on content is not supported.
    content: str | None = None

    @classmethod
    def from_input(cls, query: dict[str, Any]) -> SnipFilter:
        tags = query.get("tags")
        return cls(
            name=query.get("name"),
            public=query.get("public"),
            tags=tuple(tags) if tags is not None else None,
            content=query.get("content"),
        )

    def matches_tags(self, snip: Snip) -> bool:
        # Match-any: a snip qualifies if it carries at least one requested tag.
        if self.tags is None:
            return True
        return any(tag in snip.tags for tag in self.tags)


class SnipService:
    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def create(self, *, owner_id: str, name: str, public: bool) -> Snip:
        async with self._storage.session() as session:
            snips = SnipRepo(session)
            users = UserRepo(session)
            if await users.get(owner_id) is None:
                raise NotFoundError("user not found")

            snip = await snips.create(owner_id=owner_id, name=name, public=public)
            assignment, _ = await UserRoleRepo(session).upsert(
                user_id=owner_id, snip_id=snip.id, role=Role.OWNER
            )
            snip.role_ids = [assignment.id]
            await users.add_snip(owner_id, snip.id)

        log.info("snip_created", snip_id=snip.id, owner_id=owner_id, public=public)
        return snip

    async def search(self, query: SnipFilter, *, subject: str | None) -> list[Snip]:
        async with self._storage.session() as session:
            candidates = await SnipRepo(session).search(name=query.name, public=query.public)

        candidates = [snip for snip in candidates if query.matches_tags(snip)]
        readable = await asyncio.gather(
            *(holds_role(self._storage, snip, subject, Role.READER) for snip in candidates)
        )
        return [snip for snip, ok in zip(candidates, readable) if ok]

    async def set_user_role(
        self, snip: Snip, *, username: str, role: Role | None
    ) -> UserRole | None:
        """
        Grant or change `username`'s role on `snip`; `role=None` revokes it.
        Returns the resulting assignment, or None after a revocation.
        """

        if role is Role.OWNER:
            raise ConflictError("ownership transfer is not supported")

        async with self._storage.session() as session:
            user = await UserRepo(session).get_by_username(username)
            if user is None:
                raise NotFoundError("user not found")
            if user.id == snip.owner_id:
                raise ConflictError("the owner's role cannot be changed")

            roles = UserRoleRepo(session)
            snips = SnipRepo(session)
            if role is None:
                existing = await roles.get_for(user_id=user.id, snip_id=snip.id)
                if existing is not None:
                    await roles.remove(existing)
                    await snips.unlink_role(snip.id, existing.id)
                log.info("role_revoked", snip_id=snip.id, user_id=user.id)
                return None

            assignment, created = await roles.upsert(user_id=user.id, snip_id=snip.id, role=role)
            if created:
                await snips.link_role(snip.id, assignment.id)

        log.info("role_granted", snip_id=snip.id, user_id=user.id, role=role.value)
        return assignment

    async def update(self, snip: Snip, changes: dict[str, Any]) -> Snip:
        # Absent and explicit-null inputs both mean "leave unchanged".
        fields = {
            key: value
            for key, value in changes.items()
            if key in _PATCHABLE_FIELDS and value is not None
        }
        if "tags" in fields:
            fields["tags"] = list(fields["tags"])

        async with self._storage.session() as session:
            updated = await SnipRepo(session).patch(snip.id, fields)
        if updated is None:
            raise NotFoundError("snip not found")
        return updated

    async def delete(self, snip: Snip) -> str:
        async with self._storage.session() as session:
            snips = SnipRepo(session)
            current = await snips.get(snip.id)
            if current is None:
                raise NotFoundError("snip not found")

            owner_links = await UserRepo(session).remove_snip(current.owner_id, current.id)
            purged = await UserRoleRepo(session).purge_snip(current.id)
            await snips.delete(current)

        log.info(
            "snip_deleted",
            snip_id=snip.id,
            owner_links_removed=owner_links,
            assignments_removed=purged,
        )
        return snip.id


# --- Module Notes -----------------------------------------------------------
# Each public method is one `Storage.session()` unit of work, so a failed step
# rolls back the whole operation.
