"""
snipshare.authz.membership

Per-resource role membership check.

Responsibilities:
- Decide whether a subject holds at least a given role on a snip.
- Read assignments fresh on every call (no cross-request caching).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from snipshare.authz.roles import Role, highest_role, satisfies
from snipshare.db.models import EntityType, Snip

if TYPE_CHECKING:
    from snipshare.db.storage import Storage


async def role_of(storage: Storage, snip: Snip, subject: str | None) -> Role | None:
    if subject is None:
        return None
    assignments = await storage.find(EntityType.USER_ROLE, snip_id=snip.id, user_id=subject)
    return highest_role(a.role for a in assignments)


async def holds_role(storage: Storage, snip: Snip, subject: str | None, minimum: Role) -> bool:
    # Public snips are readable by everyone, anonymous callers included.
    if snip.public and minimum is Role.READER:
        return True
    held = await role_of(storage, snip, subject)
    return held is not None and satisfies(held, minimum)


# --- Module Notes -----------------------------------------------------------
# `highest_role` keeps the check correct even if duplicate assignments slip past
# the unique constraint (e.g. rows imported by hand).
