"""
snipshare.authz.roles

Role hierarchy model.

Responsibilities:
- Define the ordered `Role` enumeration (highest privilege first).
- Provide `satisfies`, the single ordering primitive the role gate depends on.

Policy:
- Hierarchical: OWNER satisfies EDITOR and READER, EDITOR satisfies READER.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable


class Role(enum.StrEnum):
    # Declaration order is the privilege order; values are the GraphQL enum names.
    OWNER = "OWNER"
    EDITOR = "EDITOR"
    READER = "READER"

    @property
    def rank(self) -> int:
        # Lower rank = more privilege.
        return _RANKS[self]


_RANKS: dict[Role, int] = {role: index for index, role in enumerate(Role)}


def satisfies(held: Role, minimum: Role) -> bool:
    return held.rank <= minimum.rank


def highest_role(roles: Iterable[Role]) -> Role | None:
    best: Role | None = None
    for role in roles:
        if best is None or role.rank < best.rank:
            best = role
    return best


# --- Module Notes -----------------------------------------------------------
# Pure and total over Role x Role; membership lookups live in `authz.membership`.
