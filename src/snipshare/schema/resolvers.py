"""
snipshare.schema.resolvers

Base data-fetch functions for root fields.

Responsibilities:
- Implement queries and mutations by delegating to services.
- Stay free of authorization logic: the compiler wraps these with the gates
  declared in the SDL, and role-gated mutations receive the addressed snip as
  their parent.
"""

from __future__ import annotations

from typing import Any

from graphql import GraphQLResolveInfo

from snipshare.authz.roles import Role
from snipshare.db.models import EntityType, Snip, User, UserRole
from snipshare.services.snips import SnipFilter, SnipService


async def resolve_me(_: Any, info: GraphQLResolveInfo) -> User | None:
    return await info.context.storage.find_by_id(EntityType.USER, info.context.subject)


async def resolve_user(_: Any, info: GraphQLResolveInfo, *, username: str) -> User | None:
    return await info.context.accounts.find_by_username(username)


async def resolve_validate(
    _: Any, info: GraphQLResolveInfo, *, username: str, password: str
) -> str:
    return await info.context.accounts.login(username=username, password=password)


async def resolve_snip(_: Any, info: GraphQLResolveInfo, *, id: str) -> Snip | None:
    return await info.context.storage.find_by_id(EntityType.SNIP, id)


async def resolve_snips(_: Any, info: GraphQLResolveInfo, *, query: dict[str, Any]) -> list[Snip]:
    service = SnipService(info.context.storage)
    return await service.search(SnipFilter.from_input(query), subject=info.context.subject)


async def resolve_new_user(
    _: Any, info: GraphQLResolveInfo, *, username: str, password: str
) -> str:
    return await info.context.accounts.register(username=username, password=password)


async def resolve_new_snip(
    _: Any, info: GraphQLResolveInfo, *, name: str, public: bool
) -> Snip:
    service = SnipService(info.context.storage)
    return await service.create(owner_id=info.context.subject, name=name, public=public)


async def resolve_set_user_role(
    snip: Snip,
    info: GraphQLResolveInfo,
    *,
    username: str,
    role: str | None = None,
    **_: Any,
) -> UserRole | None:
    service = SnipService(info.context.storage)
    return await service.set_user_role(
        snip, username=username, role=Role(role) if role is not None else None
    )


async def resolve_update_snip(
    snip: Snip, info: GraphQLResolveInfo, *, query: dict[str, Any], **_: Any
) -> Snip:
    return await SnipService(info.context.storage).update(snip, query)


async def resolve_delete_snip(snip: Snip, info: GraphQLResolveInfo, **_: Any) -> str:
    return await SnipService(info.context.storage).delete(snip)


RESOLVERS: dict[str, dict[str, Any]] = {
    "Query": {
        "me": resolve_me,
        "user": resolve_user,
        "validate": resolve_validate,
        "snip": resolve_snip,
        "snips": resolve_snips,
    },
    "Mutation": {
        "newUser": resolve_new_user,
        "newSnip": resolve_new_snip,
        "setUserRole": resolve_set_user_role,
        "updateSnip": resolve_update_snip,
        "deleteSnip": resolve_delete_snip,
    },
}


# --- Module Notes -----------------------------------------------------------
# Object-type fields (User, Snip, UserRole) need no entries here: they use the
# default attribute resolver or `@referenceOf`.
