"""
snipshare.schema.references

Generic identifier -> entity expansion.

Responsibilities:
- Build one resolver per (id field, target loader, cardinality) combination.
- Resolve lists concurrently while preserving input order.
- Tolerate dangling identifiers (null instead of an error).
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from graphql import GraphQLResolveInfo

from snipshare.db.models import EntityType

# (request context, id) -> entity or None
Loader = Callable[[Any, Any], Awaitable[Any | None]]


def entity_loader(entity_type: EntityType) -> Loader:
    async def load(context: Any, id: Any) -> Any | None:
        return await context.storage.find_by_id(entity_type, id)

    return load


def _read(parent: Any, id_field: str) -> Any:
    if isinstance(parent, Mapping):
        return parent.get(id_field)
    return getattr(parent, id_field, None)


def reference_resolver(id_field: str, loader: Loader, *, is_list: bool):
    if is_list:

        async def resolve_many(parent: Any, info: GraphQLResolveInfo, **_: Any) -> list[Any]:
            ids = _read(parent, id_field) or []
            return list(await asyncio.gather(*(loader(info.context, id) for id in ids)))

        return resolve_many

    async def resolve_one(parent: Any, info: GraphQLResolveInfo, **_: Any) -> Any | None:
        id = _read(parent, id_field)
        if id is None:
            return None
        return await loader(info.context, id)

    return resolve_one


# --- Module Notes -----------------------------------------------------------
# A loader failure (StorageError) fails the whole field; only missing targets
# degrade to null.
