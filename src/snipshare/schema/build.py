"""
snipshare.schema.build

Composition root for the executable GraphQL schema.

Responsibilities:
- Bind GraphQL object types to entity types and ORM models.
- Compile the SDL and root resolvers into the schema served by the API.
"""

from __future__ import annotations

from graphql import GraphQLSchema

from snipshare.db.models import EntityType, Snip, User, UserRole
from snipshare.schema.compiler import EntityBinding, compile_schema
from snipshare.schema.resolvers import RESOLVERS
from snipshare.schema.type_defs import TYPE_DEFS

ENTITY_BINDINGS: tuple[EntityBinding, ...] = (
    EntityBinding(type_name="User", entity_type=EntityType.USER, model=User),
    EntityBinding(type_name="Snip", entity_type=EntityType.SNIP, model=Snip, resource=True),
    EntityBinding(type_name="UserRole", entity_type=EntityType.USER_ROLE, model=UserRole),
)


def build_app_schema() -> GraphQLSchema:
    return compile_schema(TYPE_DEFS, RESOLVERS, bindings=ENTITY_BINDINGS)


# --- Module Notes -----------------------------------------------------------
# Called once from `api.app.create_app`; a ConfigurationError here aborts startup.
