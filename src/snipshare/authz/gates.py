"""
snipshare.authz.gates

Composable resolver gates.

Responsibilities:
- `authentication_gate`: require (or forbid) an identified caller.
- `role_gate`: require a minimum role on the snip being resolved.

Both take the next resolver in the chain and return a resolver with the same
`(parent, info, **args)` contract. A rejecting gate raises before `next` runs.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from graphql import GraphQLResolveInfo

from snipshare.authz.membership import holds_role
from snipshare.authz.roles import Role
from snipshare.errors import AuthorizationError, AuthorizationFailure, ConfigurationError
from snipshare.observability.logging import get_logger

if TYPE_CHECKING:
    from snipshare.db.models import EntityType
    from snipshare.db.storage import Storage

log = get_logger(__name__)

Resolver = Callable[..., Any]
MembershipCheck = Callable[["Storage", Any, "str | None", Role], Awaitable[bool]]


def _coordinate(info: GraphQLResolveInfo) -> str:
    return f"{info.parent_type.name}.{info.field_name}"


def authentication_gate(required: bool = True) -> Callable[[Resolver], Resolver]:
    def wrap(next_: Resolver) -> Resolver:
        def resolve(parent: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
            if info.context.identity.is_authenticated != required:
                kind = (
                    AuthorizationFailure.NOT_AUTHENTICATED
                    if required
                    else AuthorizationFailure.ALREADY_AUTHENTICATED
                )
                log.debug(
                    "gate_denied", gate="authenticated", field=_coordinate(info), reason=kind.name
                )
                raise AuthorizationError(kind)
            # Sync or async, `next_`'s result is returned untouched.
            return next_(parent, info, **args)

        return resolve

    return wrap


def role_gate(
    minimum: Role,
    *,
    resource_model: type,
    resource_type: EntityType,
    resource_arg: str | None = None,
    check: MembershipCheck = holds_role,
) -> Callable[[Resolver], Resolver]:
    """
    Object fields: the parent must be a `resource_model` instance.
    Root fields: `resource_arg` names the argument holding the resource id; the
    loaded resource becomes the parent passed to `next`.
    """

    def wrap(next_: Resolver) -> Resolver:
        async def resolve(parent: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
            ctx = info.context
            if resource_arg is not None:
                resource = await ctx.storage.find_by_id(resource_type, args.get(resource_arg))
                if resource is None:
                    # Indistinguishable from a missing role: existence is not revealed.
                    _deny(info, minimum)
            else:
                resource = parent
                if not isinstance(resource, resource_model):
                    raise ConfigurationError(
                        f"{_coordinate(info)}: roles exist only on "
                        f"{resource_model.__name__} parents"
                    )

            if not await check(ctx.storage, resource, ctx.subject, minimum):
                _deny(info, minimum)

            result = next_(resource, info, **args)
            if inspect.isawaitable(result):
                result = await result
            return result

        return resolve

    return wrap


def _deny(info: GraphQLResolveInfo, minimum: Role) -> None:
    log.debug("gate_denied", gate="role", field=_coordinate(info), minimum=minimum.value)
    raise AuthorizationError(AuthorizationFailure.INSUFFICIENT_ROLE)


# --- Module Notes -----------------------------------------------------------
# Gates are composed by `schema.compiler`; authentication always wraps the role
# gate so anonymous callers never trigger a resource lookup.
