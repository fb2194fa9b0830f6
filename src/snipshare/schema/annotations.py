"""
snipshare.schema.annotations

Field annotations read from SDL directives.

Responsibilities:
- Model the three supported annotations as immutable values.
- Parse them, in declared order, from a field definition's directive nodes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from graphql import GraphQLField, GraphQLSchema
from graphql.execution.values import get_argument_values

from snipshare.authz.roles import Role
from snipshare.db.models import EntityType
from snipshare.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class Authenticated:
    # True: caller must be identified. False: caller must be anonymous.
    required: bool = True


@dataclass(frozen=True, slots=True)
class RoleRequirement:
    minimum: Role
    # Root fields only: argument holding the id of the snip being addressed.
    resource_arg: str | None = None


@dataclass(frozen=True, slots=True)
class ReferenceOf:
    id_field: str
    target: EntityType
    # None: inferred from the field's declared shape.
    is_list: bool | None = None


Annotation = Authenticated | RoleRequirement | ReferenceOf


def _authenticated(args: dict[str, Any]) -> Annotation:
    return Authenticated(required=bool(args.get("required", True)))


def _role(args: dict[str, Any]) -> Annotation:
    try:
        minimum = Role(args["minimum"])
    except (KeyError, ValueError) as e:
        raise ConfigurationError(f"@role has an invalid minimum: {args.get('minimum')!r}") from e
    return RoleRequirement(minimum=minimum, resource_arg=args.get("resourceArg"))


def _reference_of(args: dict[str, Any]) -> Annotation:
    try:
        target = EntityType(args["targetType"])
    except (KeyError, ValueError) as e:
        raise ConfigurationError(
            f"@referenceOf has an invalid targetType: {args.get('targetType')!r}"
        ) from e
    return ReferenceOf(id_field=args["idField"], target=target, is_list=args.get("isList"))


_PARSERS: dict[str, Callable[[dict[str, Any]], Annotation]] = {
    "authenticated": _authenticated,
    "role": _role,
    "referenceOf": _reference_of,
}


def read_annotations(schema: GraphQLSchema, field: GraphQLField) -> tuple[Annotation, ...]:
    node = field.ast_node
    if node is None or not node.directives:
        return ()

    annotations: list[Annotation] = []
    for directive_node in node.directives:
        name = directive_node.name.value
        parse = _PARSERS.get(name)
        if parse is None:
            # Not ours (@deprecated etc).
            continue
        directive = schema.get_directive(name)
        if directive is None:
            raise ConfigurationError(f"directive @{name} is used but not declared")
        annotations.append(parse(get_argument_values(directive, directive_node)))
    return tuple(annotations)


# --- Module Notes -----------------------------------------------------------
# Declared order is preserved here; the compiler applies a fixed composition
# order on top of it (see `schema.compiler`).
