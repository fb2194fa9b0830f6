"""
snipshare.schema.shapes

Closed classifier over a field's declared GraphQL output type.

Responsibilities:
- Reduce any output type to one of a handful of `FieldShape`s so the compiler
  can decide, once, whether identifier expansion is applicable.
"""

from __future__ import annotations

import enum

from graphql import (
    GraphQLOutputType,
    get_nullable_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
)


class FieldShape(enum.Enum):
    OBJECT = "Type"
    NON_NULL_OBJECT = "Type!"
    LIST_OF_OBJECTS = "[Type]"
    LIST_OF_NON_NULL_OBJECTS = "[Type!]"
    # Scalars, enums, interfaces, unions, nested lists, lists of scalars.
    OTHER = "other"

    @property
    def is_list(self) -> bool:
        return self in (FieldShape.LIST_OF_OBJECTS, FieldShape.LIST_OF_NON_NULL_OBJECTS)

    @property
    def supports_reference(self) -> bool:
        return self is not FieldShape.OTHER


def classify_shape(type_: GraphQLOutputType) -> FieldShape:
    """
    Outer list nullability is ignored: `[Type]` and `[Type]!` classify alike.
    """

    nullable = get_nullable_type(type_)
    if is_object_type(nullable):
        return FieldShape.NON_NULL_OBJECT if is_non_null_type(type_) else FieldShape.OBJECT

    if is_list_type(nullable):
        item = nullable.of_type
        if is_object_type(get_nullable_type(item)):
            if is_non_null_type(item):
                return FieldShape.LIST_OF_NON_NULL_OBJECTS
            return FieldShape.LIST_OF_OBJECTS

    return FieldShape.OTHER


# --- Module Notes -----------------------------------------------------------
# For `[Type!]` shapes a dangling id still resolves to null at its position;
# GraphQL null propagation then applies as usual for the non-null item type.
