"""
snipshare.schema.type_defs

GraphQL SDL for the snipshare API, including the annotation directives.

Directives:
- `@authenticated(required)`: caller must (or must not) be identified.
- `@role(minimum, resourceArg)`: caller needs at least `minimum` on the snip
  that is the field's parent, or, on root fields, the snip whose id is passed
  in the `resourceArg` argument.
- `@referenceOf(idField, targetType, isList)`: expand the parent's stored id
  (or id list) into entities of `targetType`.
"""

TYPE_DEFS = """
directive @authenticated(required: Boolean = true) on FIELD_DEFINITION
directive @role(minimum: Role!, resourceArg: String) on FIELD_DEFINITION
directive @referenceOf(
  idField: String!
  targetType: EntityType!
  isList: Boolean
) on FIELD_DEFINITION

enum Role {
  OWNER
  EDITOR
  READER
}

enum EntityType {
  USER
  SNIP
  USER_ROLE
}

type Query {
  me: User
  user(username: String!): User
  validate(username: String!, password: String!): String
  snip(id: String!): Snip
  snips(query: SnipQuery!): [Snip]!
}

type Mutation {
  newUser(username: String!, password: String!): String @authenticated(required: false)
  newSnip(name: String!, public: Boolean!): Snip @authenticated
  setUserRole(snipId: String!, username: String!, role: Role): UserRole
    @authenticated
    @role(minimum: OWNER, resourceArg: "snipId")
  updateSnip(snipId: String!, query: SnipQuery!): Snip!
    @authenticated
    @role(minimum: EDITOR, resourceArg: "snipId")
  deleteSnip(snipId: String!): String!
    @authenticated
    @role(minimum: OWNER, resourceArg: "snipId")
}

type User {
  id: String!
  username: String!
  snips: [Snip]! @referenceOf(idField: "snip_ids", targetType: SNIP)
}

type UserRole {
  id: String!
  user: User @referenceOf(idField: "user_id", targetType: USER)
  role: Role!
}

type Snip {
  id: String!
  name: String! @role(minimum: READER)
  content: String! @role(minimum: READER)
  owner: User @referenceOf(idField: "owner_id", targetType: USER) @role(minimum: READER)
  public: Boolean!
  users: [UserRole]! @referenceOf(idField: "role_ids", targetType: USER_ROLE) @role(minimum: READER)
  tags: [String!]!
}

input SnipQuery {
  name: String
  tags: [String!]
  public: Boolean
  content: String
}

schema {
  query: Query
  mutation: Mutation
}
"""


# --- Module Notes -----------------------------------------------------------
# `idField` names the Python attribute on the parent entity (see `db.models`),
# not a GraphQL field.
