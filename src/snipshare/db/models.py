"""
snipshare.db.models

Persistence schema for users, snips and role assignments.

Responsibilities:
- Define ORM models in a document-like shape: relations are stored as
  identifier columns and identifier lists (JSON), and expanded by the GraphQL
  reference directive rather than by ORM relationships.
  - User: account with the ids of the snips it owns
  - Snip: shared document (the role-protected resource)
  - UserRole: role assignment of one user on one snip
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from snipshare.authz.roles import Role
from snipshare.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


class EntityType(enum.StrEnum):
    # Mirrors the `EntityType` enum of the GraphQL schema (`@referenceOf(targetType:)`).
    USER = "USER"
    SNIP = "SNIP"
    USER_ROLE = "USER_ROLE"


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    snip_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Snip(Base):
    __tablename__ = "snips"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Set at creation; ownership transfer is not supported.
    owner_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    role_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class UserRole(Base):
    __tablename__ = "user_roles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    snip_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    role: Mapped[Role] = mapped_column(Enum(Role), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    __table_args__ = (UniqueConstraint("user_id", "snip_id", name="uq_user_roles_user_snip"),)


ENTITY_MODELS: dict[EntityType, type[Base]] = {
    EntityType.USER: User,
    EntityType.SNIP: Snip,
    EntityType.USER_ROLE: UserRole,
}


# --- Module Notes -----------------------------------------------------------
# UserRole ids carry no FK constraint: ids may dangle after deletes and the
# reference directive resolves them to null.
