"""
snipshare.auth.models

Auth domain models.

Responsibilities:
- Define the caller identity type (`Identity`) carried by every request context.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Caller identity; `subject` is the user id, or None for anonymous callers.
    """

    subject: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.subject is not None


ANONYMOUS = Identity()


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; roles are per snip and never travel in the token.
