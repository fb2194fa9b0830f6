"""
snipshare.errors

Closed error taxonomy shared by the schema engine, guards, services and storage.

Responsibilities:
- Give every failure surfaced through GraphQL a stable `code`.
- Separate caller-facing failures (authorization, not found, conflicts) from
  server faults (storage) and startup faults (configuration).
"""

from __future__ import annotations

import enum


class SnipshareError(Exception):
    code: str = "INTERNAL"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthorizationFailure(enum.StrEnum):
    NOT_AUTHENTICATED = "not authenticated"
    ALREADY_AUTHENTICATED = "already authenticated"
    INSUFFICIENT_ROLE = "insufficient role"


class AuthorizationError(SnipshareError):
    """
    Raised by a gate that rejects the caller.
    Never retried and never logged as a server fault.
    """

    def __init__(self, kind: AuthorizationFailure) -> None:
        super().__init__(kind.value)
        self.kind = kind

    @property
    def code(self) -> str:  # type: ignore[override]
        return self.kind.name


class ConfigurationError(SnipshareError):
    """
    A field's annotations are incompatible with its declared shape.
    Raised while compiling the schema, so the server never starts serving.
    """

    code = "CONFIGURATION"


class StorageError(SnipshareError):
    code = "STORAGE"


class NotFoundError(SnipshareError):
    code = "NOT_FOUND"


class CredentialsError(SnipshareError):
    code = "INVALID_CREDENTIALS"


class ConflictError(SnipshareError):
    code = "CONFLICT"


# --- Module Notes -----------------------------------------------------------
# `snipshare.api.errors.format_error` maps these onto GraphQL error extensions.
# Token verification failures are intentionally absent: they degrade to an
# anonymous identity (see `snipshare.auth.context`).
