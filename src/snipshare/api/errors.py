"""
snipshare.api.errors

GraphQL error presentation.

Responsibilities:
- Attach a stable `extensions.code` to every error returned to callers.
- Hide server faults (storage, misconfiguration, bugs) behind a generic message
  and log them; authorization failures are expected and logged quietly.
"""

from __future__ import annotations

from typing import Any

from graphql import GraphQLError

from snipshare.errors import (
    AuthorizationError,
    ConfigurationError,
    SnipshareError,
    StorageError,
)
from snipshare.observability.logging import get_logger

log = get_logger(__name__)

GENERIC_MESSAGE = "internal server error"


def format_error(error: GraphQLError) -> dict[str, Any]:
    formatted = error.formatted
    extensions = dict(formatted.get("extensions") or {})
    original = error.original_error

    if original is None:
        # Syntax and validation errors raised by graphql-core itself.
        extensions.setdefault("code", "GRAPHQL_VALIDATION_FAILED")
    elif isinstance(original, AuthorizationError):
        log.info("request_denied", reason=original.kind.name, path=formatted.get("path"))
        extensions["code"] = original.code
    elif isinstance(original, (StorageError, ConfigurationError)):
        log.error(
            "resolver_fault", code=original.code, path=formatted.get("path"), exc_info=original
        )
        formatted["message"] = GENERIC_MESSAGE
        extensions["code"] = original.code
    elif isinstance(original, SnipshareError):
        extensions["code"] = original.code
    else:
        log.error("unhandled_resolver_error", path=formatted.get("path"), exc_info=original)
        formatted["message"] = GENERIC_MESSAGE
        extensions["code"] = "INTERNAL"

    formatted["extensions"] = extensions
    return formatted


# --- Module Notes -----------------------------------------------------------
# Messages of domain errors are safe to show: role gates use one message for
# "no such snip" and "no role", so neither leaks existence.
