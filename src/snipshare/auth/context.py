"""
snipshare.auth.context

Per-request identity context.

Responsibilities:
- Extract the raw token from request headers.
- Verify it once per request and build the `RequestContext` every resolver sees.
- Degrade to an anonymous identity on a missing or invalid token (never raise).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from snipshare.auth.jwt import VerificationFailure
from snipshare.auth.models import ANONYMOUS, Identity
from snipshare.observability.logging import get_logger

if TYPE_CHECKING:
    from snipshare.db.storage import Storage
    from snipshare.services.accounts import AccountService

log = get_logger(__name__)


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> str: ...


@dataclass(frozen=True, slots=True)
class RequestContext:
    token: str | None
    identity: Identity
    storage: Storage
    accounts: AccountService

    @property
    def subject(self) -> str | None:
        return self.identity.subject


def extract_token(headers: Mapping[str, str]) -> str | None:
    authorization = headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    # Legacy clients send the bare token in an `Authentication` header.
    raw = headers.get("authentication")
    return raw.strip() if raw and raw.strip() else None


async def build_context(
    *,
    token: str | None,
    verifier: TokenVerifier,
    storage: Storage,
    accounts: AccountService,
) -> RequestContext:
    identity = ANONYMOUS
    if token:
        try:
            identity = Identity(subject=await verifier.verify(token))
        except VerificationFailure as e:
            log.debug("token_rejected", reason=str(e))

    return RequestContext(token=token, identity=identity, storage=storage, accounts=accounts)


# --- Module Notes -----------------------------------------------------------
# The raw token is kept on the context for pass-through/audit only; no resolver
# re-verifies it.
