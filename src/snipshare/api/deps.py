"""
snipshare.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for storage and the per-request
  GraphQL context.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from fastapi import Depends, Request

from snipshare.auth.context import RequestContext, build_context, extract_token
from snipshare.db.storage import Storage


def storage_from_app(request: Request) -> Storage:
    # Created on app startup in `snipshare.api.app.create_app`.
    return request.app.state.storage  # type: ignore[attr-defined]


async def request_context(
    request: Request,
    storage: Storage = Depends(storage_from_app),
) -> RequestContext:
    return await build_context(
        token=extract_token(request.headers),
        verifier=request.app.state.verifier,
        storage=storage,
        accounts=request.app.state.accounts,
    )


# --- Module Notes -----------------------------------------------------------
# The context is built exactly once per HTTP request; every resolver of the
# operation shares it.
