"""
snipshare.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text

from snipshare.api.deps import storage_from_app
from snipshare.db.storage import Storage

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(storage: Storage = Depends(storage_from_app)) -> dict[str, str]:
    # A StorageError here surfaces as a 500, which is what readiness gating wants.
    async with storage.session() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ready"}
