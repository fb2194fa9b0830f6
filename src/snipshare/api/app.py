"""
snipshare.api.app

FastAPI app factory for the snipshare service.

Responsibilities:
- Compile the GraphQL schema (fails fast on annotation/shape mismatches).
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, storage, accounts).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from snipshare import __version__
from snipshare.api.routers.graphql import router as graphql_router
from snipshare.api.routers.health import router as health_router
from snipshare.auth.jwt import JwtConfig, JwtVerifier
from snipshare.db.init_db import init_db
from snipshare.db.session import create_engine, create_sessionmaker
from snipshare.db.storage import Storage
from snipshare.observability.logging import configure_logging, get_logger
from snipshare.observability.middleware import RequestContextMiddleware
from snipshare.schema.build import build_app_schema
from snipshare.services.accounts import AccountService
from snipshare.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json=settings.env != "dev",
    )

    # Compiled before any traffic can arrive; a ConfigurationError aborts startup.
    schema = build_app_schema()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        storage = Storage(create_sessionmaker(engine))
        app.state.engine = engine
        app.state.storage = storage
        app.state.accounts = AccountService.from_settings(storage=storage, settings=settings)
        if settings.env in ("dev", "test"):
            # Prod runs Alembic migrations instead.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(title="snipshare", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.schema = schema
    app.state.verifier = JwtVerifier(JwtConfig.from_settings(settings))

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(graphql_router, tags=["graphql"])
    return app


# --- Module Notes -----------------------------------------------------------
# Tests drive the lifespan explicitly (`app.router.lifespan_context(app)`)
# because httpx's ASGITransport does not run it.
