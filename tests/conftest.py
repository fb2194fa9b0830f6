"""
tests.conftest

Shared fixtures: a throwaway SQLite database per test, storage, services and
request-context factories.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from types import SimpleNamespace
from typing import Any

import pytest
import pytest_asyncio

from snipshare.auth.context import RequestContext
from snipshare.auth.jwt import JwtConfig, JwtVerifier
from snipshare.auth.models import Identity
from snipshare.db.init_db import init_db
from snipshare.db.models import Snip, User
from snipshare.db.session import create_engine, create_sessionmaker
from snipshare.db.storage import Storage
from snipshare.services.accounts import AccountService
from snipshare.services.snips import SnipService
from snipshare.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'snipshare.db'}",
        jwt_secret="test-secret-0123456789-abcdefghijklmnop",
        password_hash_rounds=4,
    )


@pytest_asyncio.fixture
async def storage(settings: Settings) -> AsyncIterator[Storage]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield Storage(create_sessionmaker(engine))
    finally:
        await engine.dispose()


@pytest.fixture
def accounts(storage: Storage, settings: Settings) -> AccountService:
    return AccountService.from_settings(storage=storage, settings=settings)


@pytest.fixture
def snips(storage: Storage) -> SnipService:
    return SnipService(storage)


@pytest.fixture
def verifier(settings: Settings) -> JwtVerifier:
    return JwtVerifier(JwtConfig.from_settings(settings))


@pytest.fixture
def make_user(accounts: AccountService) -> Callable[[str], Awaitable[User]]:
    async def _make(username: str, password: str = "pw") -> User:
        await accounts.register(username=username, password=password)
        user = await accounts.find_by_username(username)
        assert user is not None
        return user

    return _make


@pytest.fixture
def make_snip(snips: SnipService) -> Callable[..., Awaitable[Snip]]:
    async def _make(owner: User, name: str = "snip", public: bool = False) -> Snip:
        return await snips.create(owner_id=owner.id, name=name, public=public)

    return _make


@pytest.fixture
def context_for(storage: Storage, accounts: AccountService) -> Callable[..., RequestContext]:
    def _context(user: User | None = None) -> RequestContext:
        return RequestContext(
            token=None,
            identity=Identity(subject=user.id if user is not None else None),
            storage=storage,
            accounts=accounts,
        )

    return _context


@pytest.fixture
def fake_info() -> Callable[..., Any]:
    def _info(context: Any, *, parent_type: str = "Snip", field_name: str = "name") -> Any:
        # Just the attributes gates and reference resolvers read.
        return SimpleNamespace(
            context=context,
            parent_type=SimpleNamespace(name=parent_type),
            field_name=field_name,
        )

    return _info


# --- Module Notes -----------------------------------------------------------
# Rounds=4 keeps bcrypt fast enough for per-test signups.
