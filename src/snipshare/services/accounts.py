"""
snipshare.services.accounts

Account lifecycle service.

Responsibilities:
- Register users (bcrypt-hashed passwords, unique usernames).
- Check credentials and issue session tokens.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

from snipshare.auth.jwt import JwtConfig, issue_token
from snipshare.auth.passwords import PasswordHasher
from snipshare.db.models import User
from snipshare.db.repositories.users import UserRepo
from snipshare.db.storage import Storage
from snipshare.errors import ConflictError, CredentialsError
from snipshare.observability.logging import get_logger
from snipshare.settings import Settings

log = get_logger(__name__)

_MAX_PASSWORD_BYTES = 72


class AccountService:
    def __init__(
        self,
        *,
        storage: Storage,
        jwt: JwtConfig,
        hasher: PasswordHasher,
        token_ttl: timedelta,
    ) -> None:
        self._storage = storage
        self._jwt = jwt
        self._hasher = hasher
        self._token_ttl = token_ttl

    @classmethod
    def from_settings(cls, *, storage: Storage, settings: Settings) -> AccountService:
        return cls(
            storage=storage,
            jwt=JwtConfig.from_settings(settings),
            hasher=PasswordHasher(rounds=settings.password_hash_rounds),
            token_ttl=timedelta(minutes=settings.token_ttl_minutes),
        )

    def issue_token(self, user: User) -> str:
        return issue_token(cfg=self._jwt, subject=user.id, ttl=self._token_ttl)

    async def register(self, *, username: str, password: str) -> str:
        username = username.strip()
        if not username:
            raise CredentialsError("username must not be empty")
        if not password or len(password.encode("utf-8")) > _MAX_PASSWORD_BYTES:
            raise CredentialsError("password must be between 1 and 72 bytes")

        # bcrypt is CPU bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        async with self._storage.session() as session:
            users = UserRepo(session)
            if await users.get_by_username(username) is not None:
                raise ConflictError("username already taken")
            user = await users.create(username=username, password_hash=password_hash)

        log.info("user_registered", user_id=user.id)
        return self.issue_token(user)

    async def login(self, *, username: str, password: str) -> str:
        async with self._storage.session() as session:
            user = await UserRepo(session).get_by_username(username.strip())

        # Same error for unknown user and wrong password.
        if user is None or not await asyncio.to_thread(
            self._hasher.verify, password, user.password_hash
        ):
            raise CredentialsError("invalid username or password")
        return self.issue_token(user)

    async def find_by_username(self, username: str) -> User | None:
        async with self._storage.session() as session:
            return await UserRepo(session).get_by_username(username)


# --- Module Notes -----------------------------------------------------------
# Tokens carry only the user id (`sub`); roles are resolved per snip at request time.
