"""
snipshare.auth.jwt

JWT issuing and validation helpers.

Responsibilities:
- Issue session tokens for users after signup/login.
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub).
- Expose the token verification collaborator used by the context builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from snipshare.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


class VerificationFailure(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    ttl: timedelta = timedelta(hours=24),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise VerificationFailure(str(e)) from e


class JwtVerifier:
    def __init__(self, cfg: JwtConfig) -> None:
        self._cfg = cfg

    async def verify(self, token: str) -> str:
        payload = decode_and_validate(cfg=self._cfg, token=token)
        subject = str(payload.get("sub") or "")
        if not subject:
            raise VerificationFailure("token has an empty subject")
        return subject


# --- Module Notes -----------------------------------------------------------
# `verify` is async so a remote verifier (JWKS fetch, introspection endpoint)
# can replace `JwtVerifier` without touching the context builder.
