"""
snipshare.auth.passwords

Password hashing (bcrypt).

Responsibilities:
- Hash new passwords with a configurable cost factor.
- Verify candidate passwords in constant time.
"""

from __future__ import annotations

import bcrypt


class PasswordHasher:
    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash.
            return False


# --- Module Notes -----------------------------------------------------------
# bcrypt only looks at the first 72 bytes of a password; longer inputs are
# rejected at the service layer rather than silently truncated.
