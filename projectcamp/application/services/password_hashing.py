"""Password hashing strategies."""

from __future__ import annotations

import asyncio
import secrets
from functools import cached_property

from werkzeug.security import check_password_hash, generate_password_hash

from projectcamp.domain.users.repositories import PasswordHasher
from projectcamp.shared.logging import logger

_BASE_ITERATIONS = 1000


def iterations_for(rounds: int) -> int:
    """Each work-factor round doubles the PBKDF2 iteration count."""
    return _BASE_ITERATIONS * 2**rounds


class WerkzeugPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = 10) -> None:
        if rounds < 1:
            raise ValueError("rounds must be positive")
        self._method = f"pbkdf2:sha256:{iterations_for(rounds)}"

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password cannot be empty")
        return str(generate_password_hash(password, method=self._method))

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError) as exc:
            logger.warning(f"password.verify: malformed digest rejected ({type(exc).__name__})")
            return False

    def needs_rehash(self, hashed: str) -> bool:
        return hashed.split("$", 1)[0] != self._method

    @cached_property
    def dummy_digest(self) -> str:
        # Verified against when the account is unknown, so timing matches a real check.
        return self.hash(secrets.token_urlsafe(16))

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self.verify, password, hashed)
