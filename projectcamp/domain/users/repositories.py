# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import TemporaryTokenPurpose, TemporaryTokenRecord, User


class UserRepository(Protocol):
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_email_or_username(self, email: str, username: str) -> User | None: ...
    def add(self, user: User, password_hash: str) -> User: ...
    def mark_email_verified(self, user_id: int) -> None: ...


class CredentialStore(Protocol):
    def load_credential_digest(self, user_id: int) -> str | None: ...
    def update_credential_digest(self, user_id: int, digest: str) -> None: ...


class TemporaryTokenStore(Protocol):
    def persist(
        self,
        user_id: int,
        purpose: TemporaryTokenPurpose,
        digest: str,
        expires_at: datetime,
    ) -> None:
        """Store a digest, replacing any earlier one of the same purpose."""
        ...

    def atomic_consume(
        self, digest: str, purpose: TemporaryTokenPurpose
    ) -> TemporaryTokenRecord | None:
        """Find and clear the record in one atomic step.

        Of several concurrent callers presenting the same digest, exactly one
        receives the record; the others receive ``None``.
        """
        ...


class RefreshTokenStore(Protocol):
    def store_digest(self, user_id: int, digest: str | None) -> None: ...
    def load_digest(self, user_id: int) -> str | None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
    def needs_rehash(self, hashed: str) -> bool: ...

    @property
    def dummy_digest(self) -> str: ...

    async def hash_async(self, password: str) -> str: ...
    async def verify_async(self, password: str, hashed: str) -> bool: ...


class VerificationMailer(Protocol):
    def send(self, user: User, purpose: TemporaryTokenPurpose, plain_value: str) -> None: ...
