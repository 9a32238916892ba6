# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.domain.users.entities import TemporaryTokenPurpose, User, UserRole
from projectcamp.domain.users.exceptions import user_already_exists
from projectcamp.domain.users.repositories import (
    PasswordHasher,
    TemporaryTokenStore,
    UserRepository,
    VerificationMailer,
)
from projectcamp.shared.logging import logger
from projectcamp.utils.dates import utcnow


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        temporary_tokens: TemporaryTokenStore,
        token_issuer: JwtTokenIssuer,
        password_hasher: PasswordHasher,
        mailer: VerificationMailer,
    ) -> None:
        self._users = users
        self._temporary_tokens = temporary_tokens
        self._token_issuer = token_issuer
        self._password_hasher = password_hasher
        self._mailer = mailer

    async def execute(
        self, email: str, username: str, password: str, full_name: str | None = None
    ) -> User:
        email = email.strip().lower()
        username = username.strip()
        if self._users.find_by_email_or_username(email, username):
            raise user_already_exists()

        hashed = await self._password_hasher.hash_async(password)
        user = self._users.add(
            User(
                id=0,
                email=email,
                username=username,
                full_name=(full_name or "").strip() or None,
                role=UserRole.MEMBER,
                is_email_verified=False,
                created_at=utcnow(),
            ),
            hashed,
        )

        token = self._token_issuer.issue_temporary_token()
        self._temporary_tokens.persist(
            user.id, TemporaryTokenPurpose.EMAIL_VERIFICATION, token.digest, token.expires_at
        )
        self._mailer.send(user, TemporaryTokenPurpose.EMAIL_VERIFICATION, token.plain_value)
        logger.info(f"users.register: ok user_id={user.id}")
        return user
