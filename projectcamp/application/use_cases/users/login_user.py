# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.domain.tokens import TokenPair
from projectcamp.domain.users.entities import User
from projectcamp.domain.users.exceptions import invalid_credentials
from projectcamp.domain.users.repositories import (
    CredentialStore,
    PasswordHasher,
    RefreshTokenStore,
    UserRepository,
)
from projectcamp.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        credentials: CredentialStore,
        refresh_tokens: RefreshTokenStore,
        token_issuer: JwtTokenIssuer,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._credentials = credentials
        self._refresh_tokens = refresh_tokens
        self._token_issuer = token_issuer
        self._password_hasher = password_hasher

    async def execute(self, email: str, password: str) -> tuple[User, TokenPair]:
        user = self._users.find_by_email(email.strip().lower())
        digest = self._credentials.load_credential_digest(user.id) if user else None

        # Always pay for one verification so unknown emails are not faster.
        password_valid = await self._password_hasher.verify_async(
            password, digest or self._password_hasher.dummy_digest
        )
        if user is None or digest is None or not password_valid:
            raise invalid_credentials()

        if self._password_hasher.needs_rehash(digest):
            rehashed = await self._password_hasher.hash_async(password)
            self._credentials.update_credential_digest(user.id, rehashed)
            logger.info(f"users.login: upgraded credential digest user_id={user.id}")

        pair = self._token_issuer.issue_token_pair(user)
        self._refresh_tokens.store_digest(user.id, self._token_issuer.digest(pair.refresh_token))
        logger.info(f"users.login: ok user_id={user.id}")
        return user, pair
