# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.application.use_cases.users.temporary_tokens import consume_or_reject
from projectcamp.domain.users.entities import TemporaryTokenPurpose
from projectcamp.domain.users.repositories import (
    CredentialStore,
    PasswordHasher,
    RefreshTokenStore,
    TemporaryTokenStore,
)
from projectcamp.shared.logging import logger


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        credentials: CredentialStore,
        refresh_tokens: RefreshTokenStore,
        temporary_tokens: TemporaryTokenStore,
        token_issuer: JwtTokenIssuer,
        password_hasher: PasswordHasher,
    ) -> None:
        self._credentials = credentials
        self._refresh_tokens = refresh_tokens
        self._temporary_tokens = temporary_tokens
        self._token_issuer = token_issuer
        self._password_hasher = password_hasher

    async def execute(self, presented: str, new_password: str) -> None:
        user_id = consume_or_reject(
            self._token_issuer,
            self._temporary_tokens,
            presented,
            TemporaryTokenPurpose.PASSWORD_RESET,
        )
        hashed = await self._password_hasher.hash_async(new_password)
        self._credentials.update_credential_digest(user_id, hashed)
        self._refresh_tokens.store_digest(user_id, None)
        logger.info(f"users.reset_password: ok user_id={user_id}")
