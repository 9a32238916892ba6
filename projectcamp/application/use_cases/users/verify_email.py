# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.application.use_cases.users.temporary_tokens import consume_or_reject
from projectcamp.domain.users.entities import TemporaryTokenPurpose, User
from projectcamp.domain.users.exceptions import user_not_found
from projectcamp.domain.users.repositories import TemporaryTokenStore, UserRepository
from projectcamp.shared.logging import logger


class VerifyEmailUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        temporary_tokens: TemporaryTokenStore,
        token_issuer: JwtTokenIssuer,
    ) -> None:
        self._users = users
        self._temporary_tokens = temporary_tokens
        self._token_issuer = token_issuer

    def execute(self, presented: str) -> User:
        user_id = consume_or_reject(
            self._token_issuer,
            self._temporary_tokens,
            presented,
            TemporaryTokenPurpose.EMAIL_VERIFICATION,
        )
        self._users.mark_email_verified(user_id)
        user = self._users.find_by_id(user_id)
        if user is None:
            raise user_not_found()
        logger.info(f"users.verify_email: ok user_id={user_id}")
        return user
