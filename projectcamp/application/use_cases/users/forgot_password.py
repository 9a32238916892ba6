# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.domain.users.entities import TemporaryTokenPurpose
from projectcamp.domain.users.repositories import (
    TemporaryTokenStore,
    UserRepository,
    VerificationMailer,
)
from projectcamp.shared.logging import logger


class ForgotPasswordUseCase:
    """Mail a reset link. Unknown emails are accepted silently."""

    def __init__(
        self,
        *,
        users: UserRepository,
        temporary_tokens: TemporaryTokenStore,
        token_issuer: JwtTokenIssuer,
        mailer: VerificationMailer,
    ) -> None:
        self._users = users
        self._temporary_tokens = temporary_tokens
        self._token_issuer = token_issuer
        self._mailer = mailer

    def execute(self, email: str) -> None:
        user = self._users.find_by_email(email.strip().lower())
        if user is None:
            logger.info("users.forgot_password: no account for requested email")
            return

        token = self._token_issuer.issue_temporary_token()
        self._temporary_tokens.persist(
            user.id, TemporaryTokenPurpose.PASSWORD_RESET, token.digest, token.expires_at
        )
        self._mailer.send(user, TemporaryTokenPurpose.PASSWORD_RESET, token.plain_value)
        logger.info(f"users.forgot_password: reset link issued user_id={user.id}")
