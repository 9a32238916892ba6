# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.domain.users.entities import TemporaryTokenPurpose
from projectcamp.domain.users.exceptions import user_not_found
from projectcamp.domain.users.repositories import (
    TemporaryTokenStore,
    UserRepository,
    VerificationMailer,
)
from projectcamp.shared.errors.base import AppError


class ResendEmailVerificationUseCase:
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

    def execute(self, user_id: int) -> None:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise user_not_found()
        if user.is_email_verified:
            raise AppError.conflict("Email is already verified")

        token = self._token_issuer.issue_temporary_token()
        self._temporary_tokens.persist(
            user.id, TemporaryTokenPurpose.EMAIL_VERIFICATION, token.digest, token.expires_at
        )
        self._mailer.send(user, TemporaryTokenPurpose.EMAIL_VERIFICATION, token.plain_value)
