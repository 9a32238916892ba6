# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hmac

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.domain.tokens import RefreshClaims, TokenKind, TokenPair
from projectcamp.domain.users.entities import User
from projectcamp.domain.users.repositories import RefreshTokenStore, UserRepository
from projectcamp.shared.errors.base import AppError
from projectcamp.shared.logging import logger


class RefreshAccessTokenUseCase:
    """Trade the user's current refresh token for a fresh pair (rotation)."""

    def __init__(
        self,
        *,
        users: UserRepository,
        refresh_tokens: RefreshTokenStore,
        token_issuer: JwtTokenIssuer,
    ) -> None:
        self._users = users
        self._refresh_tokens = refresh_tokens
        self._token_issuer = token_issuer

    def execute(self, refresh_token: str) -> tuple[User, TokenPair]:
        result = self._token_issuer.verify_token(refresh_token, TokenKind.REFRESH)
        if not isinstance(result.claims, RefreshClaims):
            raise AppError.unauthenticated(f"refresh_{result.failure}")

        user = self._users.find_by_id(result.claims.subject_id)
        stored = self._refresh_tokens.load_digest(user.id) if user else None
        presented = self._token_issuer.digest(refresh_token)
        if user is None or stored is None or not hmac.compare_digest(stored, presented):
            raise AppError.unauthenticated("refresh_not_current")

        pair = self._token_issuer.issue_token_pair(user)
        self._refresh_tokens.store_digest(user.id, self._token_issuer.digest(pair.refresh_token))
        logger.info(f"users.refresh: rotated tokens user_id={user.id}")
        return user, pair
