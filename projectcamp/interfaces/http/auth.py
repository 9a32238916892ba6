# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import cast

from flask import Request, request

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.domain.tokens import AccessClaims, TokenKind
from projectcamp.domain.users.entities import User
from projectcamp.domain.users.repositories import UserRepository
from projectcamp.shared.errors import AppError
from projectcamp.shared.logging import logger

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


class AuthedRequest(Request):
    user_id: int


def authed_request() -> AuthedRequest:
    """Return the current request cast to include authentication attributes."""
    return cast(AuthedRequest, request)


def presented_access_token() -> str:
    auth = request.headers.get("Authorization", "")
    token = ""
    if auth.startswith("Bearer "):
        token = auth[7:].strip()
    if not token:
        token = request.cookies.get(ACCESS_TOKEN_COOKIE, "")
    return token


class BearerAuthenticator:
    """Resolves the caller from an access token in the header or cookie."""

    def __init__(self, *, token_issuer: JwtTokenIssuer, users: UserRepository) -> None:
        self._token_issuer = token_issuer
        self._users = users

    def authenticate(self) -> User:
        token = presented_access_token()
        if not token:
            logger.warning(
                f"No Authorization header/cookie on {request.method} {request.path}"
            )
            raise AppError.unauthenticated("access_token_missing")

        result = self._token_issuer.verify_token(token, TokenKind.ACCESS)
        if not isinstance(result.claims, AccessClaims):
            raise AppError.unauthenticated(f"access_{result.failure}")

        user = self._users.find_by_id(result.claims.subject_id)
        if user is None:
            raise AppError.unauthenticated("access_subject_unknown")

        authed_request().user_id = user.id
        logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
        return user


__all__ = [
    "ACCESS_TOKEN_COOKIE",
    "REFRESH_TOKEN_COOKIE",
    "AuthedRequest",
    "BearerAuthenticator",
    "authed_request",
]
