# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed access/refresh tokens and hashed one-time tokens."""

from __future__ import annotations

import hashlib
import hmac
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from projectcamp.domain.tokens import (
    AccessClaims,
    RefreshClaims,
    TemporaryToken,
    TokenFailure,
    TokenKind,
    TokenPair,
    TokenVerification,
)
from projectcamp.domain.users.entities import User
from projectcamp.shared.config import TokenConfig
from projectcamp.shared.logging import logger
from projectcamp.utils.dates import as_utc, utcnow

Clock = Callable[[], datetime]

TEMPORARY_TOKEN_BYTES = 20

_REQUIRED_CLAIMS: dict[TokenKind, list[str]] = {
    TokenKind.ACCESS: ["sub", "email", "username", "iat", "exp"],
    TokenKind.REFRESH: ["sub", "iat", "exp"],
}


class _MalformedClaims(ValueError):
    pass


def _timestamp(payload: dict[str, Any], claim: str) -> datetime:
    value = payload[claim]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _MalformedClaims(claim)
    return datetime.fromtimestamp(value, tz=UTC)


def _text(payload: dict[str, Any], claim: str) -> str:
    value = payload[claim]
    if not isinstance(value, str) or not value:
        raise _MalformedClaims(claim)
    return value


class JwtTokenIssuer:
    """Issues and checks tokens using secrets fixed at construction time.

    The issuer refuses to build when either secret or either lifetime is
    missing, so no token can be minted without a bounded expiry.
    """

    def __init__(self, config: TokenConfig, *, clock: Clock = utcnow) -> None:
        config.ensure_complete()
        self._algorithm = config.algorithm
        self._secrets: dict[TokenKind, str] = {
            TokenKind.ACCESS: str(config.access_token_secret),
            TokenKind.REFRESH: str(config.refresh_token_secret),
        }
        self._lifetimes: dict[TokenKind, timedelta] = {
            TokenKind.ACCESS: config.access_token_expiry,  # type: ignore[dict-item]
            TokenKind.REFRESH: config.refresh_token_expiry,  # type: ignore[dict-item]
        }
        self._temporary_ttl = config.temporary_token_ttl
        self._clock = clock

    def _sign(self, kind: TokenKind, claims: dict[str, Any]) -> str:
        # NumericDate claims carry whole seconds.
        issued_at = as_utc(self._clock()).replace(microsecond=0)
        expires_at = issued_at + self._lifetimes[kind]
        payload = {
            **claims,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self._algorithm)

    def issue_access_token(self, subject: User) -> str:
        token = self._sign(
            TokenKind.ACCESS,
            {"sub": str(subject.id), "email": subject.email, "username": subject.username},
        )
        logger.debug(f"tokens.issue: access token for user={subject.id}")
        return token

    def issue_refresh_token(self, subject: User) -> str:
        token = self._sign(TokenKind.REFRESH, {"sub": str(subject.id)})
        logger.debug(f"tokens.issue: refresh token for user={subject.id}")
        return token

    def issue_token_pair(self, subject: User) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(subject),
            refresh_token=self.issue_refresh_token(subject),
        )

    def verify_token(self, token: str, kind: TokenKind) -> TokenVerification:
        if not isinstance(token, str) or not token:
            return self._reject(kind, TokenFailure.MALFORMED)

        try:
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": _REQUIRED_CLAIMS[kind],
                },
            )
        except jwt.InvalidSignatureError:
            return self._reject(kind, TokenFailure.SIGNATURE_INVALID)
        except jwt.InvalidTokenError:
            return self._reject(kind, TokenFailure.MALFORMED)

        try:
            subject_id = int(_text(payload, "sub"))
            issued_at = _timestamp(payload, "iat")
            expires_at = _timestamp(payload, "exp")
            claims: AccessClaims | RefreshClaims
            if kind is TokenKind.ACCESS:
                claims = AccessClaims(
                    subject_id=subject_id,
                    email=_text(payload, "email"),
                    username=_text(payload, "username"),
                    issued_at=issued_at,
                    expires_at=expires_at,
                )
            else:
                claims = RefreshClaims(
                    subject_id=subject_id, issued_at=issued_at, expires_at=expires_at
                )
        except (ValueError, OverflowError, OSError):
            return self._reject(kind, TokenFailure.MALFORMED)

        if as_utc(self._clock()) >= expires_at:
            return self._reject(kind, TokenFailure.EXPIRED)
        return TokenVerification.valid(claims)

    def _reject(self, kind: TokenKind, failure: TokenFailure) -> TokenVerification:
        logger.debug(f"tokens.verify: {kind} token rejected reason={failure}")
        return TokenVerification.invalid(failure)

    @staticmethod
    def digest(value: str) -> str:
        """Fast unsalted digest; temporary tokens carry their own entropy."""
        return hashlib.sha256(value.encode("utf-8")).hexdigest()

    def issue_temporary_token(self) -> TemporaryToken:
        plain_value = secrets.token_hex(TEMPORARY_TOKEN_BYTES)
        return TemporaryToken(
            plain_value=plain_value,
            digest=self.digest(plain_value),
            expires_at=as_utc(self._clock()) + self._temporary_ttl,
        )

    def consume_temporary_token(
        self,
        presented_value: str,
        stored_digest: str | None,
        stored_expiry: datetime | None,
    ) -> bool:
        """Check a presented one-time value against its stored digest.

        Callers must clear the stored digest once this returns ``True``.
        """
        if not presented_value or not stored_digest or stored_expiry is None:
            return False
        matches = hmac.compare_digest(self.digest(presented_value), stored_digest)
        return matches and as_utc(self._clock()) <= as_utc(stored_expiry)


__all__ = ["Clock", "JwtTokenIssuer", "TEMPORARY_TOKEN_BYTES"]
