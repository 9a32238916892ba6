# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from projectcamp.domain.exceptions import InvariantViolation


class TokenKind(StrEnum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenFailure(StrEnum):
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"
    MALFORMED = "malformed"


@dataclass(slots=True, frozen=True)
class AccessClaims:

    subject_id: int
    email: str
    username: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class RefreshClaims:

    subject_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenVerification:
    """Outcome of checking a signed token: claims or a failure, never both."""

    claims: AccessClaims | RefreshClaims | None = None
    failure: TokenFailure | None = None

    def __post_init__(self) -> None:
        if (self.claims is None) == (self.failure is None):
            raise InvariantViolation(
                "exactly one of claims or failure must be set", field="claims"
            )

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def valid(cls, claims: AccessClaims | RefreshClaims) -> TokenVerification:
        return cls(claims=claims)

    @classmethod
    def invalid(cls, failure: TokenFailure) -> TokenVerification:
        return cls(failure=failure)


@dataclass(slots=True, frozen=True)
class TemporaryToken:
    """Freshly issued one-time token. Only ``digest`` and ``expires_at`` are stored."""

    plain_value: str = field(repr=False)
    digest: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenPair:

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
