from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from projectcamp.application.services.token_issuer import TEMPORARY_TOKEN_BYTES, JwtTokenIssuer
from projectcamp.domain.tokens import AccessClaims, RefreshClaims, TokenFailure, TokenKind
from projectcamp.domain.users.entities import User, UserRole
from projectcamp.shared.config import ConfigurationError

from .fakes import ACCESS_SECRET, FixedClock, make_token_config


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def issuer(clock: FixedClock) -> JwtTokenIssuer:
    return JwtTokenIssuer(make_token_config(), clock=clock)


@pytest.fixture()
def user() -> User:
    return User(
        id=7,
        email="alice@mail.com",
        username="alice",
        full_name="Alice",
        role=UserRole.MEMBER,
        is_email_verified=False,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


def test_access_token_carries_identity_claims(
    issuer: JwtTokenIssuer, clock: FixedClock, user: User
) -> None:
    token = issuer.issue_access_token(user)
    result = issuer.verify_token(token, TokenKind.ACCESS)

    assert result.ok
    assert isinstance(result.claims, AccessClaims)
    assert result.claims.subject_id == 7
    assert result.claims.email == "alice@mail.com"
    assert result.claims.username == "alice"
    assert result.claims.issued_at == clock.now
    assert result.claims.expires_at == clock.now + timedelta(minutes=15)


def test_refresh_token_carries_subject_only(issuer: JwtTokenIssuer, user: User) -> None:
    token = issuer.issue_refresh_token(user)
    payload = jwt.decode(token, options={"verify_signature": False})

    assert set(payload) == {"sub", "iat", "exp"}
    result = issuer.verify_token(token, TokenKind.REFRESH)
    assert isinstance(result.claims, RefreshClaims)
    assert result.claims.subject_id == 7


def test_token_expires_at_exact_boundary(
    issuer: JwtTokenIssuer, clock: FixedClock, user: User
) -> None:
    token = issuer.issue_access_token(user)

    clock.advance(timedelta(minutes=15) - timedelta(seconds=1))
    assert issuer.verify_token(token, TokenKind.ACCESS).ok

    clock.advance(timedelta(seconds=1))
    result = issuer.verify_token(token, TokenKind.ACCESS)
    assert result.failure is TokenFailure.EXPIRED
    assert result.claims is None


def test_kinds_are_not_interchangeable(issuer: JwtTokenIssuer, user: User) -> None:
    access = issuer.issue_access_token(user)
    refresh = issuer.issue_refresh_token(user)

    assert issuer.verify_token(access, TokenKind.REFRESH).failure is TokenFailure.SIGNATURE_INVALID
    assert issuer.verify_token(refresh, TokenKind.ACCESS).failure is TokenFailure.SIGNATURE_INVALID


def test_tampered_payload_is_rejected(issuer: JwtTokenIssuer, user: User) -> None:
    forged = jwt.encode(
        {"sub": "7", "email": "alice@mail.com", "username": "alice", "iat": 0, "exp": 2**40},
        "x" * 40,
        algorithm="HS256",
    )
    assert issuer.verify_token(forged, TokenKind.ACCESS).failure is TokenFailure.SIGNATURE_INVALID


@pytest.mark.parametrize("token", ["", "not.a.jwt", "abc"])
def test_garbage_is_malformed(issuer: JwtTokenIssuer, token: str) -> None:
    assert issuer.verify_token(token, TokenKind.ACCESS).failure is TokenFailure.MALFORMED


def test_missing_required_claim_is_malformed(issuer: JwtTokenIssuer) -> None:
    token = jwt.encode({"sub": "7", "iat": 0, "exp": 2**40}, ACCESS_SECRET, algorithm="HS256")
    assert issuer.verify_token(token, TokenKind.ACCESS).failure is TokenFailure.MALFORMED


def test_temporary_tokens_are_unique_and_hashed(issuer: JwtTokenIssuer, clock: FixedClock) -> None:
    first = issuer.issue_temporary_token()
    second = issuer.issue_temporary_token()

    assert first.plain_value != second.plain_value
    assert len(first.plain_value) == TEMPORARY_TOKEN_BYTES * 2
    assert first.digest == JwtTokenIssuer.digest(first.plain_value)
    assert first.digest != first.plain_value
    assert first.expires_at == clock.now + timedelta(minutes=20)
    assert first.plain_value not in repr(first)


def test_consume_temporary_token_rules(issuer: JwtTokenIssuer, clock: FixedClock) -> None:
    token = issuer.issue_temporary_token()

    assert issuer.consume_temporary_token(token.plain_value, token.digest, token.expires_at)
    assert not issuer.consume_temporary_token("wrong", token.digest, token.expires_at)
    assert not issuer.consume_temporary_token(token.plain_value, None, token.expires_at)
    assert not issuer.consume_temporary_token(token.plain_value, token.digest, None)

    clock.advance(timedelta(minutes=20))
    assert issuer.consume_temporary_token(token.plain_value, token.digest, token.expires_at)
    clock.advance(timedelta(seconds=1))
    assert not issuer.consume_temporary_token(token.plain_value, token.digest, token.expires_at)


@pytest.mark.parametrize(
    "overrides",
    [
        {"access_token_secret": None},
        {"refresh_token_expiry": None},
        {"refresh_token_secret": ACCESS_SECRET},
    ],
)
def test_incomplete_config_refuses_to_build(overrides: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError):
        JwtTokenIssuer(make_token_config(**overrides))
