from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest

from projectcamp.domain.users.entities import TemporaryTokenPurpose, User, UserRole
from projectcamp.infrastructure.db import build_engine, build_session_factory, init_db
from projectcamp.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyTemporaryTokenRepository,
    SqlAlchemyUserRepository,
)
from projectcamp.shared.config.settings import DatabaseConfig
from projectcamp.shared.errors import AppError, ErrorKind

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def session_factory():
    engine = build_engine(DatabaseConfig(url="sqlite://"))
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def users(session_factory) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(session_factory)


@pytest.fixture()
def tokens(session_factory) -> SqlAlchemyTemporaryTokenRepository:
    return SqlAlchemyTemporaryTokenRepository(session_factory)


def _new_user(email: str = "alice@mail.com", username: str = "alice") -> User:
    return User(
        id=0,
        email=email,
        username=username,
        full_name=None,
        role=UserRole.MEMBER,
        is_email_verified=False,
        created_at=NOW,
    )


def test_add_and_lookup(users: SqlAlchemyUserRepository) -> None:
    created = users.add(_new_user(), "digest-value")

    assert created.id > 0
    assert users.find_by_email("alice@mail.com") == created
    assert users.find_by_id(created.id) == created
    assert users.find_by_email_or_username("other@mail.com", "alice") == created
    assert users.load_credential_digest(created.id) == "digest-value"
    assert created.created_at == NOW


def test_duplicate_user_is_conflict(users: SqlAlchemyUserRepository) -> None:
    users.add(_new_user(), "digest-value")

    with pytest.raises(AppError) as excinfo:
        users.add(_new_user(email="second@mail.com"), "digest-value")

    assert excinfo.value.kind is ErrorKind.CONFLICT


def test_credential_and_refresh_digests(users: SqlAlchemyUserRepository) -> None:
    user = users.add(_new_user(), "old")

    users.update_credential_digest(user.id, "new")
    users.store_digest(user.id, "refresh-digest")
    assert users.load_credential_digest(user.id) == "new"
    assert users.load_digest(user.id) == "refresh-digest"

    users.store_digest(user.id, None)
    assert users.load_digest(user.id) is None


def test_mark_email_verified(users: SqlAlchemyUserRepository) -> None:
    user = users.add(_new_user(), "digest")

    users.mark_email_verified(user.id)

    assert users.find_by_id(user.id).is_email_verified  # type: ignore[union-attr]


def test_atomic_consume_hands_out_record_once(
    users: SqlAlchemyUserRepository, tokens: SqlAlchemyTemporaryTokenRepository
) -> None:
    user = users.add(_new_user(), "digest")
    expires_at = NOW + timedelta(minutes=20)
    tokens.persist(user.id, TemporaryTokenPurpose.EMAIL_VERIFICATION, "a" * 64, expires_at)

    assert tokens.atomic_consume("a" * 64, TemporaryTokenPurpose.PASSWORD_RESET) is None
    record = tokens.atomic_consume("a" * 64, TemporaryTokenPurpose.EMAIL_VERIFICATION)

    assert record is not None
    assert record.user_id == user.id
    assert record.expires_at == expires_at
    assert tokens.atomic_consume("a" * 64, TemporaryTokenPurpose.EMAIL_VERIFICATION) is None


def test_persist_replaces_token_of_same_purpose(
    users: SqlAlchemyUserRepository, tokens: SqlAlchemyTemporaryTokenRepository
) -> None:
    user = users.add(_new_user(), "digest")
    expires_at = NOW + timedelta(minutes=20)
    tokens.persist(user.id, TemporaryTokenPurpose.PASSWORD_RESET, "a" * 64, expires_at)
    tokens.persist(user.id, TemporaryTokenPurpose.PASSWORD_RESET, "b" * 64, expires_at)
    tokens.persist(user.id, TemporaryTokenPurpose.EMAIL_VERIFICATION, "c" * 64, expires_at)

    assert tokens.atomic_consume("a" * 64, TemporaryTokenPurpose.PASSWORD_RESET) is None
    assert tokens.atomic_consume("b" * 64, TemporaryTokenPurpose.PASSWORD_RESET) is not None
    assert tokens.atomic_consume("c" * 64, TemporaryTokenPurpose.EMAIL_VERIFICATION) is not None


def _race(consume, callers: int = 8) -> list[object]:
    barrier = threading.Barrier(callers)
    results: list[object] = []
    lock = threading.Lock()

    def run() -> None:
        barrier.wait()
        try:
            outcome = consume()
        except Exception as exc:
            outcome = exc
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=run) for _ in range(callers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return results


def test_concurrent_consumers_get_exactly_one_record(tmp_path) -> None:
    engine = build_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'tokens.db'}"))
    init_db(engine)
    factory = build_session_factory(engine)
    users = SqlAlchemyUserRepository(factory)
    tokens = SqlAlchemyTemporaryTokenRepository(factory)
    user = users.add(_new_user(), "digest")

    try:
        for round_no in range(10):
            digest = f"{round_no:064x}"
            tokens.persist(
                user.id,
                TemporaryTokenPurpose.PASSWORD_RESET,
                digest,
                NOW + timedelta(minutes=20),
            )

            results = _race(
                lambda d=digest: tokens.atomic_consume(d, TemporaryTokenPurpose.PASSWORD_RESET)
            )

            assert len(results) == 8
            assert not [r for r in results if isinstance(r, Exception)]
            assert len([r for r in results if r is not None]) == 1
    finally:
        engine.dispose()
