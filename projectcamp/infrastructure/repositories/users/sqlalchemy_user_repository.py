# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from projectcamp.domain.users.entities import TemporaryTokenPurpose, TemporaryTokenRecord
from projectcamp.domain.users.entities import User as DomainUser
from projectcamp.domain.users.entities import UserRole
from projectcamp.domain.users.exceptions import user_already_exists
from projectcamp.domain.users.repositories import (
    CredentialStore,
    RefreshTokenStore,
    TemporaryTokenStore,
    UserRepository,
)
from projectcamp.infrastructure.db.models import TemporaryToken, User
from projectcamp.infrastructure.db.session import SessionFactory, session_scope
from projectcamp.shared.errors.base import AppError
from projectcamp.utils.dates import as_utc


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        email=row.email,
        username=row.username,
        full_name=row.full_name,
        role=UserRole(row.role),
        is_email_verified=row.is_email_verified,
        created_at=as_utc(row.created_at),
    )


class _SqlAlchemyRepository:
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except AppError:
            raise
        except SQLAlchemyError as exc:
            raise AppError.storage_unavailable(operation) from exc


class SqlAlchemyUserRepository(
    _SqlAlchemyRepository, UserRepository, CredentialStore, RefreshTokenStore
):
    def find_by_id(self, user_id: int) -> DomainUser | None:
        with self._session("users.find_by_id") as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_email(self, email: str) -> DomainUser | None:
        with self._session("users.find_by_email") as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain(row) if row else None

    def find_by_email_or_username(self, email: str, username: str) -> DomainUser | None:
        with self._session("users.find_by_email_or_username") as session:
            row = session.scalars(
                select(User).where(or_(User.email == email, User.username == username))
            ).first()
            return _to_domain(row) if row else None

    def add(self, user: DomainUser, password_hash: str) -> DomainUser:
        try:
            with self._session("users.add") as session:
                row = User(
                    email=user.email,
                    username=user.username,
                    full_name=user.full_name,
                    password_hash=password_hash,
                    role=str(user.role),
                    is_email_verified=user.is_email_verified,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except AppError as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise user_already_exists() from exc.__cause__
            raise

    def mark_email_verified(self, user_id: int) -> None:
        with self._session("users.mark_email_verified") as session:
            session.execute(
                update(User).where(User.id == user_id).values(is_email_verified=True)
            )

    def load_credential_digest(self, user_id: int) -> str | None:
        with self._session("users.load_credential_digest") as session:
            return session.scalar(select(User.password_hash).where(User.id == user_id))

    def update_credential_digest(self, user_id: int, digest: str) -> None:
        with self._session("users.update_credential_digest") as session:
            session.execute(update(User).where(User.id == user_id).values(password_hash=digest))

    def store_digest(self, user_id: int, digest: str | None) -> None:
        with self._session("users.store_refresh_digest") as session:
            session.execute(
                update(User).where(User.id == user_id).values(refresh_token_digest=digest)
            )

    def load_digest(self, user_id: int) -> str | None:
        with self._session("users.load_refresh_digest") as session:
            return session.scalar(
                select(User.refresh_token_digest).where(User.id == user_id)
            )


class SqlAlchemyTemporaryTokenRepository(_SqlAlchemyRepository, TemporaryTokenStore):
    def persist(
        self,
        user_id: int,
        purpose: TemporaryTokenPurpose,
        digest: str,
        expires_at: datetime,
    ) -> None:
        with self._session("temporary_tokens.persist") as session:
            session.execute(
                delete(TemporaryToken).where(
                    TemporaryToken.user_id == user_id,
                    TemporaryToken.purpose == str(purpose),
                )
            )
            session.add(
                TemporaryToken(
                    user_id=user_id,
                    purpose=str(purpose),
                    digest=digest,
                    expires_at=expires_at,
                )
            )

    def atomic_consume(
        self, digest: str, purpose: TemporaryTokenPurpose
    ) -> TemporaryTokenRecord | None:
        with self._session("temporary_tokens.atomic_consume") as session:
            row = session.scalars(
                select(TemporaryToken).where(
                    TemporaryToken.digest == digest,
                    TemporaryToken.purpose == str(purpose),
                )
            ).first()
            if row is None:
                return None
            record = TemporaryTokenRecord(
                user_id=row.user_id,
                purpose=TemporaryTokenPurpose(row.purpose),
                digest=row.digest,
                expires_at=as_utc(row.expires_at),
            )
            # Only the caller whose DELETE removes the row owns the token.
            result = session.execute(
                delete(TemporaryToken)
                .where(TemporaryToken.id == row.id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None
            return record
