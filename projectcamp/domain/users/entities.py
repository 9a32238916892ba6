# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class UserRole(StrEnum):
    ADMIN = "admin"
    PROJECT_ADMIN = "project_admin"
    MEMBER = "member"


class TemporaryTokenPurpose(StrEnum):
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


@dataclass(slots=True, frozen=True)
class User:
    """Account identity. The credential digest is kept out of this entity."""

    id: int
    email: str
    username: str
    full_name: str | None
    role: UserRole
    is_email_verified: bool
    created_at: datetime


@dataclass(slots=True, frozen=True)
class TemporaryTokenRecord:

    user_id: int
    purpose: TemporaryTokenPurpose
    digest: str
    expires_at: datetime
