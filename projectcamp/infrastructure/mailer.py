# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.domain.users.entities import TemporaryTokenPurpose, User
from projectcamp.domain.users.repositories import VerificationMailer
from projectcamp.shared.logging import logger

_LINK_PATHS: dict[TemporaryTokenPurpose, str] = {
    TemporaryTokenPurpose.EMAIL_VERIFICATION: "/api/v1/auth/verify-email/",
    TemporaryTokenPurpose.PASSWORD_RESET: "/api/v1/auth/reset-password/",
}


def build_link(server_url: str, purpose: TemporaryTokenPurpose, plain_value: str) -> str:
    return f"{server_url.rstrip('/')}{_LINK_PATHS[purpose]}{plain_value}"


class LoggingMailer(VerificationMailer):
    """Development transport: records that a link was sent, never the full token."""

    def __init__(self, server_url: str) -> None:
        self._server_url = server_url

    def send(self, user: User, purpose: TemporaryTokenPurpose, plain_value: str) -> None:
        link = build_link(self._server_url, purpose, plain_value[:8])
        logger.info(f"mail.send: purpose={purpose} user_id={user.id} link={link}…")
