# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.token_issuer import JwtTokenIssuer
from projectcamp.domain.users.entities import TemporaryTokenPurpose
from projectcamp.domain.users.exceptions import temporary_token_rejected
from projectcamp.domain.users.repositories import TemporaryTokenStore


def consume_or_reject(
    token_issuer: JwtTokenIssuer,
    store: TemporaryTokenStore,
    presented: str,
    purpose: TemporaryTokenPurpose,
) -> int:
    """Claim a one-time token through the store and return its user id.

    The store clears the record as it hands it over, so a replayed value
    finds nothing even when it is still within its lifetime.
    """
    record = store.atomic_consume(token_issuer.digest(presented or ""), purpose)
    if record is None or not token_issuer.consume_temporary_token(
        presented, record.digest, record.expires_at
    ):
        raise temporary_token_rejected()
    return record.user_id
