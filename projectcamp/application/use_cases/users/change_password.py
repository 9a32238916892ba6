# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.domain.users.exceptions import invalid_credentials
from projectcamp.domain.users.repositories import CredentialStore, PasswordHasher


class ChangePasswordUseCase:
    def __init__(
        self, *, credentials: CredentialStore, password_hasher: PasswordHasher
    ) -> None:
        self._credentials = credentials
        self._password_hasher = password_hasher

    async def execute(self, user_id: int, old_password: str, new_password: str) -> None:
        digest = self._credentials.load_credential_digest(user_id)
        valid = await self._password_hasher.verify_async(
            old_password, digest or self._password_hasher.dummy_digest
        )
        if digest is None or not valid:
            raise invalid_credentials()
        hashed = await self._password_hasher.hash_async(new_password)
        self._credentials.update_credential_digest(user_id, hashed)
