"""Use-case for dropping the current refresh token."""

from __future__ import annotations

from projectcamp.domain.users.repositories import RefreshTokenStore


class LogoutUserUseCase:
    def __init__(self, *, refresh_tokens: RefreshTokenStore) -> None:
        self._refresh_tokens = refresh_tokens

    def execute(self, user_id: int) -> None:
        self._refresh_tokens.store_digest(user_id, None)
