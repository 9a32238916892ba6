from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from projectcamp.domain.tokens import TokenPair
from projectcamp.domain.users.entities import User


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class UserDTO(_CamelModel):
    id: int
    email: str
    username: str
    full_name: str | None = None
    role: str
    is_email_verified: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            full_name=user.full_name,
            role=str(user.role),
            is_email_verified=user.is_email_verified,
            created_at=user.created_at,
        )


class TokenPairDTO(_CamelModel):
    access_token: str
    refresh_token: str

    @classmethod
    def from_pair(cls, pair: TokenPair) -> TokenPairDTO:
        return cls(access_token=pair.access_token, refresh_token=pair.refresh_token)


class ApiResponseDTO(_CamelModel):
    status_code: int
    data: Any = None
    message: str = "Success"
    success: bool = Field(default=True)

    @classmethod
    def of(cls, status_code: int, data: Any, message: str) -> ApiResponseDTO:
        return cls(status_code=status_code, data=data, message=message, success=status_code < 400)
