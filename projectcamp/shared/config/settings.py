# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
import sys
from datetime import timedelta
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_RE = re.compile(r"^\s*(\d+)\s*(ms|s|m|h|d|w)?\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}


class ConfigurationError(RuntimeError):
    """Raised when a component is built from incomplete settings."""


def parse_duration(value: Any) -> timedelta:
    """Parse ``900``, ``"900"``, ``"15m"``, ``"1h"``, ``"10d"`` into a timedelta."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"invalid duration: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[(unit or "s").lower()]


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///projectcamp.db", alias="DATABASE_URL")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", frozen=True, validate_by_name=True
    )


class TokenConfig(BaseSettings):
    access_token_secret: str | None = Field(None, alias="ACCESS_TOKEN_SECRET")
    access_token_expiry: timedelta | None = Field(None, alias="ACCESS_TOKEN_EXPIRY")
    refresh_token_secret: str | None = Field(None, alias="REFRESH_TOKEN_SECRET")
    refresh_token_expiry: timedelta | None = Field(None, alias="REFRESH_TOKEN_EXPIRY")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    temporary_token_ttl: timedelta = Field(
        timedelta(minutes=20), alias="TEMPORARY_TOKEN_TTL_MINUTES"
    )

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", frozen=True, validate_by_name=True
    )

    @field_validator("access_token_expiry", "refresh_token_expiry", mode="before")
    @classmethod
    def _parse_expiry(cls, value: Any) -> timedelta | None:
        if value is None or value == "":
            return None
        return parse_duration(value)

    @field_validator("temporary_token_ttl", mode="before")
    @classmethod
    def _parse_ttl_minutes(cls, value: Any) -> timedelta:
        if isinstance(value, timedelta):
            return value
        return timedelta(minutes=int(value))

    @field_validator("access_token_expiry", "refresh_token_expiry", "temporary_token_ttl")
    @classmethod
    def _at_least_one_second(cls, value: timedelta | None) -> timedelta | None:
        # Signed tokens carry whole-second iat/exp claims.
        if value is not None and value < timedelta(seconds=1):
            raise ValueError("duration must be at least one second")
        return value

    def ensure_complete(self) -> None:
        missing = [
            env
            for env, value in (
                ("ACCESS_TOKEN_SECRET", self.access_token_secret),
                ("ACCESS_TOKEN_EXPIRY", self.access_token_expiry),
                ("REFRESH_TOKEN_SECRET", self.refresh_token_secret),
                ("REFRESH_TOKEN_EXPIRY", self.refresh_token_expiry),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"missing token settings: {', '.join(missing)}")
        if self.access_token_secret == self.refresh_token_secret:
            raise ConfigurationError(
                "ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ"
            )


class SecurityConfig(BaseSettings):
    password_hash_rounds: int = Field(10, ge=1, le=20, alias="PASSWORD_HASH_ROUNDS")
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", frozen=True, validate_by_name=True
    )

    @field_validator("cookie_secure", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _token_config_factory() -> TokenConfig:
    return TokenConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    server_url: str = Field("http://localhost:8000", alias="SERVER_URL")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    tokens: TokenConfig = Field(default_factory=_token_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        validate_by_name=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in ("dev", "development", "test", ""):
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY must be a strong random value in production.\n",
                file=sys.stderr,
            )
            sys.exit(1)

        if not self.security.cookie_secure:
            print(
                "\n⚠️  PRODUCTION SECURITY WARNING: Cookie Secure flag is DISABLED\n",
                file=sys.stderr,
            )
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "SecurityConfig",
    "TokenConfig",
    "load_config",
    "parse_duration",
]
