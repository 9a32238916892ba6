# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from http import HTTPStatus
from typing import Any


class ErrorKind(StrEnum):
    VALIDATION_FAILURE = "validation_failure"
    UNAUTHENTICATED = "unauthenticated"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    INTERNAL = "internal"


_STATUS: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.VALIDATION_FAILURE: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.UNAUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.STORAGE_UNAVAILABLE: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}

_DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION_FAILURE: "Received data is not valid",
    ErrorKind.UNAUTHENTICATED: "Unauthorized request",
    ErrorKind.CONFLICT: "Resource already exists",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.STORAGE_UNAVAILABLE: "Internal server error",
    ErrorKind.INTERNAL: "Internal server error",
}


@dataclass(slots=True, eq=False)
class AppError(Exception):
    """Structured failure tagged with an :class:`ErrorKind`.

    ``errors`` is sent to the client; ``context`` is for logs only.
    """

    kind: ErrorKind
    message: str = ""
    errors: Sequence[Mapping[str, str]] = ()
    context: Mapping[str, Any] | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.message:
            self.message = _DEFAULT_MESSAGES[self.kind]
        self.errors = tuple(dict(item) for item in self.errors)
        Exception.__init__(self, self.message)

    @property
    def status(self) -> HTTPStatus:
        return _STATUS[self.kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "statusCode": int(self.status),
            "data": None,
            "message": self.message,
            "errors": [dict(item) for item in self.errors],
            "success": False,
        }

    @classmethod
    def validation(cls, errors: Sequence[Mapping[str, str]]) -> AppError:
        return cls(ErrorKind.VALIDATION_FAILURE, errors=errors)

    @classmethod
    def unauthenticated(cls, reason: str | None = None) -> AppError:
        # Every auth failure shares one client-facing message.
        return cls(
            ErrorKind.UNAUTHENTICATED,
            context={"reason": reason} if reason else None,
        )

    @classmethod
    def conflict(cls, message: str) -> AppError:
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def not_found(cls, message: str) -> AppError:
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def storage_unavailable(cls, operation: str) -> AppError:
        return cls(ErrorKind.STORAGE_UNAVAILABLE, context={"operation": operation})


def internal_error_payload() -> dict[str, Any]:
    return {
        "statusCode": int(HTTPStatus.INTERNAL_SERVER_ERROR),
        "data": None,
        "message": _DEFAULT_MESSAGES[ErrorKind.INTERNAL],
        "errors": [],
        "success": False,
    }
