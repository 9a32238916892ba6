# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from .base import AppError


class FieldViolation(Protocol):
    field: str
    message: str


def format_violations(violations: Iterable[FieldViolation]) -> list[dict[str, str]]:
    return [{violation.field: violation.message} for violation in violations]


def raise_validation_error(violations: Iterable[FieldViolation]) -> None:
    errors = format_violations(violations)
    if errors:
        raise AppError.validation(errors)


__all__ = [
    "format_violations",
    "raise_validation_error",
]
