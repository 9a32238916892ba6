# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Declarative field validation.

A rule set is a plain ordered tuple of :class:`ValidationRule` values built
at import time. :func:`run_validation` evaluates every rule (no early exit)
and reports violations in declaration order.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

from projectcamp.shared.errors.validation import format_violations, raise_validation_error

Check = Callable[[str], bool]


@dataclass(slots=True, frozen=True)
class ValidationRule:

    field: str
    check: Check
    message: str


@dataclass(slots=True, frozen=True)
class Violation:

    field: str
    message: str


@dataclass(slots=True, frozen=True)
class ValidationReport:

    violations: tuple[Violation, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def to_errors(self) -> list[dict[str, str]]:
        return format_violations(self.violations)

    def raise_for_violations(self) -> None:
        raise_validation_error(self.violations)


def field_value(payload: Mapping[str, Any] | None, field: str) -> str | None:
    """Missing and null fields are checked as empty strings.

    Any other non-string value yields ``None``, which fails every rule on
    that field.
    """
    if not isinstance(payload, Mapping):
        return ""
    value = payload.get(field)
    if value is None:
        return ""
    return value if isinstance(value, str) else None


def _passes(rule: ValidationRule, value: str | None) -> bool:
    return value is not None and rule.check(value)


def run_validation(
    rules: Iterable[ValidationRule], payload: Mapping[str, Any] | None
) -> ValidationReport:
    violations = tuple(
        Violation(rule.field, rule.message)
        for rule in rules
        if not _passes(rule, field_value(payload, rule.field))
    )
    return ValidationReport(violations)


def ensure_valid(
    rules: Iterable[ValidationRule], payload: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Raise a 422 ``AppError`` on any violation, else return the payload."""
    run_validation(rules, payload).raise_for_violations()
    return dict(payload or {})


def _is_email(value: str) -> bool:
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def required(field: str, message: str) -> ValidationRule:
    return ValidationRule(field, lambda value: bool(value.strip()), message)


def is_email(field: str, message: str) -> ValidationRule:
    return ValidationRule(field, _is_email, message)


def min_length(field: str, length: int, message: str) -> ValidationRule:
    return ValidationRule(field, lambda value: len(value.strip()) >= length, message)


def max_length(field: str, length: int, message: str) -> ValidationRule:
    return ValidationRule(field, lambda value: len(value.strip()) <= length, message)


def lowercase(field: str, message: str) -> ValidationRule:
    return ValidationRule(field, lambda value: value == value.lower(), message)


def matches(field: str, pattern: str, message: str) -> ValidationRule:
    compiled = re.compile(pattern)
    return ValidationRule(field, lambda value: compiled.fullmatch(value) is not None, message)


__all__ = [
    "ValidationReport",
    "ValidationRule",
    "Violation",
    "ensure_valid",
    "field_value",
    "is_email",
    "lowercase",
    "matches",
    "max_length",
    "min_length",
    "required",
    "run_validation",
]
