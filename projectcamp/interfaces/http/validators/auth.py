# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.application.services.validation import (
    ValidationRule,
    is_email,
    lowercase,
    max_length,
    min_length,
    required,
)

PASSWORD_MIN_LENGTH = 8
USERNAME_MIN_LENGTH = 3

REGISTER_RULES: tuple[ValidationRule, ...] = (
    required("email", "Email is required"),
    is_email("email", "Email is invalid"),
    required("username", "Username is required"),
    lowercase("username", "Username must be in lower case"),
    min_length("username", USERNAME_MIN_LENGTH, "Username must be at least 3 characters long"),
    required("password", "Password is required"),
    min_length("password", PASSWORD_MIN_LENGTH, "Password must be at least 8 characters long"),
    max_length("fullName", 128, "Full name must be at most 128 characters long"),
)

LOGIN_RULES: tuple[ValidationRule, ...] = (
    required("email", "Email is required"),
    is_email("email", "Email is invalid"),
    required("password", "Password is required"),
)

CHANGE_PASSWORD_RULES: tuple[ValidationRule, ...] = (
    required("oldPassword", "Old password is required"),
    required("newPassword", "New password is required"),
    min_length("newPassword", PASSWORD_MIN_LENGTH, "Password must be at least 8 characters long"),
)

FORGOT_PASSWORD_RULES: tuple[ValidationRule, ...] = (
    required("email", "Email is required"),
    is_email("email", "Email is invalid"),
)

RESET_PASSWORD_RULES: tuple[ValidationRule, ...] = (
    required("newPassword", "New password is required"),
    min_length("newPassword", PASSWORD_MIN_LENGTH, "Password must be at least 8 characters long"),
)

__all__ = [
    "CHANGE_PASSWORD_RULES",
    "FORGOT_PASSWORD_RULES",
    "LOGIN_RULES",
    "REGISTER_RULES",
    "RESET_PASSWORD_RULES",
]
