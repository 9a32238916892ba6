# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from projectcamp.shared.errors.base import AppError


def user_already_exists() -> AppError:
    return AppError.conflict("User with email or username already exists")


def invalid_credentials() -> AppError:
    return AppError.unauthenticated("credential_mismatch")


def temporary_token_rejected() -> AppError:
    return AppError.unauthenticated("temporary_token_rejected")


def user_not_found() -> AppError:
    return AppError.not_found("User does not exist")
