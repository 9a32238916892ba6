# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import TemporaryTokenPurpose, TemporaryTokenRecord, User, UserRole

__all__ = ["TemporaryTokenPurpose", "TemporaryTokenRecord", "User", "UserRole"]
