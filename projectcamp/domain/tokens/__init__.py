# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (
    AccessClaims,
    RefreshClaims,
    TemporaryToken,
    TokenFailure,
    TokenKind,
    TokenPair,
    TokenVerification,
)

__all__ = [
    "AccessClaims",
    "RefreshClaims",
    "TemporaryToken",
    "TokenFailure",
    "TokenKind",
    "TokenPair",
    "TokenVerification",
]
