from __future__ import annotations

from .repository import (
    REFRESH_TOKENS_COLLECTION,
    USERS_COLLECTION,
    RefreshTokenRepository,
    UserRecord,
    UserRepository,
)

__all__ = [
    "REFRESH_TOKENS_COLLECTION",
    "USERS_COLLECTION",
    "RefreshTokenRepository",
    "UserRecord",
    "UserRepository",
]
