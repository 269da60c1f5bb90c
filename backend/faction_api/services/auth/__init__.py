from __future__ import annotations

from .dto import (
    AccessTokenOut,
    Identity,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)
from .hasher import PasswordHasher
from .ledger import RefreshTokenLedger
from .service import AuthService
from .tokens import TokenIssuer

__all__ = [
    "AccessTokenOut",
    "AuthService",
    "Identity",
    "LoginIn",
    "LogoutIn",
    "PasswordHasher",
    "RefreshIn",
    "RefreshTokenLedger",
    "RegisterIn",
    "TokenIssuer",
    "TokenPairOut",
]
