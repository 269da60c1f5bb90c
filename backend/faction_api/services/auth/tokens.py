# faction_api/services/auth/tokens.py
from __future__ import annotations

import secrets
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import jwt

from faction_api.core.config import AuthSettings
from faction_api.services._shared.errors import (
    InvalidSignature,
    MalformedToken,
    TokenExpired,
)
from faction_api.services.auth.dto import Identity

ACCESS_TOKEN_TYPE = "access"


class TokenIssuer:
    """
    Mints and verifies access tokens; mints opaque refresh tokens.

    Access tokens are HMAC-signed JWTs verified statelessly. Refresh tokens
    carry no structure at all; only their digest is kept server-side.

    :param settings: Signing secret, algorithm and lifetimes.
    """

    def __init__(self, settings: AuthSettings) -> None:
        self.settings = settings

    # ------------------------------------------------------------------ #
    # Access tokens
    # ------------------------------------------------------------------ #

    def issue_access_token(self, claims: Mapping[str, Any]) -> str:
        """
        Sign ``claims`` with issued-at and expiry stamps.

        :param claims: Identity claims (``sub``, ``fid``, ``rank``).
        :returns: Encoded JWT.
        """
        now = datetime.now(UTC)
        payload: dict[str, Any] = dict(claims)
        payload.update(
            {
                "iat": int(now.timestamp()),
                "exp": int((now + self.settings.access_ttl).timestamp()),
                "jti": uuid.uuid4().hex,
                "type": ACCESS_TOKEN_TYPE,
            }
        )
        if self.settings.issuer:
            payload["iss"] = self.settings.issuer
        return jwt.encode(payload, self.settings.secret_key, algorithm=self.settings.algorithm)

    def verify_access_token(self, token: str) -> Identity:
        """
        Verify signature and expiry and return the embedded identity.

        :raises InvalidSignature: Signature does not match the secret.
        :raises TokenExpired: The current time is strictly past ``exp``.
        :raises MalformedToken: The token cannot be parsed or lacks claims.
        """
        try:
            decoded = jwt.decode(
                token,
                self.settings.secret_key,
                algorithms=[self.settings.algorithm],
                issuer=self.settings.issuer,
                # PyJWT treats exp == now as expired; the token is valid through exp
                options={"require": ["exp", "iat", "sub"], "verify_exp": False},
            )
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature() from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken() from exc

        if decoded.get("type") != ACCESS_TOKEN_TYPE:
            raise MalformedToken("Wrong token type: access token required")
        try:
            identity = Identity(
                username=str(decoded["sub"]),
                faction_id=str(decoded.get("fid", "")),
                rank=int(decoded.get("rank", 0)),
                issued_at=int(decoded["iat"]),
                expires_at=int(decoded["exp"]),
                jti=decoded.get("jti"),
            )
        except (TypeError, ValueError) as exc:
            raise MalformedToken() from exc

        if int(datetime.now(UTC).timestamp()) > identity.expires_at:
            raise TokenExpired()
        return identity

    # ------------------------------------------------------------------ #
    # Refresh tokens
    # ------------------------------------------------------------------ #

    def issue_refresh_token(self) -> str:
        """Return a URL-safe encoding of ``refresh_token_bytes`` random bytes."""
        return secrets.token_urlsafe(self.settings.refresh_token_bytes)
