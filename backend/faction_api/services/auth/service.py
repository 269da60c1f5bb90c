# faction_api/services/auth/service.py
from __future__ import annotations

import re
import secrets

from faction_api.core.config import AuthSettings
from faction_api.services._shared.base import BaseService
from faction_api.services._shared.errors import (
    DuplicateUsername,
    HashFormatError,
    InvalidCredentials,
    InvalidRefreshToken,
    ValidationError,
)
from faction_api.services._shared.ports import DocumentStore
from faction_api.services.auth.dto import (
    AccessTokenOut,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
)
from faction_api.services.auth.hasher import PasswordHasher
from faction_api.services.auth.ledger import RefreshTokenLedger
from faction_api.services.auth.tokens import TokenIssuer
from faction_api.services.credentials import UserRecord, UserRepository

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,32}$")


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Session states: anonymous, authenticated (access token live), expired
    access with a live refresh token, then anonymous again once both lapse.

    Login failures are uniform: unknown usernames, wrong passwords, blocked
    accounts and unreadable stored hashes all raise :class:`InvalidCredentials`
    after one bcrypt verification.

    Refresh tokens are not rotated. A refresh mints a new access token and
    leaves the presented refresh token valid until it expires or is revoked
    through :meth:`logout`.

    Registration checks for an existing username before inserting; the check
    is not atomic, so concurrent registrations of one name can both succeed.
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: AuthSettings,
        *,
        hasher: PasswordHasher | None = None,
        issuer: TokenIssuer | None = None,
        ledger: RefreshTokenLedger | None = None,
    ) -> None:
        """
        :param store: Document store holding users and ledger records.
        :param settings: Immutable auth settings built at startup.
        :param hasher: Override the bcrypt hasher.
        :param issuer: Override the token issuer.
        :param ledger: Override the refresh-token ledger.
        """
        super().__init__()
        self.settings = settings
        self.users = UserRepository(store)
        self.hasher = hasher or PasswordHasher(settings.bcrypt_rounds)
        self.tokens = issuer or TokenIssuer(settings)
        self.ledger = ledger or RefreshTokenLedger(store)
        # Verified against when the username is unknown
        self._dummy_hash = self.hasher.hash(secrets.token_urlsafe(16))

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> str:
        """
        Create a user with a hashed password and ``blocked=False``.

        :returns: The new user id.
        :raises ValidationError: Bad username, password or faction.
        :raises DuplicateUsername: The username is taken.
        """
        if not USERNAME_PATTERN.match(dto.username):
            raise ValidationError(
                "Username must be 3-32 characters of letters, digits, '_' or '-'"
            )
        if not dto.password:
            raise ValidationError("Password is required")
        if not dto.faction_id or not dto.faction_id.strip():
            raise ValidationError("factionId is required")

        if self.users.get_by_username(dto.username) is not None:
            self.log.warning(
                "Duplicate registration",
                extra={"event": "auth.register.duplicate", "username": dto.username},
            )
            raise DuplicateUsername(dto.username)

        user = UserRecord(
            id=self.users.new_id(),
            username=dto.username,
            password_hash=self.hasher.hash(dto.password),
            faction_id=dto.faction_id,
            rank=dto.rank,
            blocked=False,
            created_at=self.now_ms(),
        )
        self.users.add(user)
        self.log.info(
            "User registered", extra={"event": "auth.register", "username": dto.username}
        )
        return user.id

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Verify credentials and issue a fresh token pair.

        :raises InvalidCredentials: For any failed attempt.
        """
        user = self.users.get_by_username(dto.username)
        digest = user.password_hash if user is not None else self._dummy_hash
        try:
            password_ok = self.hasher.verify(dto.password, digest)
        except HashFormatError:
            self.log.error(
                "Stored password hash is malformed",
                extra={"event": "auth.login.bad_hash", "username": dto.username},
            )
            password_ok = False

        if user is None or user.blocked or not password_ok:
            self.log.warning(
                "Login failed", extra={"event": "auth.login.failed", "username": dto.username}
            )
            raise InvalidCredentials()

        access = self.tokens.issue_access_token(self._claims(user))
        refresh = self.tokens.issue_refresh_token()
        self.ledger.store(user.username, refresh, self.settings.refresh_ttl)
        self.log.info("Login succeeded", extra={"event": "auth.login", "username": user.username})
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Refresh (no rotation)
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AccessTokenOut:
        """
        Mint a new access token for a live refresh token.

        Expired ledger records are swept first. No access token is required.

        :raises InvalidRefreshToken: No live record matches, or the account
            is gone or blocked.
        """
        # Names that could never be registered are not valid ledger paths either
        valid = USERNAME_PATTERN.match(dto.username) is not None and self.ledger.validate(
            dto.username, dto.refresh_token
        )
        user = self.users.get_by_username(dto.username) if valid else None
        if user is None or user.blocked:
            self.log.warning(
                "Refresh rejected",
                extra={"event": "auth.refresh.failed", "username": dto.username},
            )
            raise InvalidRefreshToken()

        access = self.tokens.issue_access_token(self._claims(user))
        self.log.info(
            "Access token refreshed", extra={"event": "auth.refresh", "username": user.username}
        )
        return AccessTokenOut(access_token=access)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> bool:
        """
        Revoke one refresh token, or every session of the user.

        Unknown tokens are ignored so logout stays idempotent.

        :returns: Whether anything was revoked.
        :raises ValidationError: Neither a token nor ``all_sessions`` given.
        """
        if dto.all_sessions:
            self.ledger.revoke_all(dto.username)
            self.log.info(
                "All sessions revoked", extra={"event": "auth.logout.all", "username": dto.username}
            )
            return True
        if not dto.refresh_token:
            raise ValidationError("refreshToken or allSessions is required")

        revoked = self.ledger.revoke(dto.username, dto.refresh_token)
        self.log.info("Logout", extra={"event": "auth.logout", "username": dto.username})
        return revoked

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _claims(user: UserRecord) -> dict[str, object]:
        return {"sub": user.username, "fid": user.faction_id, "rank": user.rank}
