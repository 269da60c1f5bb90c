# faction_api/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Case-sensitive login name.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param username: Requested login name.
    :param password: Raw password (hashed before persistence).
    :param faction_id: Owning faction.
    :param rank: Initial rank inside the faction.
    """

    username: str
    password: str
    faction_id: str
    rank: int = 0


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for access-token renewal.

    :param username: Owner of the refresh token.
    :type username: str
    :param refresh_token: Raw opaque refresh token.
    :type refresh_token: str
    """

    username: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param username: Authenticated caller.
    :param refresh_token: Token to revoke; ignored when ``all_sessions`` is set.
    :param all_sessions: If True, revoke every ledger record of the user.
    """

    username: str
    refresh_token: str | None = None
    all_sessions: bool = False


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Raw refresh token, shown exactly once.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AccessTokenOut:
    access_token: str


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Verified access-token claims attached to a request.

    :param username: ``sub`` claim.
    :param faction_id: ``fid`` claim.
    :param rank: ``rank`` claim.
    :param issued_at: ``iat`` (epoch seconds).
    :param expires_at: ``exp`` (epoch seconds).
    :param jti: Unique token id.
    """

    username: str
    faction_id: str
    rank: int
    issued_at: int
    expires_at: int
    jti: str | None = None
