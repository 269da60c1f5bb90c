"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Refresh tokens must carry at least this much randomness
MIN_REFRESH_TOKEN_BYTES: Final[int] = 40

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET_KEY: str | None
        Signing secret for access tokens. Required: the factory refuses to
        build an application without it.
    JWT_ALGORITHM: str
        HMAC algorithm used to sign access tokens.
    JWT_ISSUER: str | None
        Optional ``iss`` claim stamped on and required from access tokens.
    ACCESS_TOKEN_TTL_MINUTES: int
        Access token lifetime.
    REFRESH_TOKEN_TTL_DAYS: int
        Refresh token lifetime, enforced server-side by the ledger.
    REFRESH_TOKEN_BYTES: int
        Random bytes drawn for each refresh token.
    BCRYPT_ROUNDS: int
        Work factor handed to bcrypt.
    REDIS_URL: str | None
        Document store backend. An in-memory store is used when unset.
    STORE_NAMESPACE: str
        Key prefix isolating this deployment inside Redis.
    API_KEY: str | None
        Optional client key required in ``X-API-KEY`` on every API call.
    AUTH_RATE_LIMIT: str
        Flask-Limiter expression applied to login and refresh.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_ENV = os.getenv(ENV_VAR, "development")

    # Security
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER")
    ACCESS_TOKEN_TTL_MINUTES = env_int("ACCESS_TOKEN_TTL_MINUTES", 30)
    REFRESH_TOKEN_TTL_DAYS = env_int("REFRESH_TOKEN_TTL_DAYS", 30)
    REFRESH_TOKEN_BYTES = env_int("REFRESH_TOKEN_BYTES", 48)
    BCRYPT_ROUNDS = env_int("BCRYPT_ROUNDS", 10)
    API_KEY = os.getenv("API_KEY")

    # Document store
    REDIS_URL = os.getenv("REDIS_URL")
    STORE_NAMESPACE = os.getenv("STORE_NAMESPACE", "faction")

    # Rate limiting (Flask-Limiter)
    AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "10 per minute")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Proxy headers (one trusted hop)
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and a fixed signing secret.
    - Always uses the in-memory document store.
    - Lowers the bcrypt cost so the suite stays fast.
    """

    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv("TEST_JWT_SECRET_KEY", "testing-secret-key-with-enough-length")
    BCRYPT_ROUNDS = 4
    REDIS_URL = None
    API_KEY = None
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


class MissingSecretError(RuntimeError):
    """Raised at startup when no signing secret is configured."""


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable authentication settings, built once per application.

    :param secret_key: HMAC secret for access tokens.
    :param algorithm: JWT signing algorithm.
    :param issuer: Optional ``iss`` claim.
    :param access_ttl: Access token lifetime.
    :param refresh_ttl: Refresh token lifetime.
    :param refresh_token_bytes: Randomness per refresh token.
    :param bcrypt_rounds: bcrypt work factor.
    """

    secret_key: str
    algorithm: str = "HS256"
    issuer: str | None = None
    access_ttl: timedelta = timedelta(minutes=30)
    refresh_ttl: timedelta = timedelta(days=30)
    refresh_token_bytes: int = 48
    bcrypt_rounds: int = 10

    def __post_init__(self) -> None:
        if not self.secret_key or not self.secret_key.strip():
            raise MissingSecretError("JWT_SECRET_KEY must be set; refusing to start.")
        if self.refresh_token_bytes < MIN_REFRESH_TOKEN_BYTES:
            raise ValueError(
                f"REFRESH_TOKEN_BYTES must be at least {MIN_REFRESH_TOKEN_BYTES}."
            )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> AuthSettings:
        """Build settings from a Flask config mapping."""
        return cls(
            secret_key=config.get("JWT_SECRET_KEY") or "",
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER") or None,
            access_ttl=timedelta(minutes=int(config.get("ACCESS_TOKEN_TTL_MINUTES", 30))),
            refresh_ttl=timedelta(days=int(config.get("REFRESH_TOKEN_TTL_DAYS", 30))),
            refresh_token_bytes=int(config.get("REFRESH_TOKEN_BYTES", 48)),
            bcrypt_rounds=int(config.get("BCRYPT_ROUNDS", 10)),
        )
