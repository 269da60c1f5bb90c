"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. The translation to HTTP responses (RFC 7807) is handled by
``faction_api/core/errors.py`` via :func:`faction_api.services._shared.base.translate_exception`.

Taxonomy
--------
- :class:`ValidationError`: user-correctable input problems (400).
- :class:`AuthenticationError`: bad credentials or tokens (401).
- :class:`ConflictError`: duplicate unique keys (400).
- :class:`DependencyError`: the document store failed (500).
- :class:`HashFormatError`: a stored password digest is structurally invalid.
"""

from __future__ import annotations


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    :param message: Client-safe description.
    """

    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Input
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Raised when request data is missing or malformed."""

    default_message = "Invalid request"


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """Raised when the caller cannot be authenticated."""

    default_message = "Authentication failed"


class InvalidCredentials(AuthenticationError):
    """Unknown username, wrong password or blocked account (indistinguishable)."""

    default_message = "Invalid username or password"


class InvalidRefreshToken(AuthenticationError):
    """No live ledger record matches the presented refresh token."""

    default_message = "Invalid or expired refresh token"


class MissingAuthHeader(AuthenticationError):
    default_message = "Missing Authorization header"


class MalformedAuthHeader(AuthenticationError):
    default_message = "Authorization header must be '<scheme> <token>'"


class InvalidToken(AuthenticationError):
    """Access token failed verification."""

    default_message = "Invalid access token"


class InvalidSignature(InvalidToken):
    default_message = "Access token signature mismatch"


class TokenExpired(InvalidToken):
    default_message = "Access token expired"


class MalformedToken(InvalidToken):
    default_message = "Access token is malformed"


# --------------------------------------------------------------------------- #
# Conflicts / dependencies
# --------------------------------------------------------------------------- #


class ConflictError(ServiceError):
    """Raised when a unique key is already taken."""

    default_message = "Conflict"


class DuplicateUsername(ConflictError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already exists")


class DependencyError(ServiceError):
    """
    Raised when the underlying document store call fails.

    The public message stays opaque; raise it ``from`` the store exception so
    ``__cause__`` is available for logs and non-production diagnostics.
    """

    default_message = "Storage backend unavailable"

    def __init__(self, message: str | None = None, *, operation: str | None = None) -> None:
        self.operation = operation
        super().__init__(message)


class HashFormatError(ServiceError):
    """Raised when a stored password digest cannot be parsed."""

    default_message = "Stored password hash is malformed"
