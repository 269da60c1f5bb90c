# faction_api/services/auth/hasher.py
from __future__ import annotations

import re

import bcrypt

from faction_api.services._shared.errors import HashFormatError, ValidationError

# bcrypt only consumes the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72

_BCRYPT_DIGEST = re.compile(r"^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$")


class PasswordHasher:
    """
    Salted, deliberately slow password hashing (bcrypt).

    The digest embeds its own salt and cost, so :meth:`verify` keeps working
    for hashes produced under an older work factor.

    :param rounds: bcrypt cost (log2 of the iteration count).
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash ``plaintext`` with a fresh salt.

        :raises ValidationError: If the password exceeds 72 UTF-8 bytes.
        """
        raw = plaintext.encode("utf-8")
        if len(raw) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self.rounds)).decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check ``plaintext`` against a stored digest in constant time.

        :returns: ``False`` on mismatch.
        :raises HashFormatError: If ``digest`` is not a bcrypt hash.
        """
        if not isinstance(digest, str) or not _BCRYPT_DIGEST.match(digest):
            raise HashFormatError()
        raw = plaintext.encode("utf-8")
        if len(raw) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(raw, digest.encode("ascii"))
        except ValueError as exc:
            raise HashFormatError() from exc
