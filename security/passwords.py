"""Salted one-way password hashing."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher:
    """Hash and verify passwords using werkzeug's self-describing digests.

    Digests look like ``method$salt$hash``, so raising the cost of ``method``
    later does not invalidate hashes that were stored earlier.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(
            plaintext, method=self.method, salt_length=self.salt_length
        )

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """Return True if ``plaintext`` matches ``digest``; malformed digests never raise."""

        if not digest or not isinstance(digest, str) or plaintext is None:
            return False
        try:
            return check_password_hash(digest, plaintext)
        except (TypeError, ValueError):
            return False
