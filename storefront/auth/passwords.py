"""
Password hashing.

bcrypt with a fixed cost factor. bcrypt only reads the first 72 bytes of
its input, so the plaintext is first reduced to a base64 SHA-256 digest
(44 bytes); passwords of any length hash, and two passwords never match
just because they share a prefix.

Hash failures are logged and raised as PasswordHashError so that a record
is never stored without a hash.
"""

from __future__ import annotations

import base64
import hashlib
import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 10


class PasswordHashError(Exception):
    """The password could not be hashed."""
    pass


def _prehash(plaintext: str) -> bytes:
    # Base64 keeps NUL bytes out of bcrypt's input
    return base64.b64encode(hashlib.sha256(plaintext.encode("utf-8")).digest())


class PasswordHasher:
    """
    One-way adaptive hash for stored passwords.

    Usage:
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        stored = hasher.hash("secret123")
        hasher.compare("secret123", stored)  # True
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password. Raises PasswordHashError on failure."""
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_prehash(plaintext), salt).decode("utf-8")
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Password hashing failed: {e}")
            raise PasswordHashError(str(e)) from e

    def compare(self, plaintext: str, hashed: str) -> bool:
        """True only if plaintext matches the stored hash."""
        if not plaintext or not hashed:
            return False
        try:
            return bcrypt.checkpw(_prehash(plaintext), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False
