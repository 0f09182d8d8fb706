"""
auth/passwords.py -- bcrypt password hashing.

bcrypt is used directly rather than through passlib: passlib's wrap-bug
detection hashes a password longer than 72 bytes, which bcrypt 4.x+ rejects.

bcrypt only reads the first 72 bytes of its input. Newer releases raise on
longer input instead of truncating, so both hash() and verify() cut the
encoded password at 72 bytes themselves. Hash and verify therefore agree for
every input length.

The cost factor is a constructor argument (Settings.bcrypt_rounds, default 10)
so tests can run at the bcrypt minimum of 4.

Layer rule: no imports from api/, core/, or items/.
"""

from __future__ import annotations

import bcrypt

_BCRYPT_MAX_BYTES = 72

DEFAULT_ROUNDS = 10


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted, cost-tunable one-way password hashing."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of the given plaintext password."""
        if not plain:
            raise ValueError("Password is empty.")
        return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if the plaintext password matches the bcrypt hash.

        Never raises: empty input or a malformed hash is a mismatch.
        bcrypt.checkpw compares in constant time.
        """
        if not plain or not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False
