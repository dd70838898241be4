"""Password hashing using bcrypt.

Uses the ``bcrypt`` library directly (>=4.0); passlib is unmaintained and
incompatible with bcrypt >=4. The cost factor comes from ``BCRYPT_ROUNDS``.
"""

import bcrypt

from config.settings import settings


class BcryptHasher:
    def __init__(self, rounds: int | None = None) -> None:
        self._rounds = rounds or settings.BCRYPT_ROUNDS

    def hash(self, plain: str) -> str:
        """Hash a plain-text password. Returns a utf-8 hash string."""
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False
