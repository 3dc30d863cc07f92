"""
Password hashing with bcrypt.

Every hash gets a fresh random salt; the cost factor is embedded in the
hash string, so raising it later does not invalidate existing hashes.
"""

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only consumes the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:MAX_PASSWORD_BYTES]


class PasswordHasher:
    """One-way salted password hashing."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, plain: str) -> str:
        """Hash a plaintext password."""
        if not plain:
            raise ValueError("Password must not be empty")
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(plain), salt).decode("ascii")

    def verify(self, plain: str, hashed: str) -> bool:
        """Check a plaintext password against a stored hash."""
        if not plain or not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("ascii"))
        except ValueError:
            # Not a bcrypt hash
            return False
