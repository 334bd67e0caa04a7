"""Credential hashing with bcrypt.

bcrypt embeds the cost factor and salt in its output, so verification needs
only the stored hash. bcrypt.checkpw compares in constant time.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

# 2^12 = 4096 iterations
BCRYPT_ROUNDS = 12


class PasswordHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Raises:
            ValueError: password exceeds bcrypt's 72-byte input limit
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Check a password against a stored hash.

        Never raises. A missing or malformed hash, or an input bcrypt rejects,
        yields False.
        """
        if not password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as e:
            logger.warning("Password verification failed", extra={"error": str(e)})
            return False
