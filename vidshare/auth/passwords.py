# =============================================================================
# Password Hashing
# =============================================================================
#
# PBKDF2-SHA256 with a random per-hash salt. Digests are stored as
# "salt:hash" strings on the account document.
#
# =============================================================================

from __future__ import annotations

import hashlib
import logging
import secrets

from vidshare.errors import HashingError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Hash and verify passwords with an explicit cost factor."""

    def __init__(self, iterations: int = 100_000):
        self.iterations = iterations

    def _derive(self, password: str, salt: str) -> str:
        return hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=self.iterations,
        ).hex()

    def hash(self, password: str) -> str:
        """
        Hash a password.

        Returns: salt:hash format string

        Raises:
            HashingError: salt generation or key derivation failed
        """
        try:
            salt = secrets.token_hex(32)
            return f"{salt}:{self._derive(password, salt)}"
        except (OSError, ValueError) as e:
            logger.error(f"Password hashing failed: {e}")
            raise HashingError() from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash. A mismatch is just False."""
        try:
            salt, stored_hash = password_hash.split(':')
            return secrets.compare_digest(self._derive(password, salt), stored_hash)
        except (ValueError, AttributeError):
            return False
