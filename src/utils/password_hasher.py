"""Password hashing utilities.

Two schemes are supported behind the same hash/verify contract:

- ``sha256``: base64 of SHA-256 over ``password + salt`` with one
  application-wide salt. This matches the digests already present in the
  user store, but it is a fast digest with a shared salt and is weak
  against offline attacks.
- ``bcrypt``: per-password random salt with a configurable work factor.

``verify_password`` recognizes both formats, so switching the scheme only
affects newly written digests.
"""

import base64
import hashlib
import hmac
import logging

import bcrypt

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SCHEME_SHA256 = "sha256"
SCHEME_BCRYPT = "bcrypt"
SUPPORTED_SCHEMES = (SCHEME_SHA256, SCHEME_BCRYPT)

# bcrypt ignores everything past 72 bytes
BCRYPT_MAX_BYTES = 72
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class PasswordHasher:
    """Turns plaintext passwords into stored digests and verifies them."""

    def __init__(self, salt: str, scheme: str = SCHEME_SHA256, rounds: int = 12):
        """Initialize PasswordHasher.

        Args:
            salt: Application-wide salt used by the sha256 scheme.
            scheme: Scheme used for new digests ('sha256' or 'bcrypt').
            rounds: bcrypt work factor.

        Raises:
            ConfigurationError: If the scheme is unknown.
        """
        if scheme not in SUPPORTED_SCHEMES:
            raise ConfigurationError(
                f"Unknown password hash scheme: {scheme}. "
                f"Must be one of {', '.join(SUPPORTED_SCHEMES)}."
            )
        self.salt = salt
        self.scheme = scheme
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        """Hash a password with the configured scheme.

        Args:
            password: Plain text password.

        Returns:
            Digest string to store.
        """
        if self.scheme == SCHEME_BCRYPT:
            return self._bcrypt_hash(password)
        return self._sha256_hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a stored digest of either scheme.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Stored digest.

        Returns:
            True if password matches, False otherwise.
        """
        if not plain_password or not hashed_password:
            return False

        if hashed_password.startswith(BCRYPT_PREFIXES):
            try:
                return bcrypt.checkpw(
                    self._bcrypt_bytes(plain_password), hashed_password.encode("utf-8")
                )
            except ValueError as e:
                logger.warning("Malformed bcrypt digest: %s", e)
                return False

        return hmac.compare_digest(self._sha256_hash(plain_password), hashed_password)

    def _sha256_hash(self, password: str) -> str:
        digest = hashlib.sha256((password + self.salt).encode("utf-8")).digest()
        return base64.b64encode(digest).decode("ascii")

    def _bcrypt_hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._bcrypt_bytes(password), salt).decode("utf-8")

    @staticmethod
    def _bcrypt_bytes(password: str) -> bytes:
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_BYTES:
            password_bytes = password_bytes[:BCRYPT_MAX_BYTES]
        return password_bytes
