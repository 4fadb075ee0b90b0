"""
Password hashing for stored credentials.

Digests are bcrypt hashes with the salt and cost embedded, so changing the
configured rounds does not invalidate existing records.

Both operations are CPU-bound; stores run them off the event loop with
``asyncio.to_thread``.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of its input
MAX_CREDENTIAL_BYTES = 72


class CredentialHasher:
    """Hash and verify credentials with bcrypt."""

    def __init__(self, rounds: int = 12):
        """
        Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (4-31)
        """
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds

    @staticmethod
    def accepts(credential: str) -> bool:
        """Whether ``credential`` can be hashed without truncation."""
        return 0 < len(credential.encode("utf-8")) <= MAX_CREDENTIAL_BYTES

    def hash(self, credential: str) -> str:
        if not self.accepts(credential):
            raise ValueError(f"Credential must be 1-{MAX_CREDENTIAL_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(credential.encode("utf-8"), salt).decode("utf-8")

    def verify(self, credential: str, stored: str) -> bool:
        """Check ``credential`` against a stored bcrypt hash."""
        if not credential or not stored:
            return False
        try:
            return bcrypt.checkpw(credential.encode("utf-8"), stored.encode("utf-8"))
        except (AttributeError, ValueError) as e:
            logger.warning(f"Credential verification failed: {e}")
            return False
