"""
Authentication service: registration and login.

This module provides:
- Standardized outcomes for every operation
- Registration that enforces username uniqueness
- Login that exchanges a username/password pair for a token
"""

import logging
from typing import Optional

from ...errors import (
    CredgateError,
    DuplicateKey,
    InvalidCredentials,
    InvalidInput,
    UsernameTaken,
)
from ..outcome import Outcome
from ..store import CredentialHasher, CredentialStore, IdentityRecord
from ..tokens import ClaimsPayload, TokenCodec

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Registration and login.

    Neither operation raises for expected failures; every error is turned
    into a failed Outcome at this boundary.
    """

    def __init__(self, store: CredentialStore, codec: TokenCodec):
        """
        Initialize with injected collaborators.

        Args:
            store: Credential store
            codec: Token codec
        """
        self._store = store
        self._codec = codec

    async def register(
        self, username: str, password: str, profile_field: Optional[str] = None
    ) -> Outcome:
        """
        Register a new identity. No token is issued.

        Args:
            username: Unique username
            password: Credential to store
            profile_field: Optional descriptive attribute

        Returns:
            Outcome; fails with USERNAME_TAKEN if the name is in use

        Logic:
        1. Reject empty username or password, or a password too long to hash
        2. Look up the name; fail if present
        3. Insert the record (a racing insert still fails as USERNAME_TAKEN)
        """
        try:
            if not username or not password:
                raise InvalidInput("Username and password are required")
            if not CredentialHasher.accepts(password):
                raise InvalidInput("Password is longer than the hasher accepts")

            if await self._store.find_by_name(username) is not None:
                raise UsernameTaken(f"Username already exists: {username}")

            try:
                await self._store.insert(
                    IdentityRecord(name=username, credential=password, profile_field=profile_field)
                )
            except DuplicateKey as e:
                raise UsernameTaken(str(e)) from e
        except CredgateError as e:
            logger.info(f"Registration rejected for {username!r}: {e.kind.value}")
            return Outcome.failure(e)

        logger.info(f"Registered identity {username!r}")
        return Outcome(ok=True, message="Registration successful! You can now log in.")

    async def authenticate(self, username: str, password: str) -> Outcome:
        """
        Exchange a username/password pair for a token.

        Args:
            username: Username
            password: Credential to verify

        Returns:
            Outcome carrying the token; fails with INVALID_CREDENTIALS
        """
        try:
            record = None
            if username and password:
                record = await self._store.find_by_name_and_credential(username, password)
            if record is None:
                raise InvalidCredentials("Invalid username or password")
        except CredgateError as e:
            logger.info(f"Authentication failed for {username!r}: {e.kind.value}")
            return Outcome.failure(e)

        token = self._codec.encode(ClaimsPayload(name=record.name, credential=password))
        logger.info(f"Issued token for {username!r}")
        return Outcome(ok=True, message="Authentication successful", token=token, name=record.name)
