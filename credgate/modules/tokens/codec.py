"""
JWT token codec.

This module follows Black Box Design principles:
- Accepts configuration via dependency injection
- No direct environment variable access
- Callers never parse the token string themselves
"""

import logging
from typing import Any

import jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from ...config.provider import HMAC_ALGORITHMS, TokenConfig
from ...errors import InvalidToken

logger = logging.getLogger(__name__)


class ClaimsPayload(BaseModel):
    """Claims embedded in a token: the identity and its credential."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    name: str
    credential: str


class TokenCodec:
    """
    Encodes and decodes signed tokens.

    Tokens carry no ``iat`` or ``exp`` claim, so encoding the same claims
    always yields the same token.
    """

    def __init__(self, config: TokenConfig):
        """
        Initialize codec with injected config.

        Args:
            config: Token configuration holding the signing secret
        """
        if not config.secret:
            raise ValueError("A signing secret is required")
        if config.algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {config.algorithm}")
        self._secret = config.secret
        self._algorithm = config.algorithm

    def encode(self, claims: ClaimsPayload) -> str:
        """
        Sign claims into a token string.

        Args:
            claims: Claims to embed

        Returns:
            URL-safe token string
        """
        return jwt.encode(claims.model_dump(), self._secret, algorithm=self._algorithm)

    def decode(self, token: Any) -> ClaimsPayload:
        """
        Verify a token and return its claims.

        Args:
            token: Token string as received from a client

        Returns:
            Validated ClaimsPayload

        Raises:
            InvalidToken: If the token is missing, malformed, wrongly signed,
                or carries missing or unexpected claims
        """
        if not isinstance(token, str) or not token:
            raise InvalidToken("Token is missing")

        try:
            data = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token failed verification: {e}")
            raise InvalidToken("Not a valid token") from e

        try:
            return ClaimsPayload.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Token claims rejected: {e.error_count()} error(s)")
            raise InvalidToken("Token claims are malformed") from e
