"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the service stack based on configuration
- Wires dependencies together
- Returns only the service facades (hiding implementation)
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ...config.provider import ConfigProvider
from ..session import SessionOperations
from ..store import (
    CredentialHasher,
    CredentialStore,
    InMemoryCredentialStore,
    RedisCredentialStore,
)
from ..tokens import TokenCodec
from .service import AuthenticationService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """The public services exposed to the transport layer."""
    auth: AuthenticationService
    session: SessionOperations


class AuthFactory:
    """
    Factory for building the service stack.

    This is the composition root that:
    - Creates the hasher, store and codec
    - Wires them together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build_store(config_provider: ConfigProvider, redis_client: Optional[Any] = None) -> CredentialStore:
        """
        Build the configured credential store.

        Args:
            config_provider: Configuration provider
            redis_client: Async Redis client, required for the redis backend

        Returns:
            CredentialStore implementation
        """
        store_config = config_provider.get_store_config()
        hasher = CredentialHasher(rounds=store_config.hash_rounds)

        if store_config.backend == "memory":
            logger.warning("Using in-memory credential store - identities are lost on restart")
            return InMemoryCredentialStore(hasher)

        if redis_client is None:
            raise ValueError("A Redis client is required for the redis store backend")
        logger.info(f"Using Redis credential store with key prefix {store_config.key_prefix!r}")
        return RedisCredentialStore(redis_client, hasher, key_prefix=store_config.key_prefix)

    @staticmethod
    def build(config_provider: ConfigProvider, redis_client: Optional[Any] = None) -> Services:
        """
        Build the complete service stack.

        Args:
            config_provider: Configuration provider
            redis_client: Async Redis client (unused by the memory backend)

        Returns:
            Services bundle (hides all implementation details)
        """
        store = AuthFactory.build_store(config_provider, redis_client)
        codec = TokenCodec(config_provider.get_token_config())

        return Services(
            auth=AuthenticationService(store, codec),
            session=SessionOperations(store, codec),
        )
