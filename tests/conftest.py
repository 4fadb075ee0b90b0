"""
Shared pytest fixtures for Credgate tests.

This module provides common fixtures including:
- A static configuration provider (no environment access)
- In-memory store, token codec and both services
- Redis mocks for store tests
"""

import os
import sys
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from credgate.config.provider import APIConfig, StoreConfig, TokenConfig
from credgate.modules.auth import AuthenticationService
from credgate.modules.session import SessionOperations
from credgate.modules.store import CredentialHasher, InMemoryCredentialStore
from credgate.modules.tokens import TokenCodec

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"


# =============================================================================
# Configuration
# =============================================================================


class StaticConfigProvider:
    """ConfigProvider returning fixed values."""

    def __init__(
        self,
        token: Optional[TokenConfig] = None,
        store: Optional[StoreConfig] = None,
        api: Optional[APIConfig] = None,
    ):
        self.token = token or TokenConfig(secret=TEST_SECRET)
        self.store = store or StoreConfig(backend="memory", hash_rounds=4)
        self.api = api or APIConfig(log_level="WARNING")

    def get_token_config(self) -> TokenConfig:
        return self.token

    def get_store_config(self) -> StoreConfig:
        return self.store

    def get_api_config(self) -> APIConfig:
        return self.api


@pytest.fixture
def config_provider():
    """Configuration for an in-memory service stack."""
    return StaticConfigProvider()


# =============================================================================
# Service Stack
# =============================================================================


@pytest.fixture
def hasher():
    """Fast hasher - the minimum bcrypt cost keeps tests quick."""
    return CredentialHasher(rounds=4)


@pytest.fixture
def store(hasher):
    """Empty in-memory credential store."""
    return InMemoryCredentialStore(hasher)


@pytest.fixture
def codec():
    """Token codec signing with the test secret."""
    return TokenCodec(TokenConfig(secret=TEST_SECRET))


@pytest.fixture
def auth_service(store, codec):
    """Authentication service over the shared store."""
    return AuthenticationService(store, codec)


@pytest.fixture
def session_ops(store, codec):
    """Session operations over the shared store."""
    return SessionOperations(store, codec)


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================


@pytest.fixture
def mock_pipeline():
    """
    Mock of a redis.asyncio transactional pipeline.

    Commands issued while watching (watch/get/exists) are awaited; commands
    buffered after multi() are not.
    """
    pipe = MagicMock()
    pipe.watch = AsyncMock()
    pipe.get = AsyncMock(return_value=None)
    pipe.exists = AsyncMock(return_value=0)
    pipe.execute = AsyncMock(return_value=[True])
    pipe.__aenter__.return_value = pipe
    pipe.__aexit__.return_value = False
    return pipe


@pytest.fixture
def mock_redis(mock_pipeline):
    """Create a mock async Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.pipeline = MagicMock(return_value=mock_pipeline)
    return redis


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring infrastructure"
    )
