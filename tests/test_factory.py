"""
Tests for the service composition root.
"""

import pytest

from credgate.config.provider import StoreConfig
from credgate.modules.auth import AuthFactory, AuthenticationService
from credgate.modules.session import SessionOperations
from credgate.modules.store import InMemoryCredentialStore, RedisCredentialStore

from conftest import StaticConfigProvider


def test_build_memory_stack(config_provider):
    """The memory backend needs no Redis client."""
    services = AuthFactory.build(config_provider)

    assert isinstance(services.auth, AuthenticationService)
    assert isinstance(services.session, SessionOperations)


def test_build_store_memory(config_provider):
    store = AuthFactory.build_store(config_provider)

    assert isinstance(store, InMemoryCredentialStore)
    assert store.hasher.rounds == 4


def test_build_store_redis(mock_redis):
    """The redis backend wraps the given client with the configured prefix."""
    provider = StaticConfigProvider(
        store=StoreConfig(backend="redis", key_prefix="test:", hash_rounds=5)
    )

    store = AuthFactory.build_store(provider, mock_redis)

    assert isinstance(store, RedisCredentialStore)
    assert store.redis is mock_redis
    assert store.key_prefix == "test:"
    assert store.hasher.rounds == 5


def test_build_store_redis_requires_client():
    provider = StaticConfigProvider(store=StoreConfig(backend="redis"))

    with pytest.raises(ValueError, match="Redis client is required"):
        AuthFactory.build_store(provider)


@pytest.mark.asyncio
async def test_services_share_store(config_provider):
    """Identities registered through auth are visible to session operations."""
    services = AuthFactory.build(config_provider)
    await services.auth.register("alice", "pw1", "Engineer")
    token = (await services.auth.authenticate("alice", "pw1")).token

    outcome = await services.session.status(token)

    assert outcome.ok is True
    assert outcome.profile_field == "Engineer"
