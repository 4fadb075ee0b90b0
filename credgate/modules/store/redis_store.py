import asyncio
import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, Optional

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.exceptions import WatchError

from ...errors import DuplicateKey, StoreUnavailable
from .hashing import CredentialHasher
from .interfaces import IdentityRecord

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (RedisConnectionError, RedisTimeoutError) as e:
        logger.error(f"Redis unavailable during {operation}: {e}")
        raise StoreUnavailable(f"Connection failed: {e}") from e


class RedisCredentialStore:
    def __init__(self, redis_client, hasher: CredentialHasher, key_prefix: str = "credgate:"):
        """
        Initialize Redis credential store.

        Args:
            redis_client: Async Redis client
            hasher: Hasher used to store and verify credentials
            key_prefix: Prefix for every key this store writes

        Each identity is one JSON string at ``<prefix>identity:<name>``.
        """
        self.redis = redis_client
        self.hasher = hasher
        self.key_prefix = key_prefix

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}identity:{name}"

    async def find_by_name(self, name: str) -> Optional[IdentityRecord]:
        """
        Get a record by username.

        Args:
            name: Username

        Returns:
            IdentityRecord or None if not found
        """
        with _store_errors("find"):
            data = await self.redis.get(self._key(name))
        if not data:
            return None
        return IdentityRecord.from_json(data)

    async def find_by_name_and_credential(
        self, name: str, credential: str
    ) -> Optional[IdentityRecord]:
        """
        Get a record by username, only if the credential verifies.

        Args:
            name: Username
            credential: Plaintext credential to verify

        Returns:
            IdentityRecord or None if absent or the credential does not match
        """
        record = await self.find_by_name(name)
        if record is None:
            return None
        if not await asyncio.to_thread(self.hasher.verify, credential, record.credential):
            return None
        return record

    async def insert(self, record: IdentityRecord) -> IdentityRecord:
        """
        Store a new record, hashing its credential.

        Args:
            record: Record carrying the plaintext credential

        Returns:
            The stored record (credential replaced by its digest)

        Raises:
            DuplicateKey: If the name is already registered

        Logic:
        1. Hash the credential
        2. SET NX so an existing name is never overwritten
        """
        digest = await asyncio.to_thread(self.hasher.hash, record.credential)
        stored = replace(record, credential=digest, loaded_name=record.name)
        with _store_errors("insert"):
            created = await self.redis.set(self._key(record.name), stored.to_json(), nx=True)
        if not created:
            raise DuplicateKey(f"Identity already exists: {record.name}")
        return stored

    async def update(self, record: IdentityRecord) -> bool:
        """
        Persist a mutated record.

        Args:
            record: Record previously returned by this store

        Returns:
            True if persisted, False if the record no longer exists or was
            changed concurrently

        Raises:
            DuplicateKey: If renamed to a name held by another record

        Logic:
        1. WATCH the current key (and the new key on rename)
        2. Check the record still exists and the new name is free
        3. MULTI: delete the old key, write the new one; EXEC
        """
        old_key = self._key(record.loaded_name or record.name)
        new_key = self._key(record.name)
        renamed = old_key != new_key

        with _store_errors("update"):
            async with self.redis.pipeline(transaction=True) as pipe:
                try:
                    if renamed:
                        await pipe.watch(old_key, new_key)
                    else:
                        await pipe.watch(old_key)

                    if not await pipe.exists(old_key):
                        return False
                    if renamed and await pipe.exists(new_key):
                        raise DuplicateKey(f"Identity already exists: {record.name}")

                    pipe.multi()
                    if renamed:
                        pipe.delete(old_key)
                    pipe.set(new_key, record.to_json())
                    await pipe.execute()
                except WatchError:
                    logger.info(f"Concurrent change while updating identity {record.name}")
                    return False

        record.loaded_name = record.name
        return True

    async def delete_by_name_and_credential(
        self, name: str, credential: str
    ) -> Optional[IdentityRecord]:
        """
        Atomically verify and remove a record.

        Args:
            name: Username
            credential: Plaintext credential to verify

        Returns:
            The removed record, or None if absent, not matching, or changed
            concurrently (the delete is not retried)
        """
        key = self._key(name)

        with _store_errors("delete"):
            async with self.redis.pipeline(transaction=True) as pipe:
                try:
                    await pipe.watch(key)
                    data = await pipe.get(key)
                    if not data:
                        return None
                    record = IdentityRecord.from_json(data)
                    if not await asyncio.to_thread(
                        self.hasher.verify, credential, record.credential
                    ):
                        return None

                    pipe.multi()
                    pipe.delete(key)
                    await pipe.execute()
                except WatchError:
                    logger.info(f"Concurrent change while deleting identity {name}")
                    return None

        return record
