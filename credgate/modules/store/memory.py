import asyncio
from dataclasses import replace
from typing import Dict, Optional

from ...errors import DuplicateKey
from .hashing import CredentialHasher
from .interfaces import IdentityRecord


class InMemoryCredentialStore:
    """
    Process-local credential store.

    Same contract as the Redis store. The lock is only held for dict access;
    hashing runs in a worker thread outside it. Records are copied in and
    out so callers never share state with the store.
    """

    def __init__(self, hasher: CredentialHasher):
        self.hasher = hasher
        self._records: Dict[str, IdentityRecord] = {}
        self._lock = asyncio.Lock()

    def _copy(self, record: IdentityRecord) -> IdentityRecord:
        return replace(record, loaded_name=record.name)

    async def find_by_name(self, name: str) -> Optional[IdentityRecord]:
        async with self._lock:
            record = self._records.get(name)
            return self._copy(record) if record else None

    async def find_by_name_and_credential(
        self, name: str, credential: str
    ) -> Optional[IdentityRecord]:
        record = await self.find_by_name(name)
        if record is None:
            return None
        if not await asyncio.to_thread(self.hasher.verify, credential, record.credential):
            return None
        return record

    async def insert(self, record: IdentityRecord) -> IdentityRecord:
        digest = await asyncio.to_thread(self.hasher.hash, record.credential)
        stored = replace(record, credential=digest, loaded_name=record.name)
        async with self._lock:
            if record.name in self._records:
                raise DuplicateKey(f"Identity already exists: {record.name}")
            self._records[record.name] = stored
        return self._copy(stored)

    async def update(self, record: IdentityRecord) -> bool:
        old_name = record.loaded_name or record.name
        async with self._lock:
            if old_name not in self._records:
                return False
            if record.name != old_name:
                if record.name in self._records:
                    raise DuplicateKey(f"Identity already exists: {record.name}")
                del self._records[old_name]
            self._records[record.name] = self._copy(record)
        record.loaded_name = record.name
        return True

    async def delete_by_name_and_credential(
        self, name: str, credential: str
    ) -> Optional[IdentityRecord]:
        async with self._lock:
            current = self._records.get(name)
        if current is None:
            return None
        if not await asyncio.to_thread(self.hasher.verify, credential, current.credential):
            return None

        async with self._lock:
            # Replaced or removed while verifying; every write stores a new object
            if self._records.get(name) is not current:
                return None
            return self._records.pop(name)
