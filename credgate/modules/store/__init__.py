"""
Store Module - Black Box Interface

Purpose: Persist identity records keyed by username
Interface: find_by_name(), find_by_name_and_credential(), insert(), update(),
           delete_by_name_and_credential()
Hidden: Key layout, serialization, credential hashing, transactions

Replaceable with any backend that provides per-call atomicity.
"""

from .hashing import CredentialHasher
from .interfaces import CredentialStore, IdentityRecord
from .memory import InMemoryCredentialStore
from .redis_store import RedisCredentialStore

__all__ = [
    "CredentialHasher",
    "CredentialStore",
    "IdentityRecord",
    "InMemoryCredentialStore",
    "RedisCredentialStore",
]
