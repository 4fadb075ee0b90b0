"""Credential store interfaces following Black Box Design principles."""
import json
from dataclasses import dataclass, field
from typing import Optional, Protocol


@dataclass
class IdentityRecord:
    """
    A registered identity.

    ``credential`` holds the plaintext password only on a record that has
    not been inserted yet; records returned by a store carry the stored
    digest instead.
    """
    name: str
    credential: str
    profile_field: Optional[str] = None
    # Name the record was loaded under, so a renamed record can be moved.
    loaded_name: Optional[str] = field(default=None, repr=False, compare=False)

    def to_json(self) -> str:
        return json.dumps(
            {
                "name": self.name,
                "credential": self.credential,
                "profile_field": self.profile_field,
            }
        )

    @classmethod
    def from_json(cls, data) -> "IdentityRecord":
        doc = json.loads(data)
        return cls(
            name=doc["name"],
            credential=doc["credential"],
            profile_field=doc.get("profile_field"),
            loaded_name=doc["name"],
        )


class CredentialStore(Protocol):
    """Protocol for credential stores. Every call is atomic on its own."""

    async def find_by_name(self, name: str) -> Optional[IdentityRecord]:
        """Return the record registered under ``name``, if any."""
        ...

    async def find_by_name_and_credential(
        self, name: str, credential: str
    ) -> Optional[IdentityRecord]:
        """Return the record only if ``credential`` verifies against it."""
        ...

    async def insert(self, record: IdentityRecord) -> IdentityRecord:
        """
        Store a new record.

        Raises:
            DuplicateKey: If ``record.name`` is already present
        """
        ...

    async def update(self, record: IdentityRecord) -> bool:
        """
        Persist a mutated record, moving it if its name changed.

        Returns:
            False if the record no longer exists

        Raises:
            DuplicateKey: If renamed to a name held by another record
        """
        ...

    async def delete_by_name_and_credential(
        self, name: str, credential: str
    ) -> Optional[IdentityRecord]:
        """Atomically find and remove a record, returning what was removed."""
        ...
