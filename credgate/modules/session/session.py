import logging
from typing import Any, Optional, Tuple

from ...errors import (
    ConfirmationRequired,
    CredgateError,
    DuplicateKey,
    StaleOrUnknownToken,
    UsernameTaken,
)
from ..outcome import Outcome
from ..store import CredentialStore, IdentityRecord
from ..tokens import ClaimsPayload, TokenCodec

logger = logging.getLogger(__name__)


class SessionOperations:
    def __init__(self, store: CredentialStore, codec: TokenCodec):
        """
        Initialize session operations.

        Args:
            store: Credential store
            codec: Token codec
        """
        self._store = store
        self._codec = codec

    async def _resolve(self, token: Any) -> Tuple[ClaimsPayload, IdentityRecord]:
        """
        Decode a token and find the live record it is bound to.

        Raises:
            InvalidToken: If the token does not decode
            StaleOrUnknownToken: If no record matches the claims
        """
        claims = self._codec.decode(token)
        record = await self._store.find_by_name_and_credential(claims.name, claims.credential)
        if record is None:
            raise StaleOrUnknownToken("No identity matches token claims")
        return claims, record

    async def status(self, token: str) -> Outcome:
        """
        Read the identity a token belongs to.

        Args:
            token: Token from authenticate() or modify()

        Returns:
            Outcome with name, profile_field and the same token
        """
        try:
            _, record = await self._resolve(token)
        except CredgateError as e:
            logger.info(f"Status rejected: {e.kind.value}")
            return Outcome.failure(e)

        return Outcome(
            ok=True,
            message="Token validated successfully",
            token=token,
            name=record.name,
            profile_field=record.profile_field,
        )

    async def modify(
        self,
        token: str,
        new_name: Optional[str] = None,
        new_profile_field: Optional[str] = None,
    ) -> Outcome:
        """
        Update name and/or profile field, then re-issue a token.

        Args:
            token: Current token
            new_name: Replacement name; empty or None leaves it unchanged
            new_profile_field: Replacement profile field; empty or None
                leaves it unchanged

        Returns:
            Outcome with a new token. If the name changed the old token is
            stale from now on.

        Logic:
        1. Resolve the record from the token
        2. Apply provided overrides in memory
        3. Persist (fails with USERNAME_TAKEN if the new name is in use)
        4. Sign claims for the possibly renamed record
        """
        try:
            claims, record = await self._resolve(token)

            if new_name:
                record.name = new_name
            if new_profile_field:
                record.profile_field = new_profile_field

            try:
                persisted = await self._store.update(record)
            except DuplicateKey as e:
                raise UsernameTaken(str(e)) from e
            if not persisted:
                # Deleted or changed between the lookup and the update
                raise StaleOrUnknownToken("Identity changed during update")
        except CredgateError as e:
            logger.info(f"Modify rejected: {e.kind.value}")
            return Outcome.failure(e)

        if record.name != claims.name:
            logger.info(f"Renamed identity {claims.name!r} to {record.name!r}")

        return Outcome(
            ok=True,
            message="Profile updated successfully.",
            token=self._codec.encode(ClaimsPayload(name=record.name, credential=claims.credential)),
            name=record.name,
            profile_field=record.profile_field,
        )

    async def delete(self, token: str, confirm: Any) -> Outcome:
        """
        Delete the identity a token belongs to.

        Args:
            token: Current token
            confirm: Must be truthy; checked before the token is looked at

        Returns:
            Outcome without a token
        """
        try:
            if not confirm:
                raise ConfirmationRequired("Deletion was not confirmed")

            claims = self._codec.decode(token)
            removed = await self._store.delete_by_name_and_credential(
                claims.name, claims.credential
            )
            if removed is None:
                raise StaleOrUnknownToken("No identity matches token claims")
        except CredgateError as e:
            logger.info(f"Delete rejected: {e.kind.value}")
            return Outcome.failure(e)

        logger.info(f"Deleted identity {removed.name!r}")
        return Outcome(ok=True, message="User deleted successfully.")
