"""
Error taxonomy shared by all Credgate modules.

Stores and the token codec raise these exceptions; the auth and session
services catch them and report a failed ``Outcome`` instead.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kind of failure reported by a service operation."""

    USERNAME_TAKEN = "username_taken"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    STALE_OR_UNKNOWN_TOKEN = "stale_or_unknown_token"
    CONFIRMATION_REQUIRED = "confirmation_required"
    INVALID_INPUT = "invalid_input"
    STORE_UNAVAILABLE = "store_unavailable"


class CredgateError(Exception):
    """Base exception for Credgate operations."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT


class DuplicateKey(CredgateError):
    """Raised by a store when a record name is already present."""

    kind = ErrorKind.USERNAME_TAKEN


class UsernameTaken(CredgateError):
    """Raised when registering (or renaming to) a name that is in use."""

    kind = ErrorKind.USERNAME_TAKEN


class InvalidCredentials(CredgateError):
    """Raised when no record matches a username/password pair."""

    kind = ErrorKind.INVALID_CREDENTIALS


class InvalidToken(CredgateError):
    """Raised when a token is malformed or its signature does not verify."""

    kind = ErrorKind.INVALID_TOKEN


class StaleOrUnknownToken(CredgateError):
    """Raised when a correctly signed token matches no live record."""

    kind = ErrorKind.STALE_OR_UNKNOWN_TOKEN


class ConfirmationRequired(CredgateError):
    """Raised when a delete is requested without confirmation."""

    kind = ErrorKind.CONFIRMATION_REQUIRED


class StoreUnavailable(CredgateError):
    """Raised when the backing store cannot be reached."""

    kind = ErrorKind.STORE_UNAVAILABLE


class InvalidInput(CredgateError):
    """Raised when a required field is missing or empty."""

    kind = ErrorKind.INVALID_INPUT
