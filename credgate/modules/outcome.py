"""Standardized operation outcomes shared by the auth and session modules."""

from dataclasses import dataclass
from typing import Optional

from ..errors import CredgateError, ErrorKind

# Invalid and stale tokens share one message so a caller cannot tell
# whether a username exists.
FAILURE_MESSAGES = {
    ErrorKind.USERNAME_TAKEN: "Username already exists!",
    ErrorKind.INVALID_CREDENTIALS: "Invalid username or password",
    ErrorKind.INVALID_TOKEN: "Invalid or expired token.",
    ErrorKind.STALE_OR_UNKNOWN_TOKEN: "Invalid or expired token.",
    ErrorKind.CONFIRMATION_REQUIRED: "You must confirm user deletion.",
    ErrorKind.INVALID_INPUT: "Username and password are required.",
    ErrorKind.STORE_UNAVAILABLE: "Service temporarily unavailable.",
}


@dataclass
class Outcome:
    """Standardized operation result."""
    ok: bool
    message: str
    token: Optional[str] = None
    name: Optional[str] = None
    profile_field: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def failure(cls, error: CredgateError) -> "Outcome":
        """Build the failed outcome for an exception."""
        return cls(ok=False, message=FAILURE_MESSAGES[error.kind], error=error.kind)
