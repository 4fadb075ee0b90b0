"""
Credgate API data models.

Bodies arrive as JSON or as HTML form posts. Field names follow the camelCase
used by existing clients (``profileField``, ``newName``); the older
``jobTitle`` spellings are accepted as well.

Required fields default to empty so that the services, not request parsing,
decide how a missing value fails (400 for registration, 401 for tokens).
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

# Request Models (API Input)


class RegisterRequest(BaseModel):
    """Request to register a new identity."""

    username: str = Field("", description="Unique username")
    password: str = Field("", description="Password")
    profile_field: Optional[str] = Field(
        None,
        description="Optional descriptive attribute",
        validation_alias=AliasChoices("profileField", "jobTitle", "profile_field"),
    )


class AuthRequest(BaseModel):
    """Request to exchange credentials for a token."""

    username: str = Field("", description="Username")
    password: str = Field("", description="Password")


class ModifyRequest(BaseModel):
    """Request to change the token holder's name and/or profile field."""

    token: Optional[str] = Field(None, description="Current token")
    new_name: Optional[str] = Field(
        None,
        description="New username; omitted or empty leaves it unchanged",
        validation_alias=AliasChoices("newName", "new_name"),
    )
    new_profile_field: Optional[str] = Field(
        None,
        description="New profile field; omitted or empty leaves it unchanged",
        validation_alias=AliasChoices("newProfileField", "newJobTitle", "new_profile_field"),
    )


class DeleteRequest(BaseModel):
    """Request to delete the token holder's identity."""

    # Not required: an unconfirmed delete never looks at the token.
    token: Optional[str] = Field(None, description="Current token")
    confirm: bool = Field(False, description="Must be true to delete; accepts checkbox \"on\"")


# Response Models (API Output)


class MessageResponse(BaseModel):
    """Confirmation without a token."""

    message: str


class TokenResponse(BaseModel):
    """Successful authentication."""

    message: str
    token: str


class StatusResponse(BaseModel):
    """Identity resolved from a token."""

    message: str
    name: str
    profile_field: Optional[str] = Field(None, serialization_alias="profileField")
    token: str


# Error Models


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
