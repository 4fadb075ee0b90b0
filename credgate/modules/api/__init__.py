"""
API Module - Black Box Interface

Purpose: HTTP request/response contracts
Interface: Pydantic request and response models
Hidden: Field aliases accepted from older clients

The API layer only orchestrates - it contains no business logic.
All logic is delegated to the auth and session modules.
"""

from .models import (
    AuthRequest,
    DeleteRequest,
    ErrorResponse,
    MessageResponse,
    ModifyRequest,
    RegisterRequest,
    StatusResponse,
    TokenResponse,
)

__all__ = [
    "AuthRequest",
    "DeleteRequest",
    "ErrorResponse",
    "MessageResponse",
    "ModifyRequest",
    "RegisterRequest",
    "StatusResponse",
    "TokenResponse",
]
