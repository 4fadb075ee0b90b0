"""
Session Module - Black Box Interface

Purpose: Token-gated access to a caller's own identity record
Interface: status(), modify(), delete()
Hidden: Token decoding, re-validation against live storage

Every call re-checks the token's claims against the store, so a token
stops working as soon as its name or credential no longer match.
"""

from .session import SessionOperations

__all__ = ["SessionOperations"]
