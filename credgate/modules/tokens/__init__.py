"""
Tokens Module - Black Box Interface

Purpose: Sign claims into opaque bearer tokens and verify them
Interface: TokenCodec.encode(), TokenCodec.decode(), ClaimsPayload
Hidden: Token format, signing algorithm, claim validation

Tokens are never checked against storage here; that is the session
module's job.
"""

from .codec import ClaimsPayload, TokenCodec

__all__ = ["ClaimsPayload", "TokenCodec"]
