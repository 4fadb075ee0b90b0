"""
Authentication Module - Black Box Interface

Purpose: Register identities and exchange credentials for tokens
Interface: register(), authenticate(), AuthFactory.build()
Hidden: Credential storage, hashing, token format

The factory is the composition root for the whole service stack.
"""

from ..outcome import Outcome
from .service import AuthenticationService
from .factory import AuthFactory, Services

__all__ = ["AuthFactory", "AuthenticationService", "Outcome", "Services"]
