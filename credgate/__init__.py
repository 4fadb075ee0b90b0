"""
Credgate - Credential and Token Authentication Service

Registers identities, verifies username/password pairs, issues signed
bearer tokens and lets token holders read, update or delete their own
identity record.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- store: Credential storage abstraction (Redis, in-memory)
- tokens: Token signing and verification
- auth: Registration and login
- session: Token-gated status, modify and delete
- api: REST API interface
"""

__version__ = "1.0.0"
