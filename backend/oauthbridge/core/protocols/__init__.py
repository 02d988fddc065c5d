"""Core protocols for dependency injection.

Domain-specific protocols (request execution, handshake service) live in
their domains/ directories. This module keeps cross-cutting infrastructure
protocols only.
"""

from oauthbridge.core.protocols.token_store import TokenStore

__all__ = [
    "TokenStore",
]
