"""Dependencies that are used in the API endpoints."""

from fastapi import Depends

from oauthbridge.core import container as container_mod
from oauthbridge.core.container import Container
from oauthbridge.domains.oauth.protocols import OAuth1HandshakeServiceProtocol


def get_container() -> Container:
    """Get the DI container. Initialized at startup."""
    c = container_mod.container
    if c is None:
        raise RuntimeError("Container not initialized. Call initialize_container() first.")
    return c


def get_handshake_service(
    provider: str,
    c: Container = Depends(get_container),
) -> OAuth1HandshakeServiceProtocol:
    """Resolve the handshake service for the ``{provider}`` path parameter.

    Raises:
    ------
        UnknownProviderException: If the provider is not configured.

    """
    return c.handshake_service(provider)
