"""Dependency Injection Container.

The container is a simple immutable dataclass that holds protocol implementations.
It has no construction logic; that belongs in the factory.

Design principles:
- Container serves, factory builds
- Fail fast: all construction at startup
- Type safety: fields are protocol types
- Testing: construct directly with fakes
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping

from oauthbridge.core.exceptions import UnknownProviderException
from oauthbridge.core.protocols import TokenStore
from oauthbridge.domains.oauth.protocols import (
    OAuth1HandshakeServiceProtocol,
    RequestExecutorProtocol,
)


@dataclass(frozen=True)
class Container:
    """Immutable container holding all protocol implementations.

    Usage:
        # Production: use the global container built by factory
        from oauthbridge.core.container import container
        service = container.handshake_service("twitter")

        # Testing: construct directly with fakes
        test_container = Container(
            token_store=FakeTokenStore(),
            request_executor=FakeRequestExecutor(),
            handshake_services={"twitter": FakeOAuth1HandshakeService(provider)},
        )

        # FastAPI endpoints: resolve through the dependency
        from oauthbridge.api.deps import get_handshake_service
        async def my_endpoint(service = Depends(get_handshake_service)):
            ...
    """

    token_store: TokenStore
    request_executor: RequestExecutorProtocol
    handshake_services: Mapping[str, OAuth1HandshakeServiceProtocol]

    def handshake_service(self, provider: str) -> OAuth1HandshakeServiceProtocol:
        """Look up the handshake service for a provider short name.

        Raises:
            UnknownProviderException: If the provider is not configured
        """
        try:
            return self.handshake_services[provider]
        except KeyError:
            raise UnknownProviderException(provider) from None

    def replace(self, **changes: Any) -> "Container":
        """Create a new container with some dependencies replaced.

        Useful for testing when you want to override just one or two
        dependencies from a base container.
        """
        return replace(self, **changes)
