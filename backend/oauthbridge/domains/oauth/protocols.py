"""Protocols for OAuth1 domain dependencies."""

from typing import Dict, Optional, Protocol, Union

from oauthbridge.core.logging import ContextualLogger
from oauthbridge.domains.oauth.types import (
    AuthorizationRedirect,
    ConsumerCredentials,
    HandshakeResult,
    OAuth1ProviderConfig,
    OAuthErrorResult,
    RawResponse,
    SignedRequestSpec,
    TokenPair,
)


class RequestExecutorProtocol(Protocol):
    """Signed HTTP call capability."""

    async def execute(
        self,
        spec: SignedRequestSpec,
        credentials: ConsumerCredentials,
        token_pair: Optional[TokenPair] = None,
        *,
        log: Optional[ContextualLogger] = None,
    ) -> RawResponse:
        """Sign and send one request. Raises OAuthTransportError on transport failure."""
        ...


class OAuth1HandshakeServiceProtocol(Protocol):
    """Runs OAuth1 flow attempts for one configured provider."""

    @property
    def provider(self) -> OAuth1ProviderConfig:
        """Provider this service talks to."""
        ...

    async def start(self, flow_id: str) -> Union[AuthorizationRedirect, OAuthErrorResult]:
        """Obtain a request token, store it, and return the authorization redirect."""
        ...

    async def complete(
        self,
        flow_id: str,
        *,
        oauth_token: Optional[str],
        oauth_verifier: Optional[str],
        params: Optional[Dict[str, str]] = None,
    ) -> HandshakeResult:
        """Finish the flow from the provider's callback parameters."""
        ...
