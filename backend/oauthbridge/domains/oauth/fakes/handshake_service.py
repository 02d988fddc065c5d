"""Fake OAuth1HandshakeService for testing."""

from typing import Dict, List, Optional, Tuple, Union

from oauthbridge.domains.oauth.types import (
    AccessCredentials,
    AuthorizationRedirect,
    HandshakeResult,
    NormalizedProfile,
    OAuth1ProviderConfig,
    OAuthErrorResult,
    ProfileInfo,
)


class FakeOAuth1HandshakeService:
    """In-memory fake for OAuth1HandshakeServiceProtocol."""

    def __init__(self, provider: OAuth1ProviderConfig) -> None:
        self._provider = provider
        self._calls: List[Tuple[str, ...]] = []
        self._start_result: Union[AuthorizationRedirect, OAuthErrorResult] = (
            AuthorizationRedirect(
                url=f"{provider.authorize_url}?oauth_token=fake_token", token="fake_token"
            )
        )
        self._complete_result: HandshakeResult = NormalizedProfile(
            provider=provider.short_name,
            uid="42",
            info=ProfileInfo(nickname="alice", urls={}),
            credentials=AccessCredentials(token="tok", secret="sec"),
            raw={"id": "42", "screen_name": "alice"},
        )
        self.last_complete_kwargs: Dict[str, Optional[str]] = {}

    @property
    def provider(self) -> OAuth1ProviderConfig:
        return self._provider

    def seed_start_result(self, result: Union[AuthorizationRedirect, OAuthErrorResult]) -> None:
        self._start_result = result

    def seed_complete_result(self, result: HandshakeResult) -> None:
        self._complete_result = result

    async def start(self, flow_id: str) -> Union[AuthorizationRedirect, OAuthErrorResult]:
        self._calls.append(("start", flow_id))
        return self._start_result

    async def complete(
        self,
        flow_id: str,
        *,
        oauth_token: Optional[str],
        oauth_verifier: Optional[str],
        params: Optional[Dict[str, str]] = None,
    ) -> HandshakeResult:
        self._calls.append(("complete", flow_id))
        self.last_complete_kwargs = {
            "flow_id": flow_id,
            "oauth_token": oauth_token,
            "oauth_verifier": oauth_verifier,
        }
        return self._complete_result

    # Test helpers

    @property
    def calls(self) -> List[Tuple[str, ...]]:
        return list(self._calls)
