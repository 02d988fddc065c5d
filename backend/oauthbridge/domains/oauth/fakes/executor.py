"""Fake request executor for testing."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from oauthbridge.core.exceptions import OAuthTransportError
from oauthbridge.domains.oauth.types import (
    ConsumerCredentials,
    RawResponse,
    SignedRequestSpec,
    TokenPair,
)


@dataclass
class RecordedCall:
    """One call seen by the fake executor."""

    method: str
    url: str
    params: Dict[str, str]
    token_pair: Optional[TokenPair]


class FakeRequestExecutor:
    """In-memory fake for RequestExecutorProtocol.

    Responses are seeded per URL. An unseeded URL answers 404.

    Usage:
        executor = FakeRequestExecutor()
        executor.seed_form(REQUEST_TOKEN_URL, "oauth_token=abc&oauth_token_secret=xyz")
        executor.seed_json(VERIFY_URL, {"id": "42"})
        executor.seed_transport_error(ACCESS_TOKEN_URL)
    """

    def __init__(self) -> None:
        self._responses: Dict[str, Union[RawResponse, OAuthTransportError]] = {}
        self.calls: List[RecordedCall] = []

    def seed(self, url: str, response: RawResponse) -> None:
        self._responses[url] = response

    def seed_form(self, url: str, body: str, status_code: int = 200) -> None:
        self.seed(url, RawResponse(status_code=status_code, body=body.encode(), is_json=False))

    def seed_json(self, url: str, value: Any, status_code: int = 200) -> None:
        body = json.dumps(value).encode()
        self.seed(url, RawResponse(status_code=status_code, body=body, is_json=True))

    def seed_transport_error(self, url: str, message: str = "ConnectTimeout") -> None:
        self._responses[url] = OAuthTransportError(url, message)

    async def execute(
        self,
        spec: SignedRequestSpec,
        credentials: ConsumerCredentials,
        token_pair: Optional[TokenPair] = None,
        *,
        log=None,
    ) -> RawResponse:
        self.calls.append(
            RecordedCall(
                method=spec.method.upper(),
                url=spec.url,
                params=dict(spec.params),
                token_pair=token_pair,
            )
        )
        outcome = self._responses.get(spec.url)
        if isinstance(outcome, OAuthTransportError):
            raise outcome
        if outcome is None:
            return RawResponse(status_code=404, body=b"Not Found", is_json=False)
        return outcome

    # Test helpers

    def calls_to(self, url: str) -> List[RecordedCall]:
        return [call for call in self.calls if call.url == url]
