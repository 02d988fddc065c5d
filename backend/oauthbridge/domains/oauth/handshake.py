"""OAuth1 three-legged handshake.

One ``OAuth1Handshake`` drives one flow attempt:

1. start: obtain a request token, keep it in the token store, redirect the user
2. callback: take the stored request token back, check it against the one the
   provider sent, and exchange the verifier for an access token
3. verify credentials with the access token and normalize the profile

Every failure is terminal for the attempt and comes back as an
``OAuthErrorResult``. Nothing is retried.

Reference: RFC 5849 - The OAuth 1.0 Protocol
"""

import secrets
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlencode

from oauthbridge.core.exceptions import (
    InvalidHandshakeTransition,
    OAuthTransportError,
    ResponseDecodeError,
)
from oauthbridge.core.logging import logger
from oauthbridge.core.protocols import TokenStore
from oauthbridge.domains.oauth.profile import ProfileNormalizer
from oauthbridge.domains.oauth.protocols import RequestExecutorProtocol
from oauthbridge.domains.oauth.types import (
    AuthorizationRedirect,
    ConsumerCredentials,
    HandshakeResult,
    HandshakeState,
    NormalizedProfile,
    OAuth1ProviderConfig,
    OAuthErrorCode,
    OAuthErrorResult,
    RawResponse,
    SignedRequestSpec,
    TokenPair,
)


def _extract_token_pair(response: RawResponse) -> Optional[TokenPair]:
    """Token pair from a 200 response, or None if the response is unusable."""
    if not response.ok:
        return None
    try:
        payload = response.payload()
    except ResponseDecodeError:
        return None

    token = payload.get("oauth_token")
    token_secret = payload.get("oauth_token_secret")
    if not token or not token_secret:
        return None
    return TokenPair(token=str(token), token_secret=str(token_secret))


def _tokens_match(incoming: str, stored: str) -> bool:
    return secrets.compare_digest(incoming.encode("utf-8"), stored.encode("utf-8"))


class OAuth1Handshake:
    """State machine for a single OAuth1 flow attempt.

    States: idle -> awaiting_callback -> completed, or failed from any step.
    The start request and the callback request each build their own instance
    for the same ``flow_id``; what ties them together is the token store.
    """

    def __init__(
        self,
        *,
        flow_id: str,
        provider: OAuth1ProviderConfig,
        credentials: ConsumerCredentials,
        executor: RequestExecutorProtocol,
        token_store: TokenStore,
        normalizer: ProfileNormalizer,
        state: HandshakeState = HandshakeState.IDLE,
    ) -> None:
        """Bind the attempt to its flow id and collaborators."""
        if not flow_id:
            raise ValueError("flow_id is required")

        self.flow_id = flow_id
        self.provider = provider
        self.state = state
        self.error: Optional[OAuthErrorResult] = None
        self.profile: Optional[NormalizedProfile] = None

        self._credentials = credentials
        self._executor = executor
        self._token_store = token_store
        self._normalizer = normalizer
        self._log = logger.with_context(provider=provider.short_name, flow=flow_id[:8])

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _require(self, expected: HandshakeState, operation: str) -> None:
        if self.state != expected:
            raise InvalidHandshakeTransition(operation, self.state.value)

    def _fail(self, code: OAuthErrorCode, message: str, raw: Any = None) -> OAuthErrorResult:
        self.state = HandshakeState.FAILED
        self.error = OAuthErrorResult(code=code, message=message, raw=raw)
        self._log.warning(f"OAuth1 flow failed: {code.value} - {message}")
        return self.error

    # ------------------------------------------------------------------
    # Step 1: request token + authorization redirect
    # ------------------------------------------------------------------

    def build_authorization_url(self, oauth_token: str) -> str:
        """Build the authorization URL for user consent (step 2 of OAuth1 flow).

        Args:
            oauth_token: Request token from step 1

        Returns:
            Authorization URL carrying ``oauth_token`` plus configured hints
            such as ``force_login`` and ``screen_name``
        """
        params = {"oauth_token": oauth_token, **self.provider.authorize_params}
        separator = "&" if "?" in self.provider.authorize_url else "?"
        return f"{self.provider.authorize_url}{separator}{urlencode(params)}"

    async def start(self) -> Union[AuthorizationRedirect, OAuthErrorResult]:
        """Obtain a request token and return where to send the user.

        Returns:
            AuthorizationRedirect on success, OAuthErrorResult with
            ``token_request_failed`` or ``network_error`` otherwise

        Raises:
            InvalidHandshakeTransition: If the attempt is not idle
        """
        self._require(HandshakeState.IDLE, "start")

        spec = SignedRequestSpec(
            method="POST",
            url=self.provider.request_token_url,
            params={"oauth_callback": self.provider.callback_url},
        )
        self._log.info(f"Requesting OAuth1 request token from {spec.url}")

        try:
            response = await self._executor.execute(spec, self._credentials, None, log=self._log)
        except OAuthTransportError as e:
            return self._fail(
                OAuthErrorCode.NETWORK_ERROR,
                "Could not reach request_token_url",
                {"url": e.url, "error": e.message},
            )

        request_pair = _extract_token_pair(response)
        if request_pair is None:
            return self._fail(
                OAuthErrorCode.TOKEN_REQUEST_FAILED,
                f"Could not obtain token from request_token_url (HTTP {response.status_code})",
                response.text,
            )

        await self._token_store.put(self.flow_id, request_pair)
        self.state = HandshakeState.AWAITING_CALLBACK
        self._log.info("OAuth1 request token obtained, awaiting callback")

        return AuthorizationRedirect(
            url=self.build_authorization_url(request_pair.token),
            token=request_pair.token,
        )

    # ------------------------------------------------------------------
    # Step 2: callback + access token
    # ------------------------------------------------------------------

    async def callback(
        self,
        oauth_token: Optional[str],
        oauth_verifier: Optional[str],
        params: Optional[Dict[str, str]] = None,
    ) -> HandshakeResult:
        """Complete the flow from the provider's callback.

        The stored request token is consumed before anything else, so it is
        gone whatever the outcome.

        Args:
            oauth_token: Token the provider echoed back
            oauth_verifier: Verifier issued after user authorization
            params: Full callback query, used as context for denial errors

        Returns:
            NormalizedProfile on success, OAuthErrorResult otherwise

        Raises:
            InvalidHandshakeTransition: If the attempt is not awaiting a callback
        """
        self._require(HandshakeState.AWAITING_CALLBACK, "complete")

        incoming: Dict[str, str] = dict(params or {})
        if oauth_token is not None:
            incoming.setdefault("oauth_token", oauth_token)
        if oauth_verifier is not None:
            incoming.setdefault("oauth_verifier", oauth_verifier)

        request_pair = await self._token_store.take(self.flow_id)
        if request_pair is None:
            return self._fail(
                OAuthErrorCode.ACCESS_DENIED,
                "No pending authorization for this flow (session missing, expired, or reused).",
                incoming,
            )

        if not oauth_token or not _tokens_match(oauth_token, request_pair.token):
            return self._fail(OAuthErrorCode.ACCESS_DENIED, "User denied access.", incoming)

        if not oauth_verifier:
            return self._fail(
                OAuthErrorCode.ACCESS_DENIED, "Callback is missing oauth_verifier.", incoming
            )

        spec = SignedRequestSpec(
            method="POST",
            url=self.provider.access_token_url,
            params={"oauth_verifier": oauth_verifier},
        )
        self._log.info(f"Exchanging OAuth1 verifier for access token at {spec.url}")

        try:
            response = await self._executor.execute(
                spec, self._credentials, request_pair, log=self._log
            )
        except OAuthTransportError as e:
            return self._fail(
                OAuthErrorCode.NETWORK_ERROR,
                "Could not reach access_token_url",
                {"url": e.url, "error": e.message},
            )

        access_pair = _extract_token_pair(response)
        if access_pair is None:
            return self._fail(
                OAuthErrorCode.OAUTH_VERIFIER_ERROR,
                f"Oauth_verifier error (HTTP {response.status_code}).",
                response.text,
            )

        return await self._complete(access_pair)

    # ------------------------------------------------------------------
    # Step 3: verify credentials + profile
    # ------------------------------------------------------------------

    async def _fetch_credentials(
        self, token_pair: TokenPair
    ) -> Tuple[RawResponse, Optional[Dict[str, Any]]]:
        spec = SignedRequestSpec(
            method="GET",
            url=self.provider.verify_credentials_url,
            params=dict(self.provider.verify_credentials_params),
        )
        response = await self._executor.execute(spec, self._credentials, token_pair, log=self._log)
        if not response.ok:
            return response, None
        try:
            return response, response.payload().as_dict()
        except ResponseDecodeError as e:
            self._log.warning(f"Undecodable verify_credentials response: {e.message}")
            return response, None

    async def verify_credentials(self, token_pair: TokenPair) -> Optional[Dict[str, Any]]:
        """Fetch the authenticated user's raw profile.

        Args:
            token_pair: Access token pair to sign with

        Returns:
            The decoded payload, or None on a non-200 status or undecodable body

        Raises:
            OAuthTransportError: On transport failure
        """
        _, credentials = await self._fetch_credentials(token_pair)
        return credentials

    async def _complete(self, access_pair: TokenPair) -> HandshakeResult:
        try:
            response, raw_profile = await self._fetch_credentials(access_pair)
        except OAuthTransportError as e:
            return self._fail(
                OAuthErrorCode.NETWORK_ERROR,
                "Could not reach verify_credentials_url",
                {"url": e.url, "error": e.message},
            )

        if raw_profile is None or self._normalizer.extract_uid(raw_profile) is None:
            return self._fail(
                OAuthErrorCode.VERIFY_CREDENTIALS_ERROR,
                f"Verify_credentials error (HTTP {response.status_code}).",
                raw_profile if raw_profile is not None else response.text,
            )

        self.profile = self._normalizer.normalize(
            raw_profile, access_pair, provider=self.provider.short_name
        )
        self.state = HandshakeState.COMPLETED
        self._log.info(f"OAuth1 flow completed for uid {self.profile.uid}")
        return self.profile


class OAuth1HandshakeService:
    """Creates handshake attempts for one provider and runs them.

    The service holds what every attempt shares (provider config, consumer
    credentials, executor, store, normalizer). Attempts themselves are
    cheap and short-lived.
    """

    def __init__(
        self,
        *,
        provider: OAuth1ProviderConfig,
        credentials: ConsumerCredentials,
        executor: RequestExecutorProtocol,
        token_store: TokenStore,
        normalizer: Optional[ProfileNormalizer] = None,
    ) -> None:
        """Store dependencies shared by all flow attempts."""
        self._provider = provider
        self._credentials = credentials
        self._executor = executor
        self._token_store = token_store
        self._normalizer = normalizer or ProfileNormalizer(
            provider.profile_field_map,
            profile_url_template=provider.profile_url_template,
            profile_url_key=provider.profile_url_key,
        )

    @property
    def provider(self) -> OAuth1ProviderConfig:
        """Provider this service talks to."""
        return self._provider

    def _handshake(self, flow_id: str, state: HandshakeState) -> OAuth1Handshake:
        return OAuth1Handshake(
            flow_id=flow_id,
            provider=self._provider,
            credentials=self._credentials,
            executor=self._executor,
            token_store=self._token_store,
            normalizer=self._normalizer,
            state=state,
        )

    def begin(self, flow_id: str) -> OAuth1Handshake:
        """New attempt, ready to start."""
        return self._handshake(flow_id, HandshakeState.IDLE)

    def resume(self, flow_id: str) -> OAuth1Handshake:
        """Attempt rebuilt on the callback request, waiting for the callback."""
        return self._handshake(flow_id, HandshakeState.AWAITING_CALLBACK)

    async def start(self, flow_id: str) -> Union[AuthorizationRedirect, OAuthErrorResult]:
        """Begin an attempt and run its first step."""
        return await self.begin(flow_id).start()

    async def complete(
        self,
        flow_id: str,
        *,
        oauth_token: Optional[str],
        oauth_verifier: Optional[str],
        params: Optional[Dict[str, str]] = None,
    ) -> HandshakeResult:
        """Resume an attempt and finish it from the callback parameters."""
        return await self.resume(flow_id).callback(oauth_token, oauth_verifier, params)
