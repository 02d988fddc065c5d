"""Signed HTTP calls against OAuth1 provider endpoints."""

import asyncio
from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

from oauthbridge.core.exceptions import OAuthTransportError
from oauthbridge.core.logging import ContextualLogger, logger
from oauthbridge.domains.oauth.signer import OAuth1Signer
from oauthbridge.domains.oauth.types import (
    ConsumerCredentials,
    HttpClientOptions,
    RawResponse,
    SignedRequestSpec,
    TokenPair,
)


def _proxy_url(options: HttpClientOptions) -> Optional[str]:
    """Merge ``user:password`` proxy credentials into the proxy URL."""
    if not options.proxy:
        return None
    if not options.proxy_userpwd:
        return options.proxy

    parts = urlsplit(options.proxy if "://" in options.proxy else f"http://{options.proxy}")
    user, _, password = options.proxy_userpwd.partition(":")
    netloc = f"{quote(user, safe='')}:{quote(password, safe='')}@{parts.hostname}"
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


def _is_json_response(url: str, content_type: Optional[str]) -> bool:
    if urlsplit(url).path.endswith(".json"):
        return True
    return bool(content_type) and "application/json" in content_type.lower()


class OAuth1RequestExecutor:
    """Performs signed OAuth1 calls and reports results without raising on status.

    A non-2xx response is returned like any other. Only connection-level
    failures raise, as ``OAuthTransportError``.
    """

    def __init__(
        self,
        *,
        signer: OAuth1Signer,
        options: Optional[HttpClientOptions] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Store the signer and transport options.

        Args:
            signer: Signer used for every authenticated call
            options: Timeouts, TLS verification, proxy and redirect policy
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests
        """
        self._signer = signer
        self._options = options or HttpClientOptions()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        options = self._options
        kwargs = {
            "timeout": httpx.Timeout(options.timeout, connect=options.connect_timeout),
            "verify": options.verify_ssl,
            "follow_redirects": options.follow_redirects,
        }
        proxy = _proxy_url(options)
        if proxy:
            kwargs["proxy"] = proxy
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def execute(
        self,
        spec: SignedRequestSpec,
        credentials: ConsumerCredentials,
        token_pair: Optional[TokenPair] = None,
        *,
        log: Optional[ContextualLogger] = None,
    ) -> RawResponse:
        """Sign and send one request.

        Args:
            spec: Method, URL, parameters and whether to sign
            credentials: Consumer credentials for signing
            token_pair: Token pair for signing, None for the request-token call
            log: Logger carrying flow context

        Returns:
            RawResponse with the status code and body, whatever the status

        Raises:
            OAuthTransportError: On connection, TLS, decoding, redirect or timeout failures
        """
        log = log or logger
        method = spec.method.upper()
        headers = {}
        params = dict(spec.params)

        if spec.use_auth:
            signed = self._signer.sign(method, spec.url, params, credentials, token_pair)
            headers.update(signed.headers)
            params = signed.params

        log.debug(f"OAuth1 {method} {spec.url}")

        try:
            url = httpx.URL(spec.url)
            request_kwargs = {"headers": headers}
            if method == "GET":
                # Keep the URL's own query; it is part of the signature base string.
                if params:
                    url = url.copy_with(params=url.params.multi_items() + list(params.items()))
            else:
                request_kwargs["data"] = params

            async with self._client() as client:
                response = await asyncio.wait_for(
                    client.request(method, url, **request_kwargs),
                    timeout=self._options.timeout,
                )
        except asyncio.TimeoutError as e:
            log.error(f"Request to {spec.url} exceeded {self._options.timeout}s")
            raise OAuthTransportError(
                spec.url, f"Request exceeded {self._options.timeout}s timeout"
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            log.error(f"Transport error calling {spec.url}: {type(e).__name__}")
            raise OAuthTransportError(spec.url, f"{type(e).__name__}: {e}") from e

        content_type = response.headers.get("content-type")
        log.debug(f"OAuth1 {method} {spec.url} returned {response.status_code}")

        return RawResponse(
            status_code=response.status_code,
            body=response.content,
            is_json=_is_json_response(spec.url, content_type),
            content_type=content_type,
        )
