"""OAuth1 request signing (HMAC-SHA1).

Builds the signature base string and signature for a request, then hands
back either an Authorization header or the signed parameter set.

Reference: RFC 5849 section 3.4 - Signature
"""

import base64
import hashlib
import hmac
import secrets
import time
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from oauthbridge.domains.oauth.types import ConsumerCredentials, SigningResult, TokenPair

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

_DEFAULT_PORTS = {"http": 80, "https": 443}


def percent_encode(value: str) -> str:
    """Percent-encode a value according to RFC 3986.

    Encodes all characters except unreserved: A-Z, a-z, 0-9, -, ., _, ~
    """
    return quote(str(value), safe="~")


def normalize_base_url(url: str) -> Tuple[str, List[Tuple[str, str]]]:
    """Split a URL into its signature base URL and its query parameters.

    Scheme and host are lowercased and a default port is dropped. Query
    parameters come back as pairs so repeated names are all signed.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if parts.port and parts.port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parts.port}"
    base = urlunsplit((scheme, host, parts.path or "/", "", ""))
    return base, parse_qsl(parts.query, keep_blank_values=True)


class OAuth1Signer:
    """Signs OAuth1 requests with HMAC-SHA1.

    ``fixed_nonce`` and ``fixed_timestamp`` make signatures reproducible for
    tests and signature checks. Production signing leaves both unset.
    """

    def __init__(
        self,
        *,
        as_header: bool = True,
        fixed_nonce: Optional[str] = None,
        fixed_timestamp: Optional[int] = None,
    ) -> None:
        """Configure output placement and the nonce/timestamp source."""
        self.as_header = as_header
        self._fixed_nonce = fixed_nonce
        self._fixed_timestamp = fixed_timestamp

    def _generate_nonce(self) -> str:
        """Generate a cryptographically secure random nonce."""
        if self._fixed_nonce is not None:
            return self._fixed_nonce
        return secrets.token_urlsafe(32)

    def _get_timestamp(self) -> str:
        """Get current Unix timestamp as string."""
        if self._fixed_timestamp is not None:
            return str(self._fixed_timestamp)
        return str(int(time.time()))

    def _normalize_params(self, params: Iterable[Tuple[str, str]]) -> str:
        """Encode, sort by encoded name then value, and join with '&'."""
        encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in params)
        return "&".join(f"{k}={v}" for k, v in encoded)

    def build_signature_base_string(self, method: str, url: str, params: Dict[str, str]) -> str:
        """Build the signature base string per RFC 5849.

        Format: HTTP_METHOD&URL&NORMALIZED_PARAMS
        """
        base_url, query_params = normalize_base_url(url)
        all_params = query_params + list(params.items())

        parts = [
            method.upper(),
            percent_encode(base_url),
            percent_encode(self._normalize_params(all_params)),
        ]
        return "&".join(parts)

    def _sign_hmac_sha1(self, base_string: str, consumer_secret: str, token_secret: str = "") -> str:
        """Sign the base string using HMAC-SHA1.

        Signing key: percent_encode(consumer_secret)&percent_encode(token_secret)
        """
        key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
        signature_bytes = hmac.new(
            key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1
        ).digest()
        return base64.b64encode(signature_bytes).decode("utf-8")

    def _build_authorization_header(self, params: Dict[str, str]) -> str:
        """Build OAuth1 Authorization header.

        Format: OAuth oauth_consumer_key="...", oauth_nonce="...", ...
        """
        sorted_items = sorted(params.items())
        param_strings = [f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in sorted_items]
        return "OAuth " + ", ".join(param_strings)

    def sign(
        self,
        method: str,
        url: str,
        params: Dict[str, str],
        credentials: ConsumerCredentials,
        token_pair: Optional[TokenPair] = None,
    ) -> SigningResult:
        """Sign a request.

        Args:
            method: HTTP method, any case
            url: Request URL; query parameters are included in the signature
            params: Caller parameters sent in the query string or form body
            credentials: Consumer key and secret
            token_pair: Request or access token pair, None for the request-token call

        Returns:
            SigningResult with header or body placement per ``as_header``
        """
        oauth_params = {
            "oauth_consumer_key": credentials.key,
            "oauth_nonce": self._generate_nonce(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": self._get_timestamp(),
            "oauth_version": OAUTH_VERSION,
        }
        if token_pair is not None:
            oauth_params["oauth_token"] = token_pair.token

        base_string = self.build_signature_base_string(method, url, {**params, **oauth_params})
        signature = self._sign_hmac_sha1(
            base_string,
            credentials.secret.get_secret_value(),
            token_pair.token_secret if token_pair is not None else "",
        )
        oauth_params["oauth_signature"] = signature

        if self.as_header:
            return SigningResult(
                headers={"Authorization": self._build_authorization_header(oauth_params)},
                params=dict(params),
                signature=signature,
                base_string=base_string,
            )

        return SigningResult(
            headers={},
            params={**params, **oauth_params},
            signature=signature,
            base_string=base_string,
        )
