"""Value types for the OAuth1 domain.

These live in a separate module to avoid circular imports between
service implementations and protocol definitions.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from oauthbridge.core.exceptions import ResponseDecodeError

REDACTED = "[redacted]"


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class ConsumerCredentials(BaseModel):
    """Consumer key and secret identifying the application to the provider."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    secret: SecretStr


class TokenPair(BaseModel):
    """An OAuth1 token and its secret.

    Both halves are required, so a partially populated pair cannot exist.
    Used for the short-lived request token and for the access token.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1)
    token_secret: str = Field(..., min_length=1, repr=False)


# ---------------------------------------------------------------------------
# Outbound requests and responses
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class SignedRequestSpec:
    """One outbound OAuth1 call, built per request and never persisted."""

    method: str
    url: str
    params: Dict[str, str] = field(default_factory=dict)
    use_auth: bool = True


@dataclass(slots=True)
class SigningResult:
    """Signing material for one request.

    In header mode ``headers`` carries the Authorization header and ``params``
    are the caller's parameters unchanged. In body mode ``headers`` is empty
    and ``params`` also carries the protocol parameters and the signature.
    """

    headers: Dict[str, str]
    params: Dict[str, str]
    signature: str
    base_string: str


@dataclass(slots=True)
class JsonPayload:
    """Decoded JSON response body."""

    value: Any

    def get(self, name: str) -> Any:
        """Look up a top-level field, ``None`` when absent."""
        if isinstance(self.value, dict):
            return self.value.get(name)
        return None

    def as_dict(self) -> Dict[str, Any]:
        """Return the body as a mapping."""
        if not isinstance(self.value, dict):
            raise ResponseDecodeError("JSON response is not an object")
        return self.value


@dataclass(slots=True)
class FormPayload:
    """Decoded ``application/x-www-form-urlencoded`` response body."""

    fields: Dict[str, str]

    def get(self, name: str) -> Optional[str]:
        """Look up a field, ``None`` when absent."""
        return self.fields.get(name)

    def as_dict(self) -> Dict[str, Any]:
        """Return the body as a mapping."""
        return dict(self.fields)


ResponsePayload = Union[JsonPayload, FormPayload]


@dataclass(slots=True)
class RawResponse:
    """An HTTP response as returned by the request executor."""

    status_code: int
    body: bytes
    is_json: bool
    content_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Only 200 counts as success for OAuth1 endpoints."""
        return self.status_code == 200

    @property
    def text(self) -> str:
        """Body as text, undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")

    def payload(self) -> ResponsePayload:
        """Decode the body once, as JSON or as form-encoded fields.

        Raises:
            ResponseDecodeError: If the body is not valid UTF-8 or not valid JSON.
        """
        try:
            text = self.body.decode("utf-8")
            if self.is_json:
                return JsonPayload(json.loads(text))
        except ValueError as e:
            raise ResponseDecodeError(f"Could not decode provider response: {e}") from e
        return FormPayload(dict(parse_qsl(text, keep_blank_values=True)))


# ---------------------------------------------------------------------------
# Handshake results
# ---------------------------------------------------------------------------


class HandshakeState(str, Enum):
    """Lifecycle of a single flow attempt."""

    IDLE = "idle"
    AWAITING_CALLBACK = "awaiting_callback"
    COMPLETED = "completed"
    FAILED = "failed"


class OAuthErrorCode(str, Enum):
    """Failure kinds surfaced to the caller."""

    TOKEN_REQUEST_FAILED = "token_request_failed"
    ACCESS_DENIED = "access_denied"
    OAUTH_VERIFIER_ERROR = "oauth_verifier_error"
    VERIFY_CREDENTIALS_ERROR = "verify_credentials_error"
    NETWORK_ERROR = "network_error"


def _is_secret_key(key: Any) -> bool:
    return isinstance(key, str) and "secret" in key.lower()


def redact_secrets(value: Any) -> Any:
    """Strip secret-bearing fields from an error payload.

    Mappings lose every key containing ``secret``. Form-encoded strings are
    parsed, filtered the same way and re-encoded. Other values pass through.
    """
    if isinstance(value, dict):
        return {k: redact_secrets(v) for k, v in value.items() if not _is_secret_key(k)}
    if isinstance(value, (list, tuple)):
        return [redact_secrets(v) for v in value]
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str) and "secret" in value.lower():
        parts = value.split("&")
        if all("=" in part for part in parts):
            pairs = parse_qsl(value, keep_blank_values=True)
            return urlencode([(k, v) for k, v in pairs if not _is_secret_key(k)])
        return REDACTED
    return value


class OAuthErrorResult(BaseModel):
    """A terminal failure of a flow attempt.

    ``raw`` carries diagnostic context (a response body or the incoming
    callback parameters) and is redacted on construction.
    """

    model_config = ConfigDict(frozen=True)

    code: OAuthErrorCode
    message: str
    raw: Any = None

    @field_validator("raw", mode="before")
    @classmethod
    def _redact_raw(cls, value: Any) -> Any:
        return redact_secrets(value)


class AccessCredentials(BaseModel):
    """Access token handed to the caller after a completed flow."""

    model_config = ConfigDict(frozen=True)

    token: str
    secret: str = Field(..., repr=False)


class ProfileInfo(BaseModel):
    """Canonical profile fields. Unset fields were absent at the provider."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    nickname: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    urls: Dict[str, str] = Field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        """Only the fields the provider actually supplied."""
        return self.model_dump(exclude_unset=True)


class NormalizedProfile(BaseModel):
    """Final output of a completed flow."""

    model_config = ConfigDict(frozen=True)

    provider: str
    uid: str
    info: ProfileInfo
    credentials: AccessCredentials
    raw: Dict[str, Any] = Field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        """Serializable form with absent info fields omitted."""
        return {
            "provider": self.provider,
            "uid": self.uid,
            "info": self.info.as_dict(),
            "credentials": self.credentials.model_dump(),
            "raw": self.raw,
        }


@dataclass(slots=True)
class AuthorizationRedirect:
    """Where to send the user after a successful start."""

    url: str
    token: str


HandshakeResult = Union[NormalizedProfile, OAuthErrorResult]


# ---------------------------------------------------------------------------
# Provider configuration
# ---------------------------------------------------------------------------


TWITTER_PROFILE_FIELD_MAP: Dict[str, str] = {
    "uid": "id",
    "info.name": "name",
    "info.nickname": "screen_name",
    "info.location": "location",
    "info.description": "description",
    "info.image": "profile_image_url",
    "info.urls.website": "url",
}


class OAuth1ProviderConfig(BaseModel):
    """Endpoints and profile mapping for one OAuth1 provider."""

    model_config = ConfigDict(frozen=True)

    short_name: str
    request_token_url: str
    authorize_url: str
    access_token_url: str
    verify_credentials_url: str
    callback_url: str
    verify_credentials_params: Dict[str, str] = Field(default_factory=dict)
    authorize_params: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra authorization hints such as force_login or screen_name",
    )
    profile_field_map: Dict[str, str] = Field(
        default_factory=lambda: dict(TWITTER_PROFILE_FIELD_MAP)
    )
    profile_url_template: Optional[str] = None
    profile_url_key: Optional[str] = None

    @property
    def uid_field(self) -> str:
        """Source field holding the provider's unique user id."""
        return self.profile_field_map.get("uid", "id")


@dataclass(slots=True)
class HttpClientOptions:
    """Transport options applied to every outbound call."""

    verify_ssl: bool = True
    connect_timeout: float = 30.0
    timeout: float = 10.0
    follow_redirects: bool = False
    proxy: Optional[str] = None
    proxy_userpwd: Optional[str] = None
