"""Application settings.

All values load from the environment (or a local ``.env`` file) through
pydantic-settings. Provider and HTTP client options are assembled from these
flat values by the container factory.
"""

from typing import Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oauthbridge.core.config.enums import Environment, TokenStoreBackendType


class Settings(BaseSettings):
    """Environment-driven settings for the OAuth bridge."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"
    API_URL: str = "http://localhost:8001"

    # Twitter consumer credentials (required)
    TWITTER_CONSUMER_KEY: str
    TWITTER_CONSUMER_SECRET: SecretStr

    # Twitter endpoints, overridable to point at a mock provider
    TWITTER_CALLBACK_URL: Optional[str] = None
    TWITTER_REQUEST_TOKEN_URL: str = "https://api.twitter.com/oauth/request_token"
    TWITTER_AUTHORIZE_URL: str = "https://api.twitter.com/oauth/authenticate"
    TWITTER_ACCESS_TOKEN_URL: str = "https://api.twitter.com/oauth/access_token"
    TWITTER_VERIFY_CREDENTIALS_URL: str = (
        "https://api.twitter.com/1.1/account/verify_credentials.json"
    )
    TWITTER_VERIFY_CREDENTIALS_SKIP_STATUS: bool = True
    TWITTER_PROFILE_URL_TEMPLATE: str = "https://twitter.com/{nickname}"
    TWITTER_FORCE_LOGIN: Optional[bool] = None
    TWITTER_SCREEN_NAME: Optional[str] = None

    # Signing
    OAUTH_AS_HEADER: bool = True
    OAUTH_FIXED_NONCE: Optional[str] = Field(
        None, description="Deterministic nonce for signature checks. Never set in production."
    )
    OAUTH_FIXED_TIMESTAMP: Optional[int] = Field(
        None, description="Deterministic timestamp for signature checks. Never set in production."
    )

    # Outbound HTTP
    HTTP_VERIFY_SSL: bool = True
    HTTP_CONNECT_TIMEOUT: float = 30.0
    HTTP_TIMEOUT: float = 10.0
    HTTP_FOLLOW_REDIRECTS: bool = False
    HTTP_PROXY: Optional[str] = None
    HTTP_PROXY_USERPWD: Optional[SecretStr] = None

    # Token store
    TOKEN_STORE_BACKEND: TokenStoreBackendType = TokenStoreBackendType.MEMORY
    TOKEN_STORE_TTL_SECONDS: int = 600

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Fill derived defaults and reject unsafe combinations."""
        if not self.TWITTER_CALLBACK_URL:
            self.TWITTER_CALLBACK_URL = (
                f"{self.API_URL.rstrip('/')}/api/v1/oauth/twitter/callback"
            )

        if self.ENVIRONMENT == Environment.PRD and (
            self.OAUTH_FIXED_NONCE is not None or self.OAUTH_FIXED_TIMESTAMP is not None
        ):
            raise ValueError(
                "OAUTH_FIXED_NONCE and OAUTH_FIXED_TIMESTAMP are test-only "
                "and cannot be set in production."
            )

        if self.HTTP_CONNECT_TIMEOUT <= 0 or self.HTTP_TIMEOUT <= 0:
            raise ValueError("HTTP timeouts must be positive")

        return self

    @property
    def is_local(self) -> bool:
        """Whether the process runs outside a deployed environment."""
        return self.ENVIRONMENT in (Environment.LOCAL, Environment.TEST)
