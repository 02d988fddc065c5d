"""Container Factory.

All construction logic lives here. The factory reads settings and builds
the container with environment-appropriate implementations.

Design principles:
- Single place for all wiring decisions
- Environment-aware: in-memory store locally, Redis when configured
- Fail fast: broken wiring crashes at startup, not at 3am
- Testable: can unit test factory logic with mock settings
"""

from typing import Dict, Optional

import httpx
import redis.asyncio as redis

from oauthbridge.adapters.token_store import InMemoryTokenStore, RedisTokenStore
from oauthbridge.core.config import Settings, TokenStoreBackendType
from oauthbridge.core.container.container import Container
from oauthbridge.core.logging import logger
from oauthbridge.core.protocols import TokenStore
from oauthbridge.domains.oauth.executor import OAuth1RequestExecutor
from oauthbridge.domains.oauth.handshake import OAuth1HandshakeService
from oauthbridge.domains.oauth.signer import OAuth1Signer
from oauthbridge.domains.oauth.types import (
    ConsumerCredentials,
    HttpClientOptions,
    OAuth1ProviderConfig,
    TWITTER_PROFILE_FIELD_MAP,
)


def create_container(
    settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None
) -> Container:
    """Build container with all dependencies based on settings.

    Args:
        settings: Application settings
        transport: Optional httpx transport for the request executor,
            used to run the whole stack against a mock provider

    Returns:
        Fully constructed container ready for use
    """
    token_store = _create_token_store(settings)
    executor = OAuth1RequestExecutor(
        signer=_create_signer(settings),
        options=build_http_options(settings),
        transport=transport,
    )

    twitter = build_twitter_provider(settings)
    handshake_services = {
        twitter.short_name: OAuth1HandshakeService(
            provider=twitter,
            credentials=ConsumerCredentials(
                key=settings.TWITTER_CONSUMER_KEY, secret=settings.TWITTER_CONSUMER_SECRET
            ),
            executor=executor,
            token_store=token_store,
        )
    }

    logger.info(
        f"Container built: token store={type(token_store).__name__}, "
        f"providers={sorted(handshake_services)}"
    )

    return Container(
        token_store=token_store,
        request_executor=executor,
        handshake_services=handshake_services,
    )


def build_twitter_provider(settings: Settings) -> OAuth1ProviderConfig:
    """Twitter endpoints, authorization hints and profile mapping from settings."""
    authorize_params: Dict[str, str] = {}
    if settings.TWITTER_FORCE_LOGIN:
        authorize_params["force_login"] = "true"
    if settings.TWITTER_SCREEN_NAME:
        authorize_params["screen_name"] = settings.TWITTER_SCREEN_NAME

    verify_params: Dict[str, str] = {}
    if settings.TWITTER_VERIFY_CREDENTIALS_SKIP_STATUS:
        verify_params["skip_status"] = "true"

    return OAuth1ProviderConfig(
        short_name="twitter",
        request_token_url=settings.TWITTER_REQUEST_TOKEN_URL,
        authorize_url=settings.TWITTER_AUTHORIZE_URL,
        access_token_url=settings.TWITTER_ACCESS_TOKEN_URL,
        verify_credentials_url=settings.TWITTER_VERIFY_CREDENTIALS_URL,
        callback_url=settings.TWITTER_CALLBACK_URL,
        verify_credentials_params=verify_params,
        authorize_params=authorize_params,
        profile_field_map=dict(TWITTER_PROFILE_FIELD_MAP),
        profile_url_template=settings.TWITTER_PROFILE_URL_TEMPLATE,
        profile_url_key="twitter",
    )


def build_http_options(settings: Settings) -> HttpClientOptions:
    """Timeouts, TLS verification, redirects and proxy from settings."""
    return HttpClientOptions(
        verify_ssl=settings.HTTP_VERIFY_SSL,
        connect_timeout=settings.HTTP_CONNECT_TIMEOUT,
        timeout=settings.HTTP_TIMEOUT,
        follow_redirects=settings.HTTP_FOLLOW_REDIRECTS,
        proxy=settings.HTTP_PROXY,
        proxy_userpwd=(
            settings.HTTP_PROXY_USERPWD.get_secret_value()
            if settings.HTTP_PROXY_USERPWD
            else None
        ),
    )


def _create_signer(settings: Settings) -> OAuth1Signer:
    if settings.OAUTH_FIXED_NONCE is not None or settings.OAUTH_FIXED_TIMESTAMP is not None:
        logger.warning("OAuth1 signer uses a fixed nonce/timestamp; signatures are replayable")
    return OAuth1Signer(
        as_header=settings.OAUTH_AS_HEADER,
        fixed_nonce=settings.OAUTH_FIXED_NONCE,
        fixed_timestamp=settings.OAUTH_FIXED_TIMESTAMP,
    )


def _create_token_store(settings: Settings) -> TokenStore:
    """Create the token store for the configured backend.

    - memory: InMemoryTokenStore (single process)
    - redis: RedisTokenStore (shared across replicas)
    """
    if settings.TOKEN_STORE_BACKEND == TokenStoreBackendType.REDIS:
        client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            password=settings.REDIS_PASSWORD,
            decode_responses=True,
        )
        return RedisTokenStore(client, ttl_seconds=settings.TOKEN_STORE_TTL_SECONDS)

    return InMemoryTokenStore(ttl_seconds=settings.TOKEN_STORE_TTL_SECONDS)
