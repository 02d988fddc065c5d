"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before the colocated test packages, making its
fixtures available to every ``tests/`` directory under oauthbridge/.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables must be set before any oauthbridge module import
# Uses setdefault so real env vars (CI) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TWITTER_CONSUMER_KEY", "test-consumer-key")
os.environ.setdefault("TWITTER_CONSUMER_SECRET", "test-consumer-secret")
os.environ.setdefault("TOKEN_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")


REQUEST_TOKEN_URL = "https://provider.test/oauth/request_token"
AUTHORIZE_URL = "https://provider.test/oauth/authenticate"
ACCESS_TOKEN_URL = "https://provider.test/oauth/access_token"
VERIFY_CREDENTIALS_URL = "https://provider.test/1.1/account/verify_credentials.json"
CALLBACK_URL = "https://app.test/api/v1/oauth/twitter/callback"


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_token_store():
    """Fake TokenStore that records put/take/clear calls."""
    from oauthbridge.adapters.token_store.fake import FakeTokenStore

    return FakeTokenStore()


@pytest.fixture
def fake_request_executor():
    """Fake request executor answering seeded responses per URL."""
    from oauthbridge.domains.oauth.fakes.executor import FakeRequestExecutor

    return FakeRequestExecutor()


@pytest.fixture
def twitter_provider():
    """Twitter-shaped provider config pointing at a test host."""
    from oauthbridge.domains.oauth.types import TWITTER_PROFILE_FIELD_MAP, OAuth1ProviderConfig

    return OAuth1ProviderConfig(
        short_name="twitter",
        request_token_url=REQUEST_TOKEN_URL,
        authorize_url=AUTHORIZE_URL,
        access_token_url=ACCESS_TOKEN_URL,
        verify_credentials_url=VERIFY_CREDENTIALS_URL,
        callback_url=CALLBACK_URL,
        verify_credentials_params={"skip_status": "true"},
        profile_field_map=dict(TWITTER_PROFILE_FIELD_MAP),
        profile_url_template="https://twitter.com/{nickname}",
        profile_url_key="twitter",
    )


@pytest.fixture
def consumer_credentials():
    """Consumer key and secret used to sign test requests."""
    from oauthbridge.domains.oauth.types import ConsumerCredentials

    return ConsumerCredentials(key="ck", secret="cs")


@pytest.fixture
def fake_handshake_service(twitter_provider):
    """Fake handshake service returning seeded start/complete results."""
    from oauthbridge.domains.oauth.fakes.handshake_service import FakeOAuth1HandshakeService

    return FakeOAuth1HandshakeService(twitter_provider)


@pytest.fixture
def test_container(fake_token_store, fake_request_executor, fake_handshake_service):
    """A Container with all fakes."""
    from oauthbridge.core.container import Container

    return Container(
        token_store=fake_token_store,
        request_executor=fake_request_executor,
        handshake_services={"twitter": fake_handshake_service},
    )
