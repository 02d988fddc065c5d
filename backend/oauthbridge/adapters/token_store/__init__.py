"""Token store adapters."""

from oauthbridge.adapters.token_store.fake import FakeTokenStore
from oauthbridge.adapters.token_store.in_memory import InMemoryTokenStore
from oauthbridge.adapters.token_store.redis import RedisTokenStore

__all__ = ["InMemoryTokenStore", "RedisTokenStore", "FakeTokenStore"]
