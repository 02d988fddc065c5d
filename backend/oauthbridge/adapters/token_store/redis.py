"""Redis-backed token store adapter.

Pending request token pairs are stored as JSON under
``oauth1:flow:<flow_id>`` with a TTL. ``take`` uses GETDEL (Redis >= 6.2),
so get-and-delete is atomic across every process sharing the instance.
"""

from __future__ import annotations

import json
from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError

from oauthbridge.core.logging import logger
from oauthbridge.domains.oauth.types import TokenPair


class RedisTokenStore:
    """Redis-backed implementation of the TokenStore protocol."""

    KEY_PREFIX = "oauth1:flow"

    def __init__(self, client: redis.Redis, ttl_seconds: int = 600) -> None:
        """Initialize with a Redis client.

        Args:
            client: ``redis.asyncio.Redis`` client
            ttl_seconds: Expiry applied to every stored pair
        """
        self._client = client
        self._ttl = ttl_seconds

    @classmethod
    def make_key(cls, flow_id: str) -> str:
        """Build the Redis key as ``oauth1:flow:<flow_id>``."""
        return f"{cls.KEY_PREFIX}:{flow_id}"

    async def put(self, flow_id: str, pair: TokenPair) -> None:
        """Store the pair with the configured TTL."""
        data = json.dumps({"token": pair.token, "token_secret": pair.token_secret})
        await self._client.setex(self.make_key(flow_id), self._ttl, data)

    async def take(self, flow_id: str) -> Optional[TokenPair]:
        """Atomically fetch and delete the pair."""
        data = await self._client.getdel(self.make_key(flow_id))
        if not data:
            return None

        try:
            return TokenPair.model_validate(json.loads(data))
        except (ValueError, ValidationError) as e:
            logger.warning(f"[TokenStore] Discarding malformed entry for flow '{flow_id[:8]}': {e}")
            return None

    async def clear(self, flow_id: str) -> None:
        """Delete the pair if present."""
        await self._client.delete(self.make_key(flow_id))

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
