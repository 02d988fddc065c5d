"""In-memory token store implementation.

Keeps pending request token pairs in a dict with TTL-based expiry. Suitable
for single-process deployments. For multi-process (e.g., several API
replicas behind a load balancer), swap with the Redis-backed implementation.

Guarded by an asyncio.Lock for concurrent coroutines within
a single event loop.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from oauthbridge.core.logging import logger
from oauthbridge.domains.oauth.types import TokenPair


class InMemoryTokenStore:
    """In-memory implementation of the TokenStore protocol.

    Stores ``(pair, stored_at)`` keyed by flow id. An entry older than
    ``ttl_seconds`` is treated as absent and dropped on access.

    Attributes:
        ttl_seconds: How long a pending pair stays retrievable.
    """

    DEFAULT_TTL_SECONDS = 600.0

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS) -> None:
        """Initialize the in-memory token store.

        Args:
            ttl_seconds: Seconds a pair stays retrievable after ``put``.
                Defaults to 10 minutes.
        """
        self._ttl = ttl_seconds
        self._entries: dict[str, tuple[TokenPair, float]] = {}  # flow_id → (pair, monotonic ts)
        self._lock = asyncio.Lock()

    async def put(self, flow_id: str, pair: TokenPair) -> None:
        """Store the pair for a flow, replacing any earlier pair."""
        async with self._lock:
            self._purge_expired()
            self._entries[flow_id] = (pair, time.monotonic())

    async def take(self, flow_id: str) -> Optional[TokenPair]:
        """Return and delete the pair for a flow under the lock."""
        async with self._lock:
            entry = self._entries.pop(flow_id, None)
            if entry is None:
                return None

            pair, stored_at = entry
            age = time.monotonic() - stored_at
            if age >= self._ttl:
                logger.info(f"[TokenStore] Pair for flow '{flow_id[:8]}' expired after {age:.0f}s")
                return None
            return pair

    async def clear(self, flow_id: str) -> None:
        """Delete the pair for a flow if present."""
        async with self._lock:
            self._entries.pop(flow_id, None)

    def _purge_expired(self) -> None:
        now = time.monotonic()
        expired = [key for key, (_, ts) in self._entries.items() if now - ts >= self._ttl]
        for key in expired:
            del self._entries[key]

    @property
    def pending_count(self) -> int:
        """Number of stored pairs, expired ones included until next ``put``."""
        return len(self._entries)
