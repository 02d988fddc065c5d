"""Fake token store for testing.

Records every call and allows seeding or inspecting stored pairs without
TTL handling.
"""

from typing import Optional

from oauthbridge.domains.oauth.types import TokenPair


class FakeTokenStore:
    """Test implementation of TokenStore.

    Usage:
        store = FakeTokenStore()
        store.seed("flow-1", TokenPair(token="abc", token_secret="xyz"))
        await handshake.callback(...)

        assert store.takes == ["flow-1"]
        assert store.get("flow-1") is None
    """

    def __init__(self) -> None:
        """Initialize with empty state."""
        self._pairs: dict[str, TokenPair] = {}
        self.puts: list[str] = []  # ordered log of flow ids passed to put()
        self.takes: list[str] = []  # ordered log of flow ids passed to take()
        self.clears: list[str] = []

    async def put(self, flow_id: str, pair: TokenPair) -> None:
        """Store the pair and log the call."""
        self._pairs[flow_id] = pair
        self.puts.append(flow_id)

    async def take(self, flow_id: str) -> Optional[TokenPair]:
        """Pop the pair and log the call."""
        self.takes.append(flow_id)
        return self._pairs.pop(flow_id, None)

    async def clear(self, flow_id: str) -> None:
        """Drop the pair and log the call."""
        self.clears.append(flow_id)
        self._pairs.pop(flow_id, None)

    # Test helpers

    def seed(self, flow_id: str, pair: TokenPair) -> None:
        """Store a pair without logging a put."""
        self._pairs[flow_id] = pair

    def get(self, flow_id: str) -> Optional[TokenPair]:
        """Peek at a stored pair without consuming it."""
        return self._pairs.get(flow_id)

    @property
    def size(self) -> int:
        """Number of stored pairs."""
        return len(self._pairs)
