"""TokenStore protocol for in-flight OAuth1 request tokens.

Between the start of a flow and its callback, the request token pair has to
survive on the server. The store keeps exactly one pair per flow id and hands
it out once: ``take`` is an atomic get-and-delete, so a replayed callback
finds nothing.

Usage:
    await token_store.put(flow_id, request_pair)
    ...
    pair = await token_store.take(flow_id)
    if pair is None:
        # missing, expired, or already consumed
"""

from typing import Optional, Protocol, runtime_checkable

from oauthbridge.domains.oauth.types import TokenPair


@runtime_checkable
class TokenStore(Protocol):
    """Protocol for short-lived, single-use token pair storage.

    Implementations must support concurrent flows for different flow ids and
    make ``take`` atomic per flow id.
    """

    async def put(self, flow_id: str, pair: TokenPair) -> None:
        """Store the pair for a flow, replacing any earlier pair.

        Args:
            flow_id: Opaque identifier of the flow attempt.
            pair: The request token pair.
        """
        ...

    async def take(self, flow_id: str) -> Optional[TokenPair]:
        """Return and delete the pair for a flow in one step.

        Args:
            flow_id: Opaque identifier of the flow attempt.

        Returns:
            The stored pair, or None if absent, expired, or already taken.
        """
        ...

    async def clear(self, flow_id: str) -> None:
        """Delete the pair for a flow if present.

        Args:
            flow_id: Opaque identifier of the flow attempt.
        """
        ...
