"""Response store protocol.

Defines the interface for any cache backend that maps a conversation
fingerprint to a previously delivered response.

Implementations can include:
- In-process bounded map with quality-weighted eviction (default)
- Any shared store, as long as get/set never raise on a miss
"""

from typing import Protocol, runtime_checkable

from chat_cache.entities import ResponsePayload


@runtime_checkable
class ResponseStore(Protocol):
    """Protocol for response cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        from chat_cache.protocols import ResponseStore

        store: ResponseStore = InMemoryResponseCache(max_entries=500)
        ```
    """

    def get(self, key: str) -> ResponsePayload | None:
        """Look up a response.

        Args:
            key: The conversation fingerprint

        Returns:
            The cached payload, or None if absent or expired
        """
        ...

    def set(
        self,
        key: str,
        payload: ResponsePayload,
        base_ttl: float | None = None,
        quality: float | None = None,
    ) -> None:
        """Store a response.

        Args:
            key: The conversation fingerprint
            payload: The response to cache
            base_ttl: Base time-to-live in seconds
            quality: Explicit quality score; computed from the payload if None
        """
        ...

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number of entries deleted
        """
        ...

    def __len__(self) -> int:
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...
