"""Cache entry domain entity."""

from dataclasses import dataclass

from .response import ResponsePayload


@dataclass(frozen=True)
class CacheEntry:
    """Domain entity for a cached response.

    Attributes:
        payload: The cached response
        created_at: When this entry was created (Unix timestamp)
        base_ttl: Base time-to-live in seconds
        quality: Heuristic quality score in [0, 1]
    """

    payload: ResponsePayload
    created_at: float
    base_ttl: float
    quality: float

    @property
    def expires_at(self) -> float:
        """Adaptive expiration: better answers live up to 50% longer."""
        return self.created_at + self.base_ttl * (1 + self.quality * 0.5)

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at
