from dataclasses import dataclass


@dataclass
class PerformanceMetrics:
    """Track how chat turns were answered."""

    total_requests: int = 0
    instant_hits: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    image_responses: int = 0
    network_calls: int = 0
    fallbacks: int = 0
    cancellations: int = 0
    total_network_time_ms: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Share of cache lookups that hit."""
        lookups = self.cache_hits + self.cache_misses
        if lookups == 0:
            return 0.0
        return self.cache_hits / lookups

    @property
    def avg_network_time_ms(self) -> float:
        """Average duration of network calls."""
        if self.network_calls == 0:
            return 0.0
        return self.total_network_time_ms / self.network_calls

    def record_network_call(self, duration_ms: float) -> None:
        self.network_calls += 1
        self.total_network_time_ms += duration_ms

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_requests": self.total_requests,
            "instant_hits": self.instant_hits,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "image_responses": self.image_responses,
            "network_calls": self.network_calls,
            "fallbacks": self.fallbacks,
            "cancellations": self.cancellations,
            "avg_network_time_ms": self.avg_network_time_ms,
        }
