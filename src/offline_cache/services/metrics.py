from dataclasses import dataclass, field


@dataclass
class WorkerMetrics:
    """Track what the executors did with intercepted requests."""

    requests: dict[str, int] = field(default_factory=dict)
    cache_hits: int = 0
    cache_misses: int = 0
    network_responses: int = 0
    cache_fallbacks: int = 0
    offline_fallbacks: int = 0
    synthesized_errors: int = 0
    passthrough: int = 0
    refresh_succeeded: int = 0
    refresh_failed: int = 0

    @property
    def total_requests(self) -> int:
        return sum(self.requests.values())

    @property
    def hit_rate(self) -> float:
        """Calculate cache-first hit rate."""
        lookups = self.cache_hits + self.cache_misses
        if lookups == 0:
            return 0.0
        return self.cache_hits / lookups

    def record_request(self, request_class: str) -> None:
        self.requests[request_class] = self.requests.get(request_class, 0) + 1

    def record_hit(self) -> None:
        self.cache_hits += 1

    def record_miss(self) -> None:
        self.cache_misses += 1

    def record_network(self) -> None:
        self.network_responses += 1

    def record_cache_fallback(self) -> None:
        self.cache_fallbacks += 1

    def record_offline_fallback(self) -> None:
        self.offline_fallbacks += 1

    def record_synthesized_error(self) -> None:
        self.synthesized_errors += 1

    def record_passthrough(self) -> None:
        self.passthrough += 1

    def record_refresh(self, succeeded: bool) -> None:
        if succeeded:
            self.refresh_succeeded += 1
        else:
            self.refresh_failed += 1

    def to_dict(self) -> dict[str, float | int | dict[str, int]]:
        """Convert metrics to dictionary."""
        return {
            "total_requests": self.total_requests,
            "requests": dict(self.requests),
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "network_responses": self.network_responses,
            "cache_fallbacks": self.cache_fallbacks,
            "offline_fallbacks": self.offline_fallbacks,
            "synthesized_errors": self.synthesized_errors,
            "passthrough": self.passthrough,
            "refresh_succeeded": self.refresh_succeeded,
            "refresh_failed": self.refresh_failed,
        }
