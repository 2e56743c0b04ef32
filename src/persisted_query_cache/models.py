from dataclasses import dataclass
from enum import Enum


class CacheOutcome(str, Enum):
    """How the pipeline handled a request."""

    BYPASS = "bypass"  # path did not match
    UNCACHED = "uncached"  # not a persisted query
    HIT = "hit"
    MISS = "miss"


@dataclass
class PipelineMetrics:
    """Track cache outcomes for the pipeline."""

    cache_hits: int = 0
    cache_misses: int = 0
    uncached: int = 0
    bypassed: int = 0
    cache_errors: int = 0

    @property
    def total_queries(self) -> int:
        """Requests that reached the cache lookup."""
        return self.cache_hits + self.cache_misses

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_queries == 0:
            return 0.0
        return self.cache_hits / self.total_queries

    def record(self, outcome: CacheOutcome) -> None:
        """Record the outcome of one request."""
        if outcome is CacheOutcome.HIT:
            self.cache_hits += 1
        elif outcome is CacheOutcome.MISS:
            self.cache_misses += 1
        elif outcome is CacheOutcome.UNCACHED:
            self.uncached += 1
        else:
            self.bypassed += 1

    def record_cache_error(self) -> None:
        """Record a cache read or write failure."""
        self.cache_errors += 1

    def reset(self) -> None:
        """Zero all counters."""
        self.cache_hits = self.cache_misses = self.uncached = self.bypassed = self.cache_errors = 0

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_queries": self.total_queries,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "uncached": self.uncached,
            "bypassed": self.bypassed,
            "cache_errors": self.cache_errors,
            "hit_rate": self.hit_rate,
        }
