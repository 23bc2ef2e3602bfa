"""Thread-safe TTL cache for strategy recommendations."""

import threading
import time
from typing import Callable, Dict, Optional, Tuple

from casepilot.models.recommendation import StrategyRecommendation


class RecommendationCache:
    """Keyed recommendation store with per-entry expiry.

    Concurrent ``get``/``put`` calls are safe. Two threads missing the same key
    may both compute a recommendation; the last ``put`` wins.
    """

    def __init__(self, ttl: float = 3600, clock: Callable[[], float] = time.monotonic):
        """Initialize cache.

        Args:
            ttl: Entry lifetime in seconds
            clock: Monotonic time source
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, StrategyRecommendation]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[StrategyRecommendation]:
        """Return a live entry or None; expired entries are evicted."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            stored_at, recommendation = entry
            if self._clock() - stored_at >= self.ttl:
                del self._entries[key]
                self.misses += 1
                return None

            self.hits += 1
            return recommendation

    def put(self, key: str, recommendation: StrategyRecommendation) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), recommendation)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
