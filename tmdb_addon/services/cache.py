"""
In-Memory Cache
Expiring key/value store with injected TTL and clock
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


class TTLCache:
    """Expiring map; entries are treated as absent once ``ttl`` has elapsed"""

    def __init__(
        self,
        ttl: Optional[float],
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        """
        Args:
            ttl: Lifetime of an entry in seconds; ``None`` never expires
            clock: Monotonic time source, replaceable in tests
            name: Label used in log messages
        """
        self.ttl = ttl
        self.clock = clock
        self.name = name
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._metrics: Dict[str, int] = {"hit": 0, "miss": 0, "expired": 0}

    def get(self, key: Hashable) -> Optional[Any]:
        """
        Get value from cache

        Args:
            key: Cache key

        Returns:
            Cached value or None if missing or expired
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._metrics["miss"] += 1
                return None
            value, inserted_at = entry
            if self.ttl is not None and self.clock() - inserted_at >= self.ttl:
                self._metrics["expired"] += 1
                return None
            self._metrics["hit"] += 1
            return value

    def set(self, key: Hashable, value: Any) -> None:
        """Store value, overwriting any previous entry"""
        with self._lock:
            self._entries[key] = (value, self.clock())
        logger.debug("%s set key=%s", self.name, key)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_metrics_snapshot(self) -> Dict[str, int]:
        """Return a shallow copy of hit/miss counters."""
        return dict(self._metrics)
