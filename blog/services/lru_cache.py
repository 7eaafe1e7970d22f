from collections import OrderedDict
from threading import RLock
from typing import Any, Callable, Optional
import time

class LRUCacheImpl:
    """
    Thread-safe LRU cache with optional per-entry TTL.
    An entry is valid while now - created_at < ttl; expired entries are evicted on read.
    """
    def __init__(self, capacity: int = 1024, clock: Callable[[], float] = time.monotonic):
        self.capacity = max(1, capacity)
        self._clock = clock
        # key -> (created_at, ttl or None, value)
        self._data: "OrderedDict[str, tuple[float, Optional[float], Any]]" = OrderedDict()
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def get(self, key: str) -> Optional[Any]:
        now = self._clock()
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            created_at, ttl, value = item
            if ttl and now - created_at >= ttl:
                # Expired: evict and miss
                self._data.pop(key, None)
                return None
            # Move to MRU
            self._data.move_to_end(key)
            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        entry = (self._clock(), ttl_seconds or None, value)
        with self._lock:
            if key in self._data:
                self._data.pop(key)
            elif len(self._data) >= self.capacity:
                self._data.popitem(last=False)  # Evict LRU
            self._data[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
