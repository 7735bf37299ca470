"""Process-local TTL cache for API responses.

Expiry is lazy: entries are checked when read and swept on every write.
The cache owns no background thread; a periodic sweep, if wanted, belongs
to the hosting application (see ``garba.scheduler``).
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5 * 60 * 1000  # 5 minutes


class _Missing:
    """Sentinel type returned by :meth:`TTLCache.get` on a miss."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class TTLCache:
    """Keyed store where every entry carries an absolute expiry in milliseconds.

    *clock* returns the current time in milliseconds. Tests pass a fake one.
    All mutations happen under a re-entrant lock so a sweep running on a
    scheduler thread cannot interleave with request-time reads.
    """

    def __init__(
        self,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], float] | None = None,
    ):
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock or _monotonic_ms
        self._lock = threading.RLock()
        # key -> (expires_at, value), written as one tuple
        self._store: dict[str, tuple[float, Any]] = {}

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store *value* under *key*, replacing any previous entry.

        A zero or negative TTL is accepted; such an entry is pruned by the
        next read or sweep that finds it past its expiry.
        """
        if ttl_ms is None:
            ttl_ms = self.default_ttl_ms
        with self._lock:
            self._store[key] = (self._clock() + ttl_ms, value)
            self.cleanup()

    def get(self, key: str) -> Any:
        """Return the value for *key*, or ``MISSING`` if absent or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return MISSING
            expires_at, value = entry
            if self._clock() > expires_at:
                del self._store[key]
                return MISSING
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> int:
        """Flush the entire cache. Returns the number of evicted entries."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
        return count

    def cleanup(self) -> int:
        """Evict every expired entry. Returns the number evicted."""
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._store.items() if expires_at < now]
            for key in expired:
                del self._store[key]
        return len(expired)

    def invalidate_by_pattern(self, pattern: str) -> int:
        """Remove every key containing *pattern* as a plain substring."""
        with self._lock:
            matching = [k for k in list(self._store) if pattern in k]
            for key in matching:
                del self._store[key]
        if matching:
            logger.info("Invalidated %d cached entries matching %r", len(matching), pattern)
        return len(matching)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {"size": len(self._store), "keys": list(self._store)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._store.get(key)  # type: ignore[arg-type]
            return entry is not None and self._clock() <= entry[0]
