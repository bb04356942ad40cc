"""In-memory TTL cache used to hold live page views.

Each rendered index page owns a view object (sort, expand and explainer
state).  Views are kept here under an opaque id; an entry's lifetime is
extended every time it is read, so a page that keeps interacting stays
alive while abandoned tabs age out.
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    """Thread-safe in-memory cache with sliding time-to-live expiry.

    Entries expire ``ttl_seconds`` after they were last stored or read.
    At most ``maxsize`` entries are retained; when the cache is full the
    entry closest to expiry is evicted.  ``on_evict`` is called with
    ``(key, value)`` whenever an entry leaves the cache for any reason
    other than an explicit ``pop``.

    Usage::

        cache = TTLCache(maxsize=1000, ttl_seconds=1800)
        cache.set(view_id, view)
        view = cache.get(view_id)  # None if expired or missing
    """

    def __init__(self, maxsize: int = 128, ttl_seconds: float = 300.0,
                 on_evict: Callable[[Any, Any], None] | None = None) -> None:
        """Initialise the cache.

        Args:
            maxsize: Maximum number of entries to store (default 128).
            ttl_seconds: Idle seconds before an entry expires (default 300).
            on_evict: Optional callback run for expired/evicted entries.
        """
        self._maxsize = maxsize
        self._ttl = ttl_seconds
        self._on_evict = on_evict
        # key -> (value, expires_at)
        self._store: dict[Any, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: Any) -> Any | None:
        """Return the value for *key* and extend its lifetime.

        Returns ``None`` if the key is absent or has expired.
        """
        evicted = None
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            value, expires_at = entry
            now = time.monotonic()
            if now > expires_at:
                del self._store[key]
                self._misses += 1
                evicted = (key, value)
                value = None
            else:
                self._store[key] = (value, now + self._ttl)
                self._hits += 1
        if evicted is not None:
            self._notify(*evicted)
        return value

    def set(self, key: Any, value: Any) -> None:
        """Store *value* under *key*, evicting the stalest entry if full."""
        evicted = None
        with self._lock:
            if key not in self._store and len(self._store) >= self._maxsize:
                oldest_key = min(self._store, key=lambda k: self._store[k][1])
                evicted = (oldest_key, self._store.pop(oldest_key)[0])
            self._store[key] = (value, time.monotonic() + self._ttl)
        if evicted is not None:
            self._notify(*evicted)

    def pop(self, key: Any) -> Any | None:
        """Remove and return the value for *key* (``None`` if absent).

        Explicit removal does not trigger ``on_evict``.
        """
        with self._lock:
            entry = self._store.pop(key, None)
        return entry[0] if entry is not None else None

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = time.monotonic()
        with self._lock:
            expired = [(k, v) for k, (v, exp) in self._store.items() if now > exp]
            for k, _ in expired:
                del self._store[k]
        for k, v in expired:
            self._notify(k, v)
        return len(expired)

    def clear(self) -> None:
        """Remove all entries and reset statistics."""
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int]:
        """Return ``hits``, ``misses`` and live ``size``."""
        self.purge_expired()
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._store),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _notify(self, key: Any, value: Any) -> None:
        if self._on_evict is not None:
            self._on_evict(key, value)
