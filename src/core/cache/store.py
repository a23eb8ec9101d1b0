"""
Cache Store
===========

Thread-safe in-memory store for rendered images and measured card sizes.

Entries expire a fixed time after insertion; every successful read pushes the
expiry forward by the full TTL. Image entries are charged their byte length
against the budget and are refused, never forced in, when the budget or the
entry limit is reached. Size entries cost one unit and are always admitted,
displacing the least recently used entries if the store is full.
"""

from collections import OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional, Union
import time

from src.config.logging import get_logger
from src.config.settings import Settings
from src.core.cache.keys import CacheKey, CacheNamespace
from src.models.schemas import CardSize

logger = get_logger(__name__)

CacheValue = Union[bytes, CardSize]

SIZE_ENTRY_COST = 1


@dataclass
class _Entry:
    value: CacheValue
    cost: int
    expires_at: float


class CacheStore:
    """Byte-budgeted TTL cache with slide-on-read expiry."""

    def __init__(
        self,
        ttl: float = 600,
        max_bytes: int = 50 * 1024 * 1024,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_bytes < 1 or max_entries < 1:
            raise ValueError("max_bytes and max_entries must be >= 1")
        self.ttl = ttl
        self.max_bytes = max_bytes
        self.max_entries = max_entries
        self._clock = clock
        self._lock = Lock()
        self._entries: "OrderedDict[CacheKey, _Entry]" = OrderedDict()
        self._resident_bytes = 0
        self.logger: Any = logger.bind(component="cache_store")

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheStore":
        return cls(
            ttl=settings.cache_ttl,
            max_bytes=settings.cache_max_bytes,
            max_entries=settings.cache_max_entries,
        )

    def get(self, key: CacheKey) -> Optional[CacheValue]:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            now = self._clock()
            if now > entry.expires_at:
                self._discard(key)
                return None

            entry.expires_at = now + self.ttl
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: CacheKey, value: CacheValue) -> bool:
        """
        Admit a value into the cache.

        Returns:
            True if the value was stored, False if admission was refused.
        """
        cost = self._cost(key, value)

        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            if key.namespace is CacheNamespace.SIZE:
                self._discard(key)
                while self._entries and (
                    len(self._entries) >= self.max_entries
                    or self._resident_bytes + cost > self.max_bytes
                ):
                    oldest, _ = next(iter(self._entries.items()))
                    self._discard(oldest)
            else:
                previous = self._entries.get(key)
                reclaimed = previous.cost if previous else 0
                entry_count = len(self._entries) - (1 if previous else 0)
                if (
                    self._resident_bytes - reclaimed + cost > self.max_bytes
                    or entry_count >= self.max_entries
                ):
                    self.logger.warning(
                        "Cache full, result not cached",
                        key=str(key),
                        size=cost,
                        resident_bytes=self._resident_bytes,
                        max_bytes=self.max_bytes,
                        entries=len(self._entries),
                    )
                    return False
                self._discard(key)

            self._entries[key] = _Entry(value=value, cost=cost, expires_at=now + self.ttl)
            self._resident_bytes += cost
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._resident_bytes = 0

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "resident_bytes": self._resident_bytes,
                "max_bytes": self.max_bytes,
                "max_entries": self.max_entries,
                "ttl": self.ttl,
            }

    @property
    def resident_bytes(self) -> int:
        return self._resident_bytes

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _cost(self, key: CacheKey, value: CacheValue) -> int:
        if key.namespace is CacheNamespace.SIZE:
            return SIZE_ENTRY_COST
        return len(value)  # type: ignore[arg-type]

    def _discard(self, key: CacheKey) -> None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._resident_bytes -= entry.cost

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            self._discard(key)
