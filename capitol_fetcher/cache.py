"""
In-memory TTL cache for serialized fetch results.

Process lifetime only. Expired entries are dropped lazily on read; until then they
are invisible to get/stats/clear, so an expired key always behaves like a missing one.
"""
from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class CacheEntry:
    value: str
    inserted_at: float
    ttl_seconds: float

    def expired(self, now: float) -> bool:
        return now >= self.inserted_at + self.ttl_seconds


class ResponseCache:
    """
    Thread-safe key -> serialized body store.

    One entry per key; a later put replaces the value and restarts its TTL clock.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def put(self, key: str, value: str, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if not isinstance(value, str):
            raise TypeError("cache values must be serialized strings")
        with self._lock:
            self._entries[key] = CacheEntry(value=value, inserted_at=self._clock(), ttl_seconds=float(ttl_seconds))

    def clear(self) -> dict:
        with self._lock:
            now = self._clock()
            removed = sum(1 for e in self._entries.values() if not e.expired(now))
            self._entries.clear()
        return {"entries_removed": removed}

    def stats(self) -> dict:
        """Live entries only. Read-only: nothing is evicted and no TTL is touched."""
        with self._lock:
            now = self._clock()
            live = {k: e.value for k, e in self._entries.items() if not e.expired(now)}
        keys = sorted(live)
        return {
            "count": len(keys),
            "keys": keys,
            "approximate_size_bytes": len(json.dumps(live, ensure_ascii=False).encode("utf-8")),
        }

    def __len__(self) -> int:
        return self.stats()["count"]
