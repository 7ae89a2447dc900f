"""In-memory TTL cache for proxied vendor responses."""
from __future__ import annotations

import time
from typing import Any, Callable

from cachetools import TTLCache


DEFAULT_TTL_SECONDS = 60
DEFAULT_MAXSIZE = 1024


class ResponseCache:
    """
    Process-lifetime cache with a fixed TTL applied at set time.

    Expired entries read as absent. Eviction is lazy (on access or insert),
    and the least recently used entries are dropped once maxsize is reached.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        maxsize: int = DEFAULT_MAXSIZE,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._entries: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)

    def get(self, key: str) -> Any | None:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        # Drop expired entries first so the count reflects visible entries
        self._entries.expire()
        return len(self._entries)
