"""
Rate cache — per-pair exchange rates with a freshness window.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from fundwise.models.funding import ExchangeRate

logger = logging.getLogger("fundwise.rates.cache")

DEFAULT_TTL_SECONDS = 60.0


class RateCache:
    """In-process cache of ExchangeRate entries keyed by ``"FROM/TO"``.

    Entries are replaced, never mutated. Writes are last-write-wins: two
    concurrent misses for the same pair may both fetch, and the later write
    simply overwrites the earlier one.

    Args:
        ttl_seconds: How long an entry stays fresh.
        clock: Returns the current time in seconds. Inject a fake for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, ExchangeRate] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pair: str) -> bool:
        return self.get(pair) is not None

    def now_ms(self) -> int:
        """Current clock reading in epoch milliseconds."""
        return int(self._clock() * 1000)

    def get(self, pair: str) -> ExchangeRate | None:
        """Return the entry for ``pair`` if it is still fresh."""
        entry = self._entries.get(pair)
        if entry is None:
            return None
        age_ms = self.now_ms() - entry.timestamp
        if age_ms >= self.ttl_seconds * 1000:
            logger.debug("Cache entry for %s is stale (%d ms old)", pair, age_ms)
            return None
        return entry

    def set(self, pair: str, rate: ExchangeRate) -> None:
        self._entries[pair] = rate

    def clear(self) -> None:
        self._entries.clear()
