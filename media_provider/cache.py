from __future__ import annotations

import logging
import time
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 60


class TimedCache(Generic[T]):
    """In-memory value that is refetched once it is older than ``ttl_seconds``.

    The value and its fetch time live in one tuple so readers never see a
    fresh value with a stale timestamp. Concurrent callers may fetch at the
    same time when the entry expires; the last fetch to finish wins.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], T],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._fetch = fetch
        self._clock = clock
        self._entry: Optional[tuple[T, float]] = None

    def get(self) -> T:
        entry = self._entry
        if entry is not None and self._clock() - entry[1] < self.ttl_seconds:
            logger.debug("Cache hit for %s", self.name)
            return entry[0]
        logger.debug("Cache miss for %s; fetching", self.name)
        value = self._fetch()
        self._entry = (value, self._clock())
        return value

    @property
    def cached_at(self) -> Optional[float]:
        entry = self._entry
        return entry[1] if entry else None
