from __future__ import annotations
from collections.abc import Callable
from dataclasses import dataclass
import logging
import threading
import time
from typing import Generic, TypeVar

T = TypeVar("T")

log = logging.getLogger(__name__)

#: How long (in seconds) a Git status stays fresh
GIT_TTL = 2.0

#: How long (in seconds) directory, home & hostname lookups stay fresh
PATH_TTL = 5.0

#: How long (in seconds) a loaded configuration stays fresh
CONFIG_TTL = 60.0


@dataclass(frozen=True)
class CachedValue(Generic[T]):
    """A value paired with the (monotonic) instant at which it was captured"""

    value: T
    captured_at: float

    def is_fresh(self, now: float, ttl: float | None) -> bool:
        """
        Return `True` iff the value is still valid at time ``now``, i.e., if
        it is strictly younger than ``ttl`` seconds.  A ``ttl`` of `None`
        means the value never expires.
        """
        return ttl is None or now - self.captured_at < ttl


class TTLCache(Generic[T]):
    """
    A single cache slot whose contents expire ``ttl`` seconds after they were
    stored.  All access to the slot goes through a lock, so readers only ever
    see either the previous value or the refreshed one.
    """

    def __init__(
        self, ttl: float | None, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.ttl = ttl
        self.clock = clock
        self._lock = threading.Lock()
        self._slot: CachedValue[T] | None = None

    def _fresh(self) -> T | None:
        # Must be called with the lock held
        if self._slot is not None and self._slot.is_fresh(self.clock(), self.ttl):
            return self._slot.value
        return None

    def get(self) -> T | None:
        """Return the cached value if it is still fresh, else `None`"""
        with self._lock:
            return self._fresh()

    def put(self, value: T) -> None:
        with self._lock:
            self._slot = CachedValue(value, self.clock())

    def get_or_compute(self, compute: Callable[[], T | None]) -> T | None:
        """
        Return the cached value if it is still fresh.  Otherwise, call
        ``compute()`` while holding the lock, store its result (unless it is
        `None`), and return it.
        """
        with self._lock:
            value = self._fresh()
            if value is not None:
                log.debug("Cache hit")
                return value
            value = compute()
            if value is not None:
                self._slot = CachedValue(value, self.clock())
            return value
