"""Per-identifier login cooldown.

Tracks the last login attempt per email and rejects a new attempt that
arrives within the cooldown window. Entries expire once their cooldown has
elapsed and the store is capped, so it cannot grow without bound. One
instance lives on the application state and is injected into the login
route through a dependency.
"""

import math
import threading
import time
from collections import OrderedDict
from typing import Callable

from shopcore.domain.exceptions import RateLimitedError


class LoginThrottle:
    """Thread-safe, bounded, expiring cooldown store."""

    def __init__(
        self,
        cooldown_seconds: float = 5.0,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the throttle.

        Args:
            cooldown_seconds: Minimum delay between attempts for one identifier.
            max_entries: Maximum number of identifiers tracked at once. The
                least recently attempted identifier is evicted first.
            clock: Monotonic time source, injectable for tests.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.cooldown_seconds = cooldown_seconds
        self.max_entries = max_entries
        self._clock = clock
        # identifier -> last attempt, ordered oldest first
        self._attempts: OrderedDict[str, float] = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def _normalize(identifier: str) -> str:
        return identifier.strip().lower()

    def _evict(self, now: float) -> None:
        while self._attempts:
            oldest_key, oldest_at = next(iter(self._attempts.items()))
            if now - oldest_at < self.cooldown_seconds:
                break
            del self._attempts[oldest_key]
        while len(self._attempts) > self.max_entries:
            self._attempts.popitem(last=False)

    def hit(self, identifier: str) -> float | None:
        """Register an attempt.

        Args:
            identifier: Login identifier (email).

        Returns:
            None if the attempt may proceed (and it is recorded), otherwise
            the seconds remaining until the cooldown elapses. Rejected
            attempts do not extend the window.
        """
        key = self._normalize(identifier)
        now = self._clock()

        with self._lock:
            last = self._attempts.get(key)
            if last is not None:
                elapsed = now - last
                if elapsed < self.cooldown_seconds:
                    return self.cooldown_seconds - elapsed

            self._attempts[key] = now
            self._attempts.move_to_end(key)
            self._evict(now)
            return None

    def enforce(self, identifier: str) -> None:
        """Register an attempt or raise if it falls inside the cooldown.

        Raises:
            RateLimitedError: With a whole-second, positive retry-after.
        """
        remaining = self.hit(identifier)
        if remaining is not None:
            raise RateLimitedError(retry_after=max(1, math.ceil(remaining)))

    def __len__(self) -> int:
        with self._lock:
            return len(self._attempts)
