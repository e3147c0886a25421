"""Per-client token bucket request throttle."""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class TokenResult:
    allowed: bool
    remaining: int


class TokenBucket:
    """Fixed capacity, continuous refill. New clients start with a full bucket.

    A bucket that has refilled to capacity behaves exactly like a new one, so
    such buckets are swept out once per full-refill interval to keep memory
    bounded by the number of recently active clients.
    """

    def __init__(self, capacity: float = 8, refill_per_sec: float = 0.5,
                 clock: Callable[[], float] = time.monotonic):
        self.capacity = capacity
        self.refill_per_sec = refill_per_sec
        self._clock = clock
        self._buckets: dict[str, tuple[float, float]] = {}  # key -> (tokens, last refill)
        self._lock = threading.Lock()
        self._sweep_every = capacity / refill_per_sec if refill_per_sec > 0 else math.inf
        self._last_sweep = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def _sweep(self, now: float) -> None:
        full = [
            key for key, (tokens, last) in self._buckets.items()
            if tokens + (now - last) * self.refill_per_sec >= self.capacity
        ]
        for key in full:
            del self._buckets[key]
        self._last_sweep = now

    def take_token(self, key: str) -> TokenResult:
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self._sweep_every:
                self._sweep(now)
            tokens, last = self._buckets.get(key, (self.capacity, now))
            elapsed = now - last
            if elapsed > 0:
                tokens = min(self.capacity, tokens + elapsed * self.refill_per_sec)
                last = now
            if tokens >= 1:
                tokens -= 1
                self._buckets[key] = (tokens, last)
                return TokenResult(allowed=True, remaining=math.floor(tokens))
            self._buckets[key] = (tokens, last)
            return TokenResult(allowed=False, remaining=0)
