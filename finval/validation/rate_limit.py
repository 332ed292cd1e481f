"""Fixed-window rate limiting for validation call sites.

This is a user-experience throttle, not a security control. The
in-process limiter is guarded by a lock, but a store shared between
processes is read and written non-atomically, so concurrent attempts under
the same key may both pass before either is counted.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from finval.validation.protocols import RateLimitStore

DEFAULT_WINDOW_SECONDS = 60.0
DEFAULT_MAX_ATTEMPTS = 10


@dataclass(frozen=True)
class WindowState:
    """Attempts counted in the window that opened at ``window_start``."""

    count: int
    window_start: float


class InMemoryRateLimitStore:
    """Dict-backed RateLimitStore for a single process.

    Expired windows are dropped by ``discard_expired``, which the limiter
    calls at most once per window, so the dict holds only keys seen in
    roughly the last two windows.
    """

    def __init__(self) -> None:
        self._windows: dict[str, WindowState] = {}

    def __len__(self) -> int:
        return len(self._windows)

    def get(self, key: str) -> WindowState | None:
        return self._windows.get(key)

    def set(self, key: str, state: WindowState) -> None:
        self._windows[key] = state

    def discard_expired(self, opened_at_or_before: float) -> int:
        """Remove windows that opened at or before the cutoff; return how many."""
        stale = [k for k, s in self._windows.items() if s.window_start <= opened_at_or_before]
        for key in stale:
            del self._windows[key]
        return len(stale)

    def clear(self) -> None:
        self._windows.clear()


class FixedWindowRateLimiter:
    """Allows ``max_attempts`` per key in each ``window_seconds`` window.

    A window opens with the first attempt for a key and lasts
    ``window_seconds``; the attempt after it expires opens a new window.

    Example:
        >>> limiter = FixedWindowRateLimiter(max_attempts=2)
        >>> [limiter.check_and_increment("user:insert") for _ in range(3)]
        [True, True, False]
    """

    def __init__(
        self,
        store: RateLimitStore | None = None,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.window_seconds = window_seconds
        self.max_attempts = max_attempts
        self.clock = clock
        self._lock = threading.Lock()
        self._last_sweep: float | None = None

    def _sweep(self, now: float) -> None:
        if self._last_sweep is None:
            self._last_sweep = now
        elif now - self._last_sweep >= self.window_seconds:
            self.store.discard_expired(now - self.window_seconds)
            self._last_sweep = now

    def check_and_increment(self, key: str) -> bool:
        with self._lock:
            now = self.clock()
            self._sweep(now)
            state = self.store.get(key)

            if state is None or now - state.window_start >= self.window_seconds:
                self.store.set(key, WindowState(count=1, window_start=now))
                return True

            if state.count >= self.max_attempts:
                return False

            self.store.set(key, WindowState(count=state.count + 1, window_start=state.window_start))
            return True
