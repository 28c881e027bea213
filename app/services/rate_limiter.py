from __future__ import annotations

import threading
import time
from typing import Callable


class InMemoryFixedWindowRateLimiter:
    """Per-key request counter over one-minute windows, owned by a single app instance."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[int, int]] = {}

    def is_allowed(self, key: str, limit_per_min: int) -> bool:
        safe_key = key or "__anonymous__"
        current_window = int(self._clock() // 60)

        with self._lock:
            self._drop_stale_windows(current_window)
            _, count = self._windows.get(safe_key, (current_window, 0))
            if count >= limit_per_min:
                return False
            self._windows[safe_key] = (current_window, count + 1)
            return True

    def _drop_stale_windows(self, current_window: int) -> None:
        stale = [key for key, (window, _) in self._windows.items() if window != current_window]
        for key in stale:
            del self._windows[key]

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
