from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass
class RateLimiter:
    """
    Fixed-window request counter per client id.

    The first request of a client (or the first after its window expired)
    opens a new window of `window_s` seconds; at most `max_requests` are
    allowed inside it.

    When a new client arrives and `evict_above` windows are already tracked,
    `allow()` first drops every expired window.
    """

    window_s: float = 60.0
    max_requests: int = 10
    clock: Callable[[], float] = time.monotonic
    evict_above: int = 1024
    _windows: Dict[str, _Window] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def allow(self, client_id: str) -> bool:
        now = self.clock()
        with self._lock:
            win = self._windows.get(client_id)
            if win is None or now > win.reset_at:
                if win is None and len(self._windows) >= self.evict_above:
                    self._evict_expired(now)
                self._windows[client_id] = _Window(count=1, reset_at=now + self.window_s)
                return True

            if win.count >= self.max_requests:
                return False

            win.count += 1
            return True

    def _evict_expired(self, now: float) -> int:
        # caller holds self._lock
        expired = [cid for cid, win in self._windows.items() if now > win.reset_at]
        for cid in expired:
            del self._windows[cid]
        return len(expired)

    def prune(self) -> int:
        """Drop expired windows; returns how many were removed."""
        now = self.clock()
        with self._lock:
            return self._evict_expired(now)

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
