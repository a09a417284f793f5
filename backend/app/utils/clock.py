import threading
import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class MonotonicClock:
    """Wraps a clock so successive samples never go backwards."""

    def __init__(self, source: Clock | None = None):
        self._source = source or SystemClock()
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            t = self._source.now()
            if t < self._last:
                t = self._last
            self._last = t
            return t


def to_datetime(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


default_clock = MonotonicClock()
