"""
Clock used by the scheduling engine.

Production code reads wall-clock UTC time; tests pin or advance a virtual
clock so sweeps and upcoming-window queries run deterministically.
"""
from datetime import datetime, timedelta
import threading

from remindpay.utils.timezone import to_utc_aware, utc_now


class Clock:
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    def now(self) -> datetime:
        return utc_now()


class FrozenClock(Clock):
    """Virtual clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self._lock = threading.Lock()
        self._now = to_utc_aware(now)

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, now: datetime) -> None:
        with self._lock:
            self._now = to_utc_aware(now)

    def advance(self, delta: timedelta) -> datetime:
        if delta < timedelta(0):
            raise ValueError("clock can only move forward")
        with self._lock:
            self._now = self._now + delta
            return self._now


system_clock = SystemClock()
