"""Cancellable quiescence timer for coalescing bursts of mutations."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


def thread_timer(interval: float, callback: Callable[[], None]) -> Timer:
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    return timer


class Debouncer:
    """Runs ``callback`` once no new trigger has arrived for ``interval`` seconds.

    Each :meth:`trigger` supersedes the pending timer. An interval of zero runs
    the callback inline.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], None],
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.interval = max(0.0, interval)
        self._callback = callback
        self._timer_factory = timer_factory or thread_timer
        self._lock = threading.Lock()
        self._pending: Optional[Timer] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def trigger(self) -> None:
        if self.interval == 0:
            self.cancel()
            self._callback()
            return
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = self._timer_factory(self.interval, lambda: self._fire(generation))
            self._pending.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer that lost the race with a newer trigger does nothing.
            if generation != self._generation or self._pending is None:
                logger.debug("Dropping superseded debounce generation %s", generation)
                return
            self._pending = None
        self._callback()

    def cancel(self) -> bool:
        """Cancel the pending run; returns whether one was pending."""

        with self._lock:
            pending, self._pending = self._pending, None
            self._generation += 1
        if pending is not None:
            pending.cancel()
            return True
        return False


__all__ = ["Debouncer", "Timer", "TimerFactory", "thread_timer"]
