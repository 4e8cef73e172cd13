"""Single-shot advance timer with generation-based cancellation."""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger("SlideshowMCP.playback.clock")


class PlaybackClock:
    """Holds at most one pending callback at a time.

    Every ``schedule()`` or ``cancel()`` bumps a generation counter. A timer
    thread that wakes up for an older generation does nothing, so a
    cancelled callback can never run even if the underlying
    ``threading.Timer`` had already started firing.

    ``lock`` may be shared with the owner (the controller passes its own
    re-entrant lock) so the fire path and navigation calls are serialized
    through one lock.
    """

    def __init__(self,
                 time_fn: Callable[[], float] = time.monotonic,
                 timer_factory=threading.Timer,
                 lock: Optional[threading.RLock] = None):
        self._time_fn = time_fn
        self._timer_factory = timer_factory
        self._lock = lock if lock is not None else threading.RLock()
        self._generation = 0
        self._timer = None
        self._armed_at: Optional[float] = None
        self._duration = 0.0

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_armed(self) -> bool:
        with self._lock:
            return self._armed_at is not None

    def schedule(self, duration_ms: float, callback: Callable[[], None]) -> int:
        """Arm ``callback`` to run after ``duration_ms``, replacing any pending one.

        Returns the generation id of the new instance.
        """
        with self._lock:
            self._cancel_locked()
            generation = self._generation
            self._duration = max(0.0, duration_ms / 1000.0)
            self._armed_at = self._time_fn()
            timer = self._timer_factory(
                self._duration, self._fire, args=(generation, callback)
            )
            timer.daemon = True
            self._timer = timer
            timer.start()
            logger.debug(f"Armed generation {generation} for {self._duration:.3f}s")
            return generation

    def cancel(self):
        """Drop the pending callback, if any. Safe to call when idle."""
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._armed_at = None
        self._duration = 0.0

    def elapsed_fraction(self) -> float:
        """Progress toward the armed duration in [0, 1]; 0 when idle."""
        with self._lock:
            if self._armed_at is None:
                return 0.0
            if self._duration <= 0:
                return 1.0
            elapsed = self._time_fn() - self._armed_at
            return min(1.0, max(0.0, elapsed / self._duration))

    def _fire(self, generation: int, callback: Callable[[], None]):
        with self._lock:
            if generation != self._generation or self._armed_at is None:
                logger.debug(f"Discarding stale timer generation {generation}")
                return
            self._timer = None
            self._armed_at = None
            self._duration = 0.0
            callback()
