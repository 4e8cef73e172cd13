"""Playback state machine for one compiled slide sequence."""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from ..core.errors import EmptySequenceInvariantViolation, IndexOutOfRange
from ..core.products import Settings
from ..core.slides import Slide, SlideSequence, SlideShownEvent
from .clock import PlaybackClock
from .progress import ProgressReporter

logger = logging.getLogger("SlideshowMCP.playback.controller")

Renderer = Callable[[SlideShownEvent], None]


class PlaybackStatus(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackController:
    """Owns the current index and play/pause state of one SlideSequence.

    This is the only object that mutates playback state. All public
    operations and the clock's fire path run under one re-entrant lock,
    shared with the clock, so a UI call and a timer fire never interleave.

    A controller is bound to one sequence for life; recompiling means
    building a new controller and calling ``dispose()`` on the old one.
    """

    def __init__(self, sequence: SlideSequence, settings: Settings,
                 renderer: Optional[Renderer] = None,
                 clock_factory: Optional[Callable[..., PlaybackClock]] = None):
        if len(sequence) == 0:
            raise EmptySequenceInvariantViolation(
                "PlaybackController requires at least one slide"
            )
        self._sequence = sequence
        self._auto_advance = settings.auto_advance
        self._renderer = renderer
        self._lock = threading.RLock()
        factory = clock_factory or PlaybackClock
        self._clock = factory(lock=self._lock)
        self._current_index = 0
        self._disposed = False
        self._status = PlaybackStatus.STOPPED
        self._progress = ProgressReporter(self)

    # ── Read-only state ─────────────────────────────────────────────────

    @property
    def sequence(self) -> SlideSequence:
        return self._sequence

    @property
    def clock(self) -> PlaybackClock:
        return self._clock

    @property
    def auto_advance(self) -> bool:
        return self._auto_advance

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_slide(self) -> Slide:
        return self._sequence[self._current_index]

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    @property
    def is_playing(self) -> bool:
        return self._status == PlaybackStatus.PLAYING

    @property
    def total(self) -> int:
        return len(self._sequence)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def progress_fraction(self) -> float:
        return self._progress.progress_fraction()

    # ── Transport controls ──────────────────────────────────────────────

    def start(self, playing: Optional[bool] = None):
        """Show the first slide and begin playback.

        With auto-advance off the controller waits in Paused. ``playing=False``
        also starts Paused, so a host can carry a viewer's pause across a
        recompilation.
        """
        with self._lock:
            if self._disposed:
                return
            self._clock.cancel()
            self._current_index = 0
            self._status = (PlaybackStatus.PLAYING
                            if self._auto_advance and playing is not False
                            else PlaybackStatus.PAUSED)
            logger.info(f"Slideshow started ({self.total} slides, {self._status.value})")
            self._show_current()
            self._arm_if_playing()

    def next(self):
        with self._lock:
            if self._disposed:
                return
            self._move_to((self._current_index + 1) % self.total)

    def previous(self):
        with self._lock:
            if self._disposed:
                return
            if self._current_index == 0:
                self._move_to(self.total - 1)
            else:
                self._move_to(self._current_index - 1)

    def go_to(self, index: int):
        """Jump straight to ``index``.

        Raises IndexOutOfRange (leaving state untouched) if the index is
        not inside the sequence.
        """
        with self._lock:
            if isinstance(index, bool) or not isinstance(index, int) \
                    or not 0 <= index < self.total:
                raise IndexOutOfRange(index, self.total)
            if self._disposed:
                return
            self._move_to(index)

    def toggle_play_pause(self):
        """Flip between playing and paused.

        Resuming restarts the full duration of the current slide rather
        than continuing from where the countdown stopped.
        """
        with self._lock:
            if self._disposed:
                return
            if self._status == PlaybackStatus.PLAYING:
                self._status = PlaybackStatus.PAUSED
                self._clock.cancel()
            else:
                self._status = PlaybackStatus.PLAYING
                self._arm_if_playing()
            logger.debug(f"Playback {self._status.value} at slide {self._current_index}")

    def on_advance_due(self):
        """Clock callback: advance unless playback was paused meanwhile."""
        with self._lock:
            if self._disposed or not (self.is_playing and self._auto_advance):
                logger.debug("Ignoring stale advance callback")
                return
            self.next()

    def dispose(self):
        """Cancel any pending advance and stop for good.

        Every transport call on a disposed controller is a no-op.
        """
        with self._lock:
            self._disposed = True
            self._status = PlaybackStatus.STOPPED
            self._clock.cancel()

    # ── Internals ───────────────────────────────────────────────────────

    def _move_to(self, index: int):
        self._clock.cancel()
        self._current_index = index
        self._show_current()
        self._arm_if_playing()

    def _arm_if_playing(self):
        if self._disposed:
            return
        if self.is_playing and self._auto_advance:
            self._clock.schedule(self.current_slide.duration_ms, self.on_advance_due)

    def _show_current(self):
        event = SlideShownEvent(
            slide=self.current_slide,
            index=self._current_index,
            total=self.total,
        )
        logger.debug(
            f"Showing slide {event.index + 1}/{event.total} ({event.slide.kind.value})"
        )
        if self._renderer is not None:
            self._renderer(event)
