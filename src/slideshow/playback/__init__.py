"""Timer-driven playback: clock, controller, progress."""

from .clock import PlaybackClock
from .controller import PlaybackController, PlaybackStatus
from .progress import ProgressReporter

__all__ = [
    "PlaybackClock",
    "PlaybackController",
    "PlaybackStatus",
    "ProgressReporter",
]
