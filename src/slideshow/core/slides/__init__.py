"""Slides package — public API re-exports."""

from .slide import Slide, SlideKind, SlideSequence, SlideShownEvent
from .compiler import (
    FALLBACK_DEFAULT_DURATION,
    KIND_DURATIONS,
    compile_slides,
    validate_default_duration,
)

__all__ = [
    "Slide",
    "SlideKind",
    "SlideSequence",
    "SlideShownEvent",
    "FALLBACK_DEFAULT_DURATION",
    "KIND_DURATIONS",
    "compile_slides",
    "validate_default_duration",
]
