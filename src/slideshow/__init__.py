"""Product slideshow engine: slide compilation and timed playback."""

from .core.errors import (
    ConfigurationError,
    EmptySequenceInvariantViolation,
    IndexOutOfRange,
    SlideshowError,
)
from .core.products import Pricing, Product, ProductImage, ProductSlideSettings, Settings
from .core.slides import Slide, SlideKind, SlideSequence, SlideShownEvent, compile_slides
from .core.store import InMemoryProductStore, ProductStore, sample_products
from .playback import PlaybackClock, PlaybackController, PlaybackStatus, ProgressReporter
from .slideshow import Slideshow

__all__ = [
    "ConfigurationError",
    "EmptySequenceInvariantViolation",
    "IndexOutOfRange",
    "SlideshowError",
    "Pricing",
    "Product",
    "ProductImage",
    "ProductSlideSettings",
    "Settings",
    "Slide",
    "SlideKind",
    "SlideSequence",
    "SlideShownEvent",
    "compile_slides",
    "InMemoryProductStore",
    "ProductStore",
    "sample_products",
    "PlaybackClock",
    "PlaybackController",
    "PlaybackStatus",
    "ProgressReporter",
    "Slideshow",
]
