"""Exception types raised by the slideshow engine."""


class SlideshowError(Exception):
    """Base class for all slideshow engine errors."""


class ConfigurationError(SlideshowError):
    """A display setting (usually a slide duration) is unusable.

    The compiler recovers from this locally by substituting a fallback
    value, so callers never see it.
    """


class IndexOutOfRange(SlideshowError, IndexError):
    """A navigation target lies outside the compiled sequence."""

    def __init__(self, index: int, total: int):
        self.index = index
        self.total = total
        super().__init__(f"Slide index {index} out of range [0, {total})")


class EmptySequenceInvariantViolation(SlideshowError, RuntimeError):
    """A slide sequence with no slides was observed. Always a bug."""
