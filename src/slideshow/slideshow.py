"""Slideshow host: ties a product store to a compiled sequence and its controller."""

import logging
import threading
from typing import Callable, Optional, Sequence

from .core.products import Product, Settings
from .core.slides import SlideSequence, compile_slides
from .core.store import ProductStore
from .playback.clock import PlaybackClock
from .playback.controller import PlaybackController, Renderer

logger = logging.getLogger("SlideshowMCP.slideshow")


class Slideshow:
    """One running presentation.

    Holds the current SlideSequence and the PlaybackController bound to
    it. Any recompilation disposes the old controller and builds a fresh
    one starting at slide 0. A viewer's pause survives recompilation.

    Controller swaps and transport calls are serialized by one lock, so a
    transport call never lands on a controller that was just replaced.
    """

    def __init__(self, store: ProductStore,
                 renderer: Optional[Renderer] = None,
                 clock_factory: Optional[Callable[..., PlaybackClock]] = None):
        self._store = store
        self._renderer = renderer
        self._clock_factory = clock_factory
        self._lock = threading.RLock()
        self._started = False
        self._controller: Optional[PlaybackController] = None
        self._product_count = 0
        self._unsubscribe = None
        subscribe = getattr(store, "subscribe", None)
        if subscribe is not None:
            self._unsubscribe = subscribe(self.recompile)
        self.recompile()

    @property
    def controller(self) -> PlaybackController:
        return self._controller

    @property
    def sequence(self) -> SlideSequence:
        return self._controller.sequence

    def recompile(self, products: Optional[Sequence[Product]] = None,
                  settings: Optional[Settings] = None) -> SlideSequence:
        """Rebuild the sequence (from the store unless given) and replace the controller."""
        if products is None:
            products = self._store.get_products()
        if settings is None:
            settings = self._store.get_settings()

        sequence = compile_slides(products, settings)
        with self._lock:
            playing = None
            old = self._controller
            if old is not None:
                # A viewer's pause carries over to the new controller.
                if old.auto_advance and not old.is_playing:
                    playing = False
                old.dispose()
            self._controller = PlaybackController(
                sequence, settings,
                renderer=self._renderer,
                clock_factory=self._clock_factory,
            )
            self._product_count = len(products)
            logger.debug(f"Replaced controller ({len(sequence)} slides, started={self._started})")
            if self._started:
                self._controller.start(playing=playing)
        return sequence

    def close(self):
        """Stop playback and detach from the store."""
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
            self._controller.dispose()
            self._started = False

    # ── Transport controls ──────────────────────────────────────────────

    def start(self):
        with self._lock:
            self._started = True
            self._controller.start()

    def next(self):
        with self._lock:
            self._controller.next()

    def previous(self):
        with self._lock:
            self._controller.previous()

    def go_to(self, index: int):
        with self._lock:
            self._controller.go_to(index)

    def toggle_play_pause(self):
        with self._lock:
            self._controller.toggle_play_pause()

    def progress_fraction(self) -> float:
        return self._controller.progress_fraction()

    def handle_key(self, key: str) -> bool:
        """Apply a keyboard shortcut. Returns False for keys with no binding."""
        with self._lock:
            if key in ("ArrowRight", " "):
                self.next()
            elif key == "ArrowLeft":
                self.previous()
            elif key == "Home":
                self.go_to(0)
            elif key == "End":
                self.go_to(self._controller.total - 1)
            else:
                return False
            return True

    def status(self) -> dict:
        controller = self._controller
        return {
            "total_products": self._product_count,
            "total_slides": controller.total,
            "current_index": controller.current_index,
            "current_kind": controller.current_slide.kind.value,
            "state": controller.status.value,
            "auto_advance": controller.auto_advance,
            "progress": round(controller.progress_fraction(), 3),
        }
