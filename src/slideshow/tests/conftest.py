"""Shared fixtures: deterministic time and timers for playback tests."""

import pytest

from slideshow.core.products import Product, ProductSlideSettings, Settings
from slideshow.playback.clock import PlaybackClock


class FakeTime:
    """Callable time source that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class ManualTimer:
    """Stand-in for threading.Timer that never starts a thread."""

    def __init__(self, interval, function, args=None, kwargs=None, deadline=0.0):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.deadline = deadline
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.finished = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        """Run the callback as the timer thread would, cancelled or not."""
        self.finished = True
        self.function(*self.args, **self.kwargs)


class ManualTimerFactory:
    """Creates ManualTimers and fires them as fake time advances."""

    def __init__(self, fake_time: FakeTime):
        self.time = fake_time
        self.timers: list[ManualTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = ManualTimer(interval, function, args, kwargs,
                            deadline=self.time.now + interval)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers
                if t.started and not t.cancelled and not t.finished]

    def advance(self, seconds: float):
        target = self.time.now + seconds
        while True:
            due = [t for t in self.pending if t.deadline <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.deadline)
            self.time.now = max(self.time.now, timer.deadline)
            timer.fire()
        self.time.now = target


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def timers(fake_time):
    return ManualTimerFactory(fake_time)


@pytest.fixture
def clock_factory(fake_time, timers):
    def factory(lock=None):
        return PlaybackClock(time_fn=fake_time, timer_factory=timers, lock=lock)
    return factory


@pytest.fixture
def clock(clock_factory):
    return clock_factory()


@pytest.fixture
def shown():
    """Events collected by a renderer; pass ``shown.append`` as the renderer."""
    return []


def make_product(product_id: str, features: int = 2, specs: int = 2,
                 duration=None) -> Product:
    return Product(
        id=product_id,
        name=f"Product {product_id}",
        features=[f"Feature {i}" for i in range(features)],
        specifications={f"Spec {i}": f"Value {i}" for i in range(specs)},
        slide_settings=(ProductSlideSettings(duration=duration)
                        if duration is not None else None),
    )


@pytest.fixture
def settings():
    return Settings(default_slide_duration=6, auto_advance=True, transition_speed_ms=800)


@pytest.fixture
def two_products():
    return [make_product("a"), make_product("b")]
