"""Tests for slideshow.playback.controller — PlaybackController state machine."""

import threading

import pytest
from unittest.mock import MagicMock

from slideshow.core.errors import EmptySequenceInvariantViolation, IndexOutOfRange
from slideshow.core.products import Settings
from slideshow.core.slides import Slide, SlideKind, SlideSequence, compile_slides
from slideshow.playback.controller import PlaybackController, PlaybackStatus

from conftest import make_product


@pytest.fixture
def sequence(settings, two_products):
    # brand 4s, reveal 6s, features 6s, specs 8s, reveal 6s, features 6s, specs 8s
    return compile_slides(two_products, settings)


@pytest.fixture
def controller(sequence, settings, shown, clock_factory):
    return PlaybackController(sequence, settings, renderer=shown.append,
                              clock_factory=clock_factory)


@pytest.fixture
def manual_controller(sequence, shown, clock_factory):
    return PlaybackController(sequence, Settings(auto_advance=False),
                              renderer=shown.append, clock_factory=clock_factory)


# ── Construction / start ────────────────────────────────────────────────

class TestStart:
    def test_initially_stopped(self, controller, shown):
        assert controller.status == PlaybackStatus.STOPPED
        assert controller.is_playing is False
        assert controller.current_index == 0
        assert shown == []

    def test_start_shows_first_slide_and_arms(self, controller, shown, timers):
        controller.start()
        assert controller.status == PlaybackStatus.PLAYING
        assert len(shown) == 1
        assert shown[0].index == 0
        assert shown[0].total == 7
        assert shown[0].slide.kind == SlideKind.BRAND_INTRO
        assert len(timers.pending) == 1
        assert timers.pending[0].interval == 4.0

    def test_start_without_auto_advance_is_paused(self, manual_controller, shown, timers):
        manual_controller.start()
        assert manual_controller.status == PlaybackStatus.PAUSED
        assert len(shown) == 1
        assert timers.pending == []

    def test_single_welcome_without_auto_advance(self, shown, clock_factory, timers):
        seq = compile_slides([], Settings(auto_advance=False))
        ctl = PlaybackController(seq, Settings(auto_advance=False),
                                 renderer=shown.append, clock_factory=clock_factory)
        ctl.start()
        assert [e.slide.kind for e in shown] == [SlideKind.WELCOME]
        assert timers.pending == []

    def test_start_paused_on_request(self, controller, shown, timers):
        controller.start(playing=False)
        assert controller.status == PlaybackStatus.PAUSED
        assert shown[-1].index == 0
        assert timers.pending == []

    def test_restart_resets_index(self, controller, shown):
        controller.start()
        controller.go_to(5)
        controller.start()
        assert controller.current_index == 0
        assert shown[-1].index == 0

    def test_empty_sequence_rejected(self, settings):
        empty = MagicMock()
        empty.__len__.return_value = 0
        with pytest.raises(EmptySequenceInvariantViolation):
            PlaybackController(empty, settings)

    def test_works_without_renderer(self, sequence, settings, clock_factory):
        ctl = PlaybackController(sequence, settings, clock_factory=clock_factory)
        ctl.start()
        ctl.next()
        assert ctl.current_index == 1


# ── Navigation ──────────────────────────────────────────────────────────

class TestNavigation:
    def test_next_n_times_returns_to_start(self, controller, sequence):
        controller.start()
        controller.go_to(3)
        for _ in range(len(sequence)):
            controller.next()
        assert controller.current_index == 3

    def test_next_wraps_at_end(self, controller):
        controller.start()
        controller.go_to(6)
        controller.next()
        assert controller.current_index == 0

    def test_previous_at_zero_wraps_to_last(self, controller, shown):
        controller.start()
        controller.previous()
        assert controller.current_index == 6
        assert shown[-1].index == 6

    def test_previous_steps_back(self, controller):
        controller.start()
        controller.go_to(4)
        controller.previous()
        assert controller.current_index == 3

    def test_each_move_emits_event(self, controller, shown):
        controller.start()
        controller.next()
        controller.next()
        controller.previous()
        assert [e.index for e in shown] == [0, 1, 2, 1]

    @pytest.mark.parametrize("bad", [-1, 7, 100])
    def test_go_to_out_of_range(self, controller, shown, bad):
        controller.start()
        controller.go_to(2)
        events_before = len(shown)
        with pytest.raises(IndexOutOfRange):
            controller.go_to(bad)
        assert controller.current_index == 2
        assert len(shown) == events_before

    def test_go_to_rejects_non_int(self, controller):
        with pytest.raises(IndexOutOfRange):
            controller.go_to(True)

    def test_go_to_out_of_range_keeps_timer(self, controller, timers):
        controller.start()
        pending = timers.pending
        with pytest.raises(IndexOutOfRange):
            controller.go_to(99)
        assert timers.pending == pending

    def test_navigation_keeps_play_state(self, controller, manual_controller):
        controller.start()
        controller.next()
        assert controller.status == PlaybackStatus.PLAYING
        manual_controller.start()
        manual_controller.next()
        assert manual_controller.status == PlaybackStatus.PAUSED

    def test_navigation_before_start(self, controller, timers, shown):
        controller.next()
        assert controller.current_index == 1
        assert controller.status == PlaybackStatus.STOPPED
        assert timers.pending == []
        assert shown[-1].index == 1

    def test_navigation_mid_countdown_rearms(self, controller, timers):
        controller.start()
        timers.advance(3.0)
        controller.next()  # slide 1: reveal, 6s
        timers.advance(3.0)
        assert controller.current_index == 1
        timers.advance(3.0)
        assert controller.current_index == 2
        assert len(timers.pending) == 1


# ── Auto-advance ────────────────────────────────────────────────────────

class TestAutoAdvance:
    def test_advances_after_slide_duration(self, controller, timers):
        controller.start()
        timers.advance(3.5)
        assert controller.current_index == 0
        timers.advance(0.5)
        assert controller.current_index == 1

    def test_uses_each_slides_duration(self, controller, timers):
        controller.start()
        timers.advance(4 + 6 + 6)
        assert controller.current_index == 3
        timers.advance(7.5)
        assert controller.current_index == 3
        timers.advance(0.5)
        assert controller.current_index == 4

    def test_full_loop_wraps(self, controller, sequence, timers):
        controller.start()
        timers.advance(sequence.total_duration)
        assert controller.current_index == 0

    def test_no_auto_advance_never_moves(self, manual_controller, timers):
        manual_controller.start()
        manual_controller.toggle_play_pause()
        timers.advance(60)
        assert manual_controller.current_index == 0
        assert manual_controller.is_playing is True


# ── Play / pause ────────────────────────────────────────────────────────

class TestTogglePlayPause:
    def test_double_toggle_restores_state(self, controller):
        controller.start()
        controller.go_to(2)
        controller.toggle_play_pause()
        controller.toggle_play_pause()
        assert controller.is_playing is True
        assert controller.current_index == 2

    def test_pause_cancels_pending_advance(self, controller, timers):
        controller.start()
        controller.toggle_play_pause()
        assert controller.status == PlaybackStatus.PAUSED
        assert timers.pending == []
        timers.advance(30)
        assert controller.current_index == 0

    def test_resume_restarts_full_duration(self, controller, timers):
        controller.start()
        timers.advance(3.0)
        controller.toggle_play_pause()
        controller.toggle_play_pause()
        timers.advance(3.0)
        assert controller.current_index == 0
        timers.advance(1.0)
        assert controller.current_index == 1

    def test_toggle_from_stopped_starts_playing(self, controller, timers, shown):
        controller.toggle_play_pause()
        assert controller.status == PlaybackStatus.PLAYING
        assert len(timers.pending) == 1
        assert shown == []

    def test_toggle_does_not_emit(self, controller, shown):
        controller.start()
        controller.toggle_play_pause()
        assert len(shown) == 1


# ── Stale callbacks ─────────────────────────────────────────────────────

class TestStaleCallbacks:
    def test_on_advance_due_ignored_when_paused(self, controller):
        controller.start()
        controller.toggle_play_pause()
        controller.on_advance_due()
        assert controller.current_index == 0

    def test_on_advance_due_ignored_without_auto_advance(self, manual_controller):
        manual_controller.start()
        manual_controller.toggle_play_pause()
        manual_controller.on_advance_due()
        assert manual_controller.current_index == 0

    def test_late_fire_after_pause_is_noop(self, controller, timers):
        controller.start()
        timer = timers.pending[0]
        controller.toggle_play_pause()
        timer.fire()
        assert controller.current_index == 0

    def test_late_fire_after_navigation_is_noop(self, controller, timers):
        controller.start()
        timer = timers.pending[0]
        controller.next()
        timer.fire()
        assert controller.current_index == 1

    def test_dispose_cancels_pending(self, controller, timers):
        controller.start()
        controller.dispose()
        assert timers.pending == []
        timers.advance(60)
        assert controller.current_index == 0

    def test_disposed_controller_never_rearms(self, controller, timers, shown):
        controller.start()
        controller.dispose()
        controller.next()
        controller.previous()
        controller.go_to(3)
        controller.toggle_play_pause()
        controller.start()
        controller.on_advance_due()
        assert controller.is_disposed is True
        assert controller.status == PlaybackStatus.STOPPED
        assert controller.current_index == 0
        assert len(shown) == 1
        assert timers.pending == []
        assert controller.clock.is_armed is False

    def test_disposed_go_to_still_validates(self, controller):
        controller.dispose()
        with pytest.raises(IndexOutOfRange):
            controller.go_to(7)


class TestRealClock:
    def test_advances_with_threading_timer(self, shown):
        done = threading.Event()

        def renderer(event):
            shown.append(event)
            if event.index == 2:
                done.set()

        products = [make_product("a", duration=0.05)]
        seq = compile_slides(products, Settings())
        # brand-intro is fixed at 4s; jump to the 50ms reveal and wait for features
        ctl = PlaybackController(seq, Settings(), renderer=renderer)
        ctl.start()
        ctl.go_to(1)
        assert done.wait(1.0)
        ctl.dispose()

    def test_timer_fires_racing_manual_next(self):
        events = []
        slides = tuple(Slide(kind=SlideKind.PRODUCT_REVEAL, duration_seconds=0.001)
                       for _ in range(5))
        ctl = PlaybackController(SlideSequence(slides=slides), Settings(),
                                 renderer=events.append)
        ctl.start()

        def press_next():
            for _ in range(200):
                ctl.next()

        workers = [threading.Thread(target=press_next) for _ in range(4)]
        for w in workers:
            w.start()
        for w in workers:
            w.join(5.0)
        ctl.dispose()
        seen = list(events)

        assert not any(w.is_alive() for w in workers)
        assert seen[0].index == 0
        assert len(seen) >= 1 + 4 * 200
        for prev, cur in zip(seen, seen[1:]):
            assert cur.index == (prev.index + 1) % 5
            assert cur.total == 5
        assert seen[-1].index == ctl.current_index
        assert ctl.clock.is_armed is False
        assert len(events) == len(seen)
