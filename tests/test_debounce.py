"""Tests for debounced calls and the periodic reminder runner."""

import threading

import pytest

from studyhub.session.debounce import DebouncedCall
from studyhub.session.reminder_loop import PeriodicTask


class FakeTimer:
    """Stand-in for threading.Timer that fires only when told to."""

    created = []

    def __init__(self, delay, func, args=()):
        self.delay = delay
        self.func = func
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.func(*self.args)


@pytest.fixture(autouse=True)
def reset_timers():
    FakeTimer.created = []
    yield


def test_burst_results_in_single_call():
    calls = []
    debounced = DebouncedCall(0.6, lambda: calls.append(1), timer_factory=FakeTimer)

    for _ in range(5):
        debounced.trigger()

    assert len(FakeTimer.created) == 5
    assert [t.cancelled for t in FakeTimer.created] == [True, True, True, True, False]
    assert FakeTimer.created[-1].delay == 0.6
    assert FakeTimer.created[-1].daemon is True

    FakeTimer.created[-1].fire()
    assert calls == [1]
    assert not debounced.pending


def test_superseded_timer_that_already_started_is_dropped():
    calls = []
    debounced = DebouncedCall(0.6, lambda: calls.append(1), timer_factory=FakeTimer)
    debounced.trigger()
    debounced.trigger()

    # The first timer runs anyway (e.g. it was already executing when cancelled)
    FakeTimer.created[0].fire()
    assert calls == []
    assert debounced.pending


def test_cancel_prevents_call():
    calls = []
    debounced = DebouncedCall(0.6, lambda: calls.append(1), timer_factory=FakeTimer)
    debounced.trigger()
    debounced.cancel()

    assert not debounced.pending
    FakeTimer.created[0].fire()
    assert calls == []


def test_failing_call_is_logged_not_raised():
    def boom():
        raise RuntimeError("save failed")

    debounced = DebouncedCall(0.6, boom, timer_factory=FakeTimer)
    debounced.trigger()
    FakeTimer.created[0].fire()

    assert not debounced.pending


def test_real_timer_fires_once():
    fired = threading.Event()
    count = []

    def func():
        count.append(1)
        fired.set()

    debounced = DebouncedCall(0.01, func)
    debounced.trigger()
    debounced.trigger()

    assert fired.wait(2)
    assert count == [1]


class TestPeriodicTask:
    """Test the fixed-interval runner."""

    def test_runs_immediately_and_repeats(self):
        ticks = []
        two_ticks = threading.Event()

        def tick():
            ticks.append(1)
            if len(ticks) >= 2:
                two_ticks.set()

        task = PeriodicTask(0.01, tick, name="test-loop")
        task.start()
        try:
            assert two_ticks.wait(2)
            assert task.running
        finally:
            task.stop(timeout=2)
        assert not task.running

    def test_failing_callback_keeps_running(self):
        attempts = []
        retried = threading.Event()

        def tick():
            attempts.append(1)
            if len(attempts) >= 2:
                retried.set()
            raise RuntimeError("tick failed")

        task = PeriodicTask(0.01, tick)
        task.start()
        try:
            assert retried.wait(2)
        finally:
            task.stop(timeout=2)

    def test_start_is_idempotent(self):
        started = threading.Event()
        task = PeriodicTask(60, started.set)
        task.start()
        try:
            assert started.wait(2)
            thread = task._thread
            task.start()
            assert task._thread is thread
        finally:
            task.stop(timeout=2)
