"""Tests for the bounded dispatcher (dispatcher.py)."""

import threading
import time
from datetime import datetime

import pytest

from build_notifier.errors import DispatcherNotInitializedError
from build_notifier.monitoring.types import NotificationOutcome, TaskKind
from build_notifier.notify import dispatcher as dispatcher_module
from build_notifier.notify.dispatcher import (
    Dispatcher,
    get_dispatcher,
    init_dispatcher,
    shutdown_dispatcher,
)


class BlockingTask:
    """Task stand-in that waits until released."""

    def __init__(self, release: threading.Event, number: int = 1):
        self.release = release
        self.number = number
        self.ran = threading.Event()

    def run(self) -> NotificationOutcome:
        self.release.wait(timeout=5)
        self.ran.set()
        return NotificationOutcome(
            kind=TaskKind.COMPLETED,
            project_name="api",
            build_number=self.number,
            started_at=datetime.now(),
        )


class ExplodingTask:
    def run(self):
        raise RuntimeError("boom")


class TestSubmit:
    def test_accepts_up_to_capacity_and_drops_the_rest(self):
        release = threading.Event()
        dispatcher = Dispatcher(pool_size=10, queue_capacity=20, outcome_sink=None)
        try:
            start = time.monotonic()
            accepted = [dispatcher.submit(BlockingTask(release, n)) for n in range(25)]
            elapsed = time.monotonic() - start

            assert accepted.count(True) == 20
            assert accepted.count(False) == 5
            assert accepted[:20] == [True] * 20
            assert dispatcher.dropped == 5
            assert elapsed < 1.0
        finally:
            release.set()
            dispatcher.shutdown()

    def test_slots_freed_after_completion(self):
        release = threading.Event()
        release.set()
        dispatcher = Dispatcher(pool_size=1, queue_capacity=1, outcome_sink=None)
        try:
            first = BlockingTask(release)
            assert dispatcher.submit(first)
            assert first.ran.wait(timeout=5)
            # Give the worker a moment to release its slot
            for _ in range(50):
                if dispatcher.submit(BlockingTask(release)):
                    break
                time.sleep(0.02)
            else:
                pytest.fail("slot was never released")
        finally:
            dispatcher.shutdown()

    def test_outcomes_delivered_to_sink(self):
        outcomes = []
        release = threading.Event()
        release.set()
        dispatcher = Dispatcher(pool_size=2, queue_capacity=4, outcome_sink=outcomes.append)
        for n in range(3):
            dispatcher.submit(BlockingTask(release, n))
        dispatcher.shutdown(wait=True)

        assert sorted(o.build_number for o in outcomes) == [0, 1, 2]

    def test_task_errors_do_not_kill_workers(self):
        outcomes = []
        release = threading.Event()
        release.set()
        dispatcher = Dispatcher(pool_size=1, queue_capacity=4, outcome_sink=outcomes.append)
        assert dispatcher.submit(ExplodingTask())
        assert dispatcher.submit(BlockingTask(release, 9))
        dispatcher.shutdown(wait=True)

        assert [o.build_number for o in outcomes] == [9]

    def test_sink_errors_are_contained(self):
        def broken_sink(outcome):
            raise ValueError("sink down")

        release = threading.Event()
        release.set()
        dispatcher = Dispatcher(pool_size=1, queue_capacity=2, outcome_sink=broken_sink)
        assert dispatcher.submit(BlockingTask(release))
        dispatcher.shutdown(wait=True)

    def test_submit_after_shutdown_is_dropped(self):
        dispatcher = Dispatcher(pool_size=1, queue_capacity=1, outcome_sink=None)
        dispatcher.shutdown()
        assert dispatcher.submit(BlockingTask(threading.Event())) is False
        assert dispatcher.dropped == 1

    def test_rejects_invalid_sizes(self):
        with pytest.raises(ValueError):
            Dispatcher(pool_size=0, queue_capacity=20)


class TestProcessWideDispatcher:
    @pytest.fixture(autouse=True)
    def reset(self):
        shutdown_dispatcher()
        yield
        shutdown_dispatcher()

    def test_get_before_init_raises(self):
        with pytest.raises(DispatcherNotInitializedError):
            get_dispatcher()

    def test_init_is_idempotent(self):
        first = init_dispatcher(pool_size=2, queue_capacity=3)
        second = init_dispatcher(pool_size=5, queue_capacity=5)
        assert first is second
        assert get_dispatcher().pool_size == 2

    def test_shutdown_clears_singleton(self):
        init_dispatcher()
        shutdown_dispatcher()
        assert dispatcher_module._dispatcher is None
