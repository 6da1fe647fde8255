"""
Dispatcher - bounded worker pool running notification tasks off the build path.

The pool has a fixed number of workers and a fixed number of in-flight slots
(queued plus running). Submitting never blocks: when every slot is taken the
task is dropped and a warning is logged.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from ..errors import DispatcherNotInitializedError
from ..monitoring.decorators import capture_errors
from ..monitoring.types import NotificationOutcome
from .tasks import NotificationTask

logger = logging.getLogger(__name__)

OutcomeSink = Callable[[NotificationOutcome], None]


def log_outcome(outcome: NotificationOutcome) -> None:
    """Default outcome sink: one log line per task."""
    logger.info(
        "%s notification for %s #%d: %s%s",
        outcome.kind.value,
        outcome.project_name,
        outcome.build_number,
        outcome.status.value,
        f" ({outcome.skip_reason})" if outcome.skip_reason else "",
    )


class Dispatcher:
    """
    Runs notification tasks asynchronously.

    Usage:
        dispatcher = Dispatcher(pool_size=10, queue_capacity=20)
        accepted = dispatcher.submit(task)
        ...
        dispatcher.shutdown()
    """

    def __init__(
        self,
        pool_size: int = 10,
        queue_capacity: int = 20,
        outcome_sink: Optional[OutcomeSink] = log_outcome,
    ):
        """
        Initialize dispatcher.

        Args:
            pool_size: Number of worker threads
            queue_capacity: Maximum number of accepted tasks not yet finished
            outcome_sink: Callback receiving each task outcome
        """
        if pool_size < 1 or queue_capacity < 1:
            raise ValueError("pool_size and queue_capacity must be positive")

        self.pool_size = pool_size
        self.queue_capacity = queue_capacity
        self.outcome_sink = outcome_sink
        self._slots = threading.BoundedSemaphore(queue_capacity)
        self._executor = ThreadPoolExecutor(
            max_workers=pool_size,
            thread_name_prefix="build-notifier",
        )
        self._lock = threading.Lock()
        self._closed = False
        self._dropped = 0

    @property
    def dropped(self) -> int:
        """Number of tasks dropped so far."""
        return self._dropped

    def submit(self, task: NotificationTask) -> bool:
        """
        Enqueue a task without blocking.

        Args:
            task: Task to run

        Returns:
            True if the task was accepted, False if it was dropped
        """
        with self._lock:
            if self._closed:
                logger.warning("Dispatcher is shut down, dropping %r", task)
                self._dropped += 1
                return False

            if not self._slots.acquire(blocking=False):
                logger.warning(
                    "Notification queue full (%d in flight), dropping %r",
                    self.queue_capacity,
                    task,
                )
                self._dropped += 1
                return False

            try:
                self._executor.submit(self._run, task)
            except RuntimeError as e:
                self._slots.release()
                logger.error("Could not schedule %r: %s", task, e)
                self._dropped += 1
                return False

        return True

    def _run(self, task: NotificationTask) -> None:
        try:
            outcome = self._execute(task)
            if outcome is not None and self.outcome_sink is not None:
                self._deliver(outcome)
        finally:
            self._slots.release()

    @staticmethod
    @capture_errors(step_name="notification_task", reraise=False)
    def _execute(task: NotificationTask) -> Optional[NotificationOutcome]:
        return task.run()

    @capture_errors(step_name="outcome_sink", reraise=False)
    def _deliver(self, outcome: NotificationOutcome) -> None:
        self.outcome_sink(outcome)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and, by default, drain the ones in flight."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)
        logger.debug("Dispatcher shut down (dropped %d tasks)", self._dropped)


# Process-wide dispatcher, created explicitly at startup
_dispatcher: Optional[Dispatcher] = None
_dispatcher_lock = threading.Lock()


def init_dispatcher(
    pool_size: int = 10,
    queue_capacity: int = 20,
    outcome_sink: Optional[OutcomeSink] = log_outcome,
) -> Dispatcher:
    """Create the process-wide dispatcher, or return the existing one."""
    global _dispatcher

    with _dispatcher_lock:
        if _dispatcher is None:
            _dispatcher = Dispatcher(pool_size, queue_capacity, outcome_sink)
            logger.info(
                "Dispatcher started (%d workers, %d slots)",
                pool_size,
                queue_capacity,
            )
        return _dispatcher


def get_dispatcher() -> Dispatcher:
    """Get the process-wide dispatcher."""
    if _dispatcher is None:
        raise DispatcherNotInitializedError("init_dispatcher() has not been called")
    return _dispatcher


def shutdown_dispatcher(wait: bool = True) -> None:
    """Drain and discard the process-wide dispatcher."""
    global _dispatcher

    with _dispatcher_lock:
        if _dispatcher is not None:
            _dispatcher.shutdown(wait=wait)
            _dispatcher = None
