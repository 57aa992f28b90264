"""Periodic re-import of a test-data folder."""

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveSync(Generic[T]):
    """Runs a task now and then every interval until stopped.

    Runs never overlap: a tick and a manual run_once() take the same lock.
    The task should open its own resources (database connections are
    per-thread).
    """

    def __init__(
        self,
        task: Callable[[], T],
        interval_seconds: float = 15.0,
        on_result: Callable[[T], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.task = task
        self.interval_seconds = interval_seconds
        self.on_result = on_result
        self.on_error = on_error
        self.runs_completed = 0
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="daysync-live-sync", daemon=True)
        self._thread.start()
        logger.info("Live sync started (every %.1fs)", self.interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                # Still finishing a run; start() stays a no-op until it exits.
                logger.warning("Live sync still finishing a run after %ss", timeout)
                return
        self._thread = None
        logger.info("Live sync stopped")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until stop() is called. Returns True if it was."""
        return self._stop_event.wait(timeout)

    def run_once(self) -> T:
        """Run the task now, after any run in progress has finished."""
        with self._lock:
            result = self.task()
            self.runs_completed += 1
        return result

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            self._tick()
            if self._stop_event.wait(self.interval_seconds):
                break

    def _tick(self) -> None:
        try:
            result = self.run_once()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Live sync run failed: %s", e)
            if self.on_error:
                self.on_error(e)
            return
        if self.on_result:
            self.on_result(result)

    def __enter__(self) -> "LiveSync[T]":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
