"""Background periodic tasks and the supervisor that owns them."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

LOGGER = logging.getLogger(__name__)


class PeriodicTask:
    """Runs ``action`` every ``interval`` seconds on a daemon thread.

    The stop signal is checked at each tick boundary; a tick already running
    is allowed to finish. Exceptions from a tick are logged and the loop keeps
    going, so a failure is retried on the next tick.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        action: Callable[[], object],
        stop_event: threading.Event,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.name = name
        self.interval = interval
        self._action = action
        self._stop_event = stop_event
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self.runs = 0
        self.failures = 0

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        if self._thread.ident is None:
            return
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def run_once(self) -> None:
        try:
            self._action()
        except Exception as exc:
            self.failures += 1
            LOGGER.error("Periodic task %s failed: %s", self.name, exc, exc_info=True)
        finally:
            self.runs += 1

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.run_once()
        LOGGER.debug("Periodic task %s stopped", self.name)


class Supervisor:
    """Holds the handles of every background task and their shared stop signal."""

    def __init__(self) -> None:
        self._stop_event = threading.Event()
        self._tasks: Dict[str, PeriodicTask] = {}

    def add(self, name: str, interval: float, action: Callable[[], object]) -> PeriodicTask:
        if name in self._tasks:
            raise ValueError(f"task {name!r} already registered")
        task = PeriodicTask(name, interval, action, self._stop_event)
        self._tasks[name] = task
        return task

    @property
    def tasks(self) -> List[PeriodicTask]:
        return list(self._tasks.values())

    def start(self) -> None:
        for task in self._tasks.values():
            LOGGER.info("Starting periodic task %s every %ss", task.name, task.interval)
            task.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        for task in self._tasks.values():
            task.join(timeout)

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()


__all__ = ["PeriodicTask", "Supervisor"]
