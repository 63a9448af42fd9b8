import logging
import threading

import pytest

from tour_map.services.scheduler import PeriodicTask, Supervisor


def test_task_runs_repeatedly_until_stopped():
    supervisor = Supervisor()
    ticks = threading.Semaphore(0)
    supervisor.add("ticker", 0.01, ticks.release)

    supervisor.start()
    for _ in range(3):
        assert ticks.acquire(timeout=1.0), "Task did not tick in time"
    supervisor.stop(timeout=1.0)

    assert supervisor.stopped
    assert all(not task.is_alive() for task in supervisor.tasks)


def test_failing_tick_is_logged_and_retried(caplog):
    calls = []
    second_call = threading.Event()

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("feed offline")
        second_call.set()

    supervisor = Supervisor()
    task = supervisor.add("flaky", 0.01, flaky)
    with caplog.at_level(logging.ERROR):
        supervisor.start()
        assert second_call.wait(1.0), "Task stopped after a failing tick"
        supervisor.stop(timeout=1.0)

    assert task.failures == 1
    assert task.runs >= 2
    assert "feed offline" in caplog.text


def test_run_once_counts_runs():
    results = []
    task = PeriodicTask("once", 60, lambda: results.append("x"), threading.Event())
    task.run_once()
    task.run_once()
    assert results == ["x", "x"]
    assert (task.runs, task.failures) == (2, 0)


def test_stop_before_start_is_harmless():
    supervisor = Supervisor()
    supervisor.add("idle", 5, lambda: None)
    supervisor.stop(timeout=0.1)
    assert supervisor.stopped


def test_first_tick_waits_one_interval():
    stop = threading.Event()
    ran = threading.Event()
    task = PeriodicTask("slow", 5, ran.set, stop)
    task.start()
    assert not ran.wait(0.1)
    stop.set()
    task.join(timeout=1.0)
    assert not task.is_alive()


def test_duplicate_and_invalid_registration():
    supervisor = Supervisor()
    supervisor.add("image-scan", 1, lambda: None)
    with pytest.raises(ValueError):
        supervisor.add("image-scan", 1, lambda: None)
    with pytest.raises(ValueError):
        supervisor.add("live-feed", 0, lambda: None)
    assert [task.name for task in supervisor.tasks] == ["image-scan"]
