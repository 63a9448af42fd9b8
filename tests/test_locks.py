import threading

import pytest

from tour_map.locks import ReadWriteLock


def reader(lock: ReadWriteLock, started_evt: threading.Event, release_evt: threading.Event):
    """Hold a read lock until released."""
    with lock.read_locked():
        started_evt.set()
        release_evt.wait()


def writer(lock: ReadWriteLock, started_evt: threading.Event, release_evt: threading.Event):
    """Hold the write lock until released."""
    with lock.write_locked():
        started_evt.set()
        release_evt.wait()


def _spawn(target, lock):
    started, release = threading.Event(), threading.Event()
    thread = threading.Thread(target=target, args=(lock, started, release), daemon=True)
    thread.start()
    return started, release, thread


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    a_started, a_release, a_thread = _spawn(reader, lock)
    b_started, b_release, b_thread = _spawn(reader, lock)

    assert a_started.wait(0.3), "First reader failed to start"
    assert b_started.wait(0.3), "Second reader should not wait for the first"
    assert lock.snapshot()["readers"] == 2

    a_release.set()
    b_release.set()
    a_thread.join(timeout=0.6)
    b_thread.join(timeout=0.6)
    assert lock.snapshot() == {"readers": 0, "writer": False, "writers_waiting": 0}


def test_writer_waits_for_readers_and_blocks_new_readers():
    lock = ReadWriteLock()
    r1_started, r1_release, r1_thread = _spawn(reader, lock)
    assert r1_started.wait(0.3)

    w_started, w_release, w_thread = _spawn(writer, lock)
    assert not w_started.wait(0.07), "Writer should wait while a reader holds the lock"

    # Writer is queued: a new reader must line up behind it.
    r2_started, r2_release, r2_thread = _spawn(reader, lock)
    assert not r2_started.wait(0.07), "New reader should queue behind the waiting writer"
    assert lock.snapshot()["writers_waiting"] == 1

    r1_release.set()
    r1_thread.join(timeout=0.6)
    assert w_started.wait(0.3), "Writer did not start after readers drained"
    assert not r2_started.wait(0.07), "Reader must not enter while writer holds the lock"

    w_release.set()
    w_thread.join(timeout=0.6)
    assert r2_started.wait(0.3), "Queued reader did not start after writer released"
    r2_release.set()
    r2_thread.join(timeout=0.6)


def test_writers_are_exclusive():
    lock = ReadWriteLock()
    a_started, a_release, a_thread = _spawn(writer, lock)
    assert a_started.wait(0.3)
    b_started, b_release, b_thread = _spawn(writer, lock)
    assert not b_started.wait(0.07), "Second writer should block"

    a_release.set()
    a_thread.join(timeout=0.6)
    assert b_started.wait(0.3)
    b_release.set()
    b_thread.join(timeout=0.6)


def test_lock_released_when_body_raises():
    lock = ReadWriteLock()
    with pytest.raises(ValueError):
        with lock.write_locked():
            raise ValueError("boom")
    with pytest.raises(ValueError):
        with lock.read_locked():
            raise ValueError("boom")
    assert lock.snapshot() == {"readers": 0, "writer": False, "writers_waiting": 0}


def test_unbalanced_release_raises():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()


def test_concurrent_increments_are_not_lost():
    lock = ReadWriteLock()
    counter = {"value": 0}

    def bump():
        for _ in range(500):
            with lock.write_locked():
                current = counter["value"]
                counter["value"] = current + 1

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert counter["value"] == 2000
