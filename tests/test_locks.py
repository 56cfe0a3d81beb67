from __future__ import annotations

import threading

import pytest

from src.beacon_attendance.beacon_attendance.common.locks import KeyedLock


def test_lock_is_dropped_after_release():
    locks = KeyedLock()

    for student_id in range(100):
        with locks.hold((student_id, "room-a")):
            assert len(locks) == 1

    assert len(locks) == 0


def test_lock_is_dropped_when_body_raises():
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        with locks.hold((1, "room-a")):
            raise RuntimeError("boom")

    assert len(locks) == 0


def test_same_key_is_serialized():
    locks = KeyedLock()
    inside = 0
    max_inside = 0
    counter_lock = threading.Lock()
    barrier = threading.Barrier(8)

    def worker():
        nonlocal inside, max_inside
        barrier.wait()
        with locks.hold((1, "room-a")):
            with counter_lock:
                inside += 1
                max_inside = max(max_inside, inside)
            with counter_lock:
                inside -= 1

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert max_inside == 1
    assert len(locks) == 0
