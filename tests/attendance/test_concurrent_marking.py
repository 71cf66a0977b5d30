from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.class_attendance.class_attendance.attendance.recorder import AttendanceRecorder
from src.class_attendance.class_attendance.common.locks import KeyedLock
from src.class_attendance.class_attendance.core.exceptions import ConcurrencyError, DuplicateSessionError

MATH = 10


class RacingAttendance:
    """Wraps a store so every caller's lookup completes before anyone inserts.

    Mimics two app processes that each saw "no session yet".
    """

    def __init__(self, inner, parties: int):
        self._inner = inner
        self._barrier = threading.Barrier(parties)
        self._raced = False

    def find_for_subject_and_day(self, **kwargs):
        found = self._inner.find_for_subject_and_day(**kwargs)
        if not self._raced:
            self._barrier.wait(timeout=5)
            self._raced = True
        return found

    def __getattr__(self, name):
        return getattr(self._inner, name)


class AlwaysLosingAttendance:
    """A store where the insert always collides and the lookup never sees the winner."""

    def __init__(self, inner):
        self._inner = inner
        self.create_calls = 0

    def find_for_subject_and_day(self, **kwargs):
        return None

    def create_session(self, **kwargs):
        self.create_calls += 1
        raise DuplicateSessionError("duplicate session")

    def __getattr__(self, name):
        return getattr(self._inner, name)


def test_threads_sharing_a_recorder_end_with_one_session(attendance_repo, students_repo, subjects_repo, admin):
    recorder = AttendanceRecorder(attendance_repo, students_repo, subjects_repo)

    def mark(student_id: int):
        return recorder.record_attendance(
            admin, date="2024-03-04", subject_id=MATH, records=[{"student_id": student_id, "status": "Present"}]
        )

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(mark, [1, 2, 3, 4]))

    assert len(attendance_repo.sessions) == 1
    assert attendance_repo.sessions[0].student_ids == {1, 2, 3, 4}
    assert sum(1 for r in results if r.created) == 1


def test_separate_processes_racing_on_create_merge_into_one_session(
    attendance_repo, students_repo, subjects_repo, teacher
):
    racing = RacingAttendance(attendance_repo, parties=2)
    # Separate lock tables: nothing in-process serializes the two writers.
    first = AttendanceRecorder(racing, students_repo, subjects_repo, locks=KeyedLock())
    second = AttendanceRecorder(racing, students_repo, subjects_repo, locks=KeyedLock())

    def run(recorder, student_id):
        return recorder.record_attendance(
            teacher, date="2024-03-04", subject_id=MATH, records=[{"student_id": student_id, "status": "Late"}]
        )

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(run, first, 1), pool.submit(run, second, 2)]
        results = [f.result(timeout=10) for f in futures]

    assert len(attendance_repo.sessions) == 1
    assert attendance_repo.sessions[0].student_ids == {1, 2}
    assert sorted(r.created for r in results) == [False, True]
    assert attendance_repo.create_calls == 2


def test_gives_up_after_repeated_collisions(attendance_repo, students_repo, subjects_repo, teacher):
    losing = AlwaysLosingAttendance(attendance_repo)
    recorder = AttendanceRecorder(losing, students_repo, subjects_repo, max_attempts=3)

    with pytest.raises(ConcurrencyError):
        recorder.record_attendance(
            teacher, date="2024-03-04", subject_id=MATH, records=[{"student_id": 1, "status": "Present"}]
        )

    assert losing.create_calls == 3
    assert attendance_repo.sessions == []


def test_keyed_lock_releases_idle_keys():
    locks = KeyedLock()

    with locks.hold(("a", 1)):
        assert len(locks) == 1
        with locks.hold(("b", 1)):
            assert len(locks) == 2

    assert len(locks) == 0
