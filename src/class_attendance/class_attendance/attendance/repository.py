from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceSession, SessionView


class AttendanceRepository(Protocol):
    def find_for_subject_and_day(self, *, subject_id: int, day_start: date, day_end: date) -> Optional[AttendanceSession]:
        """Session of ``subject_id`` with ``day_start <= session_date < day_end``."""

        raise NotImplementedError

    def create_session(
        self,
        *,
        subject_id: int,
        session_date: date,
        records: Sequence[AttendanceRecord],
        topic: Optional[str] = None,
    ) -> AttendanceSession:
        """Insert a session and its records atomically.

        Raises DuplicateSessionError when (subject_id, session_date) is taken.
        """

        raise NotImplementedError

    def append_records(self, *, session_id: int, records: Sequence[AttendanceRecord]) -> AttendanceSession:
        """Append all records or none.

        Raises ConflictError when one of the students already has a record.
        """

        raise NotImplementedError

    def list_views(
        self,
        *,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
    ) -> Sequence[SessionView]:
        """Sessions joined with subject/student names, in creation order."""

        raise NotImplementedError
