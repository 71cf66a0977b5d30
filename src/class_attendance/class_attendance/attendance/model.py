from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's outcome within a session (owned by the session)."""

    student_id: int
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {"student_id": self.student_id, "status": self.status.value}


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one subject's class meeting on one calendar day."""

    session_id: int
    session_date: date
    subject_id: int
    records: tuple[AttendanceRecord, ...] = ()
    topic: Optional[str] = None

    def record_for(self, student_id: int) -> Optional[AttendanceRecord]:
        for r in self.records:
            if r.student_id == student_id:
                return r
        return None

    @property
    def student_ids(self) -> frozenset[int]:
        return frozenset(r.student_id for r in self.records)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "date": self.session_date.strftime("%Y-%m-%d"),
            "subject_id": self.subject_id,
            "topic": self.topic,
            "records": [r.to_dict() for r in self.records],
        }


@dataclass(frozen=True)
class StudentRef:
    student_id: int
    name: str
    roll_number: str


@dataclass(frozen=True)
class RecordView:
    """A record joined with its student; ``student`` is None once deleted."""

    student_id: int
    status: AttendanceStatus
    student: Optional[StudentRef] = None


@dataclass(frozen=True)
class SessionView:
    """Read-model for analytics/history (session joined with names).

    ``subject_name`` is None when the subject no longer exists.
    """

    session_id: int
    session_date: date
    subject_id: int
    subject_name: Optional[str]
    records: tuple[RecordView, ...] = ()
    topic: Optional[str] = None

    def record_for(self, student_id: int) -> Optional[RecordView]:
        for r in self.records:
            if r.student_id == student_id:
                return r
        return None

    @property
    def attended_count(self) -> int:
        return sum(1 for r in self.records if r.status.is_attended)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "date": self.session_date.strftime("%Y-%m-%d"),
            "subject_id": self.subject_id,
            "subject": self.subject_name,
            "topic": self.topic,
            "records": [
                {
                    "student_id": r.student_id,
                    "name": r.student.name if r.student else None,
                    "roll_number": r.student.roll_number if r.student else None,
                    "status": r.status.value,
                }
                for r in self.records
            ],
        }
