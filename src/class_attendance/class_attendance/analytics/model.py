from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class StudentStat:
    """One row of the class report."""

    student_id: int
    name: str
    roll_number: str
    total_classes: int
    present_classes: int
    percentage: float
    is_low_attendance: bool


@dataclass(frozen=True)
class ClassReport:
    total_classes: int
    total_students: int
    full_report: tuple[StudentStat, ...] = ()
    at_risk_students: tuple[StudentStat, ...] = ()

    def to_dict(self) -> dict:
        return {
            "total_classes": self.total_classes,
            "total_students": self.total_students,
            "full_report": [asdict(s) for s in self.full_report],
            "at_risk_students": [asdict(s) for s in self.at_risk_students],
        }


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    total_classes: int
    average_attendance: float


@dataclass(frozen=True)
class SubjectSummary:
    subject: str
    attendance: float


@dataclass(frozen=True)
class Breakdown:
    """Attendance of one student within a subject or a month."""

    label: str
    total_classes: int
    present_classes: int
    attendance: float


@dataclass(frozen=True)
class HistoryEntry:
    date: date
    subject: str
    status: str
    topic: str

    def to_dict(self) -> dict:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "subject": self.subject,
            "status": self.status,
            "topic": self.topic,
        }


@dataclass(frozen=True)
class TeacherContact:
    name: str
    email: str


@dataclass(frozen=True)
class StudentDetail:
    student_id: int
    overall_attendance: float
    total_classes: int
    present_classes: int
    subject_breakdown: tuple[Breakdown, ...] = ()
    monthly_breakdown: tuple[Breakdown, ...] = ()
    history: tuple[HistoryEntry, ...] = ()
    student_name: Optional[str] = None
    roll_number: Optional[str] = None
    assigned_teacher: Optional[TeacherContact] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "roll_number": self.roll_number,
            "assigned_teacher": asdict(self.assigned_teacher) if self.assigned_teacher else None,
            "overall_attendance": self.overall_attendance,
            "total_classes": self.total_classes,
            "present_classes": self.present_classes,
            "subject_breakdown": [asdict(b) for b in self.subject_breakdown],
            "monthly_breakdown": [asdict(b) for b in self.monthly_breakdown],
            "history": [h.to_dict() for h in self.history],
        }
