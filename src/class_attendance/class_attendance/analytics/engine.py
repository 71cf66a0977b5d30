"""Attendance aggregation.

Pure functions over :class:`SessionView` sequences fetched by the caller.
Nothing is cached: every report is recomputed from the sessions it is given.
Present and Late count as attended; a bucket with no records reports 0.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..attendance.model import SessionView
from ..common.datetime_utils import month_key
from ..core.constants import AT_RISK_THRESHOLD, NO_TOPIC, PERCENT_PRECISION, UNKNOWN_SUBJECT
from ..students.model import Student
from .model import Breakdown, ClassReport, HistoryEntry, MonthlySummary, StudentDetail, StudentStat, SubjectSummary


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, PERCENT_PRECISION)


class _Tally:
    __slots__ = ("classes", "attended", "records")

    def __init__(self) -> None:
        self.classes = 0
        self.attended = 0
        self.records = 0

    def add_session(self, session: SessionView) -> None:
        self.classes += 1
        self.attended += session.attended_count
        self.records += len(session.records)

    @property
    def average(self) -> float:
        return percentage(self.attended, self.records)


def compute_class_report(sessions: Sequence[SessionView], *, threshold: float = AT_RISK_THRESHOLD) -> ClassReport:
    """Per-student totals across all sessions plus the at-risk subset.

    Students enter the report only through a record, so nobody has zero
    classes. Records of deleted students are skipped.
    """

    totals: dict[int, list] = {}  # student_id -> [ref, total, present]

    for session in sessions:
        counted: set[int] = set()
        for record in session.records:
            if record.student is None or record.student_id in counted:
                continue
            counted.add(record.student_id)

            entry = totals.setdefault(record.student_id, [record.student, 0, 0])
            entry[1] += 1
            if record.status.is_attended:
                entry[2] += 1

    full_report = []
    for student_id, (ref, total, present) in totals.items():
        pct = percentage(present, total)
        full_report.append(
            StudentStat(
                student_id=student_id,
                name=ref.name,
                roll_number=ref.roll_number,
                total_classes=total,
                present_classes=present,
                percentage=pct,
                is_low_attendance=pct < threshold,
            )
        )

    return ClassReport(
        total_classes=len(sessions),
        total_students=len(full_report),
        full_report=tuple(full_report),
        at_risk_students=tuple(s for s in full_report if s.is_low_attendance),
    )


def compute_monthly_summary(sessions: Iterable[SessionView]) -> list[MonthlySummary]:
    months: dict[str, _Tally] = {}
    for session in sessions:
        months.setdefault(month_key(session.session_date), _Tally()).add_session(session)

    return [
        MonthlySummary(month=key, total_classes=tally.classes, average_attendance=tally.average)
        for key, tally in sorted(months.items())
    ]


def compute_subject_summary(sessions: Iterable[SessionView]) -> list[SubjectSummary]:
    subjects: dict[str, _Tally] = {}
    for session in sessions:
        if session.subject_name is None:
            continue  # subject deleted
        subjects.setdefault(session.subject_name, _Tally()).add_session(session)

    return [SubjectSummary(subject=name, attendance=tally.average) for name, tally in subjects.items()]


def build_history(student_id: int, sessions: Iterable[SessionView]) -> list[HistoryEntry]:
    """The student's own record from each session, in scan order."""

    history = []
    for session in sessions:
        record = session.record_for(student_id)
        if record is None:
            continue
        history.append(
            HistoryEntry(
                date=session.session_date,
                subject=session.subject_name or UNKNOWN_SUBJECT,
                status=record.status.value,
                topic=session.topic or NO_TOPIC,
            )
        )
    return history


def compute_student_detail(student: Student, sessions: Iterable[SessionView]) -> StudentDetail:
    total = 0
    present = 0
    by_subject: dict[str, list[int]] = {}
    by_month: dict[str, list[int]] = {}

    sessions = list(sessions)
    for session in sessions:
        record = session.record_for(student.student_id)
        if record is None:
            continue

        attended = 1 if record.status.is_attended else 0
        total += 1
        present += attended

        for key, bucket in (
            (session.subject_name or UNKNOWN_SUBJECT, by_subject),
            (month_key(session.session_date), by_month),
        ):
            counts = bucket.setdefault(key, [0, 0])
            counts[0] += 1
            counts[1] += attended

    def _breakdown(items) -> tuple[Breakdown, ...]:
        return tuple(
            Breakdown(label=label, total_classes=t, present_classes=p, attendance=percentage(p, t))
            for label, (t, p) in items
        )

    return StudentDetail(
        student_id=student.student_id,
        student_name=student.name,
        roll_number=student.roll_number,
        overall_attendance=percentage(present, total),
        total_classes=total,
        present_classes=present,
        subject_breakdown=_breakdown(by_subject.items()),
        monthly_breakdown=_breakdown(sorted(by_month.items())),
        history=tuple(build_history(student.student_id, sessions)),
    )
