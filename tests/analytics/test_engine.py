from __future__ import annotations

from datetime import date

import pytest

from src.class_attendance.class_attendance.analytics.engine import (
    build_history,
    compute_class_report,
    compute_monthly_summary,
    compute_student_detail,
    compute_subject_summary,
    percentage,
)
from src.class_attendance.class_attendance.attendance.model import RecordView, SessionView, StudentRef
from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.students.model import Student

P, A, L = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.LATE

ALICE = StudentRef(1, "Alice", "101")
BOB = StudentRef(2, "Bob", "102")


def _view(session_id, day, records, *, subject="Mathematics", topic=None):
    return SessionView(
        session_id=session_id,
        session_date=day,
        subject_id=10,
        subject_name=subject,
        topic=topic,
        records=tuple(
            RecordView(student_id=ref.student_id if ref else sid, status=status, student=ref)
            for sid, ref, status in records
        ),
    )


@pytest.mark.parametrize(
    "part, whole, expected",
    [(0, 0, 0.0), (5, 0, 0.0), (1, 3, 33.33), (2, 3, 66.67), (3, 4, 75.0), (4, 4, 100.0)],
)
def test_percentage(part, whole, expected):
    assert percentage(part, whole) == expected


def test_class_report_counts_late_as_attended_and_flags_low():
    sessions = [
        _view(1, date(2024, 1, 1), [(1, ALICE, P), (2, BOB, A)]),
        _view(2, date(2024, 1, 2), [(1, ALICE, L), (2, BOB, P)]),
        _view(3, date(2024, 1, 3), [(1, ALICE, P), (2, BOB, A)]),
        _view(4, date(2024, 1, 4), [(1, ALICE, A)]),
    ]

    report = compute_class_report(sessions, threshold=75.0)
    rows = {s.student_id: s for s in report.full_report}

    assert report.total_classes == 4
    assert report.total_students == 2
    assert (rows[1].total_classes, rows[1].present_classes, rows[1].percentage) == (4, 3, 75.0)
    assert rows[1].is_low_attendance is False
    assert (rows[2].total_classes, rows[2].present_classes, rows[2].percentage) == (3, 1, 33.33)
    assert rows[2].is_low_attendance is True
    assert report.at_risk_students == tuple(s for s in report.full_report if s.is_low_attendance)


def test_class_report_skips_records_of_deleted_students():
    sessions = [_view(1, date(2024, 1, 1), [(1, ALICE, P), (9, None, A)])]

    report = compute_class_report(sessions)

    assert [s.student_id for s in report.full_report] == [1]
    assert report.total_classes == 1


def test_class_report_is_empty_without_sessions():
    report = compute_class_report([])

    assert report.total_classes == 0
    assert report.full_report == ()
    assert report.at_risk_students == ()


def test_monthly_summary_groups_by_calendar_month():
    sessions = [
        _view(1, date(2024, 1, 5), [(1, ALICE, P), (2, BOB, A)]),
        _view(3, date(2024, 2, 1), [(1, ALICE, A)]),
        _view(2, date(2024, 1, 20), [(1, ALICE, P), (2, BOB, L)]),
    ]

    summary = compute_monthly_summary(sessions)

    assert [(m.month, m.total_classes, m.average_attendance) for m in summary] == [
        ("2024-01", 2, 75.0),
        ("2024-02", 1, 0.0),
    ]


def test_monthly_summary_session_without_records_reports_zero():
    summary = compute_monthly_summary([_view(1, date(2024, 5, 2), [])])

    assert summary[0].total_classes == 1
    assert summary[0].average_attendance == 0.0


def test_subject_summary_skips_deleted_subjects():
    sessions = [
        _view(1, date(2024, 1, 1), [(1, ALICE, P), (2, BOB, A)]),
        _view(2, date(2024, 1, 2), [(1, ALICE, P)], subject="Physics"),
        _view(3, date(2024, 1, 3), [(1, ALICE, A)], subject=None),
    ]

    summary = {s.subject: s.attendance for s in compute_subject_summary(sessions)}

    assert summary == {"Mathematics": 50.0, "Physics": 100.0}


def test_history_uses_placeholders_for_missing_topic_and_subject():
    sessions = [
        _view(1, date(2024, 1, 1), [(1, ALICE, P)], topic="Sets"),
        _view(2, date(2024, 1, 2), [(2, BOB, P)]),
        _view(3, date(2024, 1, 3), [(1, ALICE, L)], subject=None),
    ]

    history = [h.to_dict() for h in build_history(1, sessions)]

    assert history == [
        {"date": "2024-01-01", "subject": "Mathematics", "status": "Present", "topic": "Sets"},
        {"date": "2024-01-03", "subject": "Unknown", "status": "Late", "topic": "-"},
    ]


def test_student_detail_breaks_down_by_subject_and_month():
    alice = Student(1, "Alice", "101", "alice@test.com", "2024-A", assigned_teacher_id=2)
    sessions = [
        _view(1, date(2024, 2, 3), [(1, ALICE, A)], subject="Physics"),
        _view(2, date(2024, 1, 10), [(1, ALICE, P)]),
        _view(3, date(2024, 1, 11), [(1, ALICE, L), (2, BOB, A)]),
        _view(4, date(2024, 1, 12), [(2, BOB, P)]),
    ]

    detail = compute_student_detail(alice, sessions)

    assert (detail.total_classes, detail.present_classes, detail.overall_attendance) == (3, 2, 66.67)
    assert {b.label: b.attendance for b in detail.subject_breakdown} == {"Physics": 0.0, "Mathematics": 100.0}
    assert [(b.label, b.total_classes) for b in detail.monthly_breakdown] == [("2024-01", 2), ("2024-02", 1)]
    assert len(detail.history) == 3


def test_student_detail_without_records():
    alice = Student(1, "Alice", "101", "alice@test.com", "2024-A", assigned_teacher_id=2)

    detail = compute_student_detail(alice, [])

    assert detail.overall_attendance == 0.0
    assert detail.to_dict()["history"] == []
