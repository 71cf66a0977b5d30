from __future__ import annotations

import logging
from dataclasses import replace

from ..attendance.repository import AttendanceRepository
from ..core.constants import AT_RISK_THRESHOLD
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..core.permissions import Operation, authorize
from ..students.model import Student
from ..students.repository import StudentRepository
from ..students.service import find_student_for_actor
from ..users.model import Actor
from ..users.repository import UserRepository
from .engine import compute_class_report, compute_monthly_summary, compute_student_detail, compute_subject_summary
from .model import ClassReport, MonthlySummary, StudentDetail, SubjectSummary, TeacherContact
from .visibility import apply_visibility

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Use cases: attendance dashboards.

    Each call reads the sessions it needs and recomputes; the redaction for
    students is applied here, after aggregation.
    """

    def __init__(
        self,
        sessions: AttendanceRepository,
        students: StudentRepository,
        users: UserRepository,
        *,
        at_risk_threshold: float = AT_RISK_THRESHOLD,
    ):
        self._sessions = sessions
        self._students = students
        self._users = users
        self._threshold = float(at_risk_threshold)

    def class_report(self, actor: Actor) -> ClassReport:
        authorize(actor, Operation.VIEW_CLASS_REPORT)
        report = compute_class_report(self._sessions.list_views(), threshold=self._threshold)
        return apply_visibility(actor.role, report)

    def monthly_summary(self, actor: Actor) -> list[MonthlySummary]:
        authorize(actor, Operation.VIEW_MONTHLY_SUMMARY)
        return compute_monthly_summary(self._sessions.list_views())

    def subject_summary(self, actor: Actor) -> list[SubjectSummary]:
        authorize(actor, Operation.VIEW_SUBJECT_SUMMARY)
        return compute_subject_summary(self._sessions.list_views())

    def my_stats(self, actor: Actor) -> StudentDetail:
        authorize(actor, Operation.VIEW_OWN_STATS)

        student = find_student_for_actor(self._students, actor)
        if student is None:
            raise NotFoundError("Student profile for user", actor.user_id)
        return self._detail(student)

    def student_detail(self, actor: Actor, *, student_id: int) -> StudentDetail:
        """Detail for one student: the owner, or staff acting on their behalf."""

        student = self._students.get_by_id(int(student_id))
        if student is None:
            raise NotFoundError("Student", student_id)

        if actor.role == Role.STUDENT:
            own = find_student_for_actor(self._students, actor)
            if own is None or own.student_id != student.student_id:
                raise AuthorizationError("Students can only view their own attendance", student_id=student.student_id)
        elif actor.role == Role.TEACHER and student.assigned_teacher_id != actor.user_id:
            raise AuthorizationError("You can only view your assigned students", student_id=student.student_id)

        return self._detail(student)

    def _detail(self, student: Student) -> StudentDetail:
        detail = compute_student_detail(student, self._sessions.list_views(student_id=student.student_id))

        teacher = self._users.get_by_id(student.assigned_teacher_id) if student.assigned_teacher_id else None
        if teacher is None:
            return detail
        return replace(detail, assigned_teacher=TeacherContact(name=teacher.name, email=teacher.email))
