from __future__ import annotations

from typing import Sequence

from ..analytics.engine import build_history
from ..analytics.model import HistoryEntry
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..core.permissions import Operation, authorize
from ..students.repository import StudentRepository
from ..students.service import find_student_for_actor
from ..users.model import Actor
from .model import SessionView
from .repository import AttendanceRepository


class AttendanceService:
    """Use cases: read attendance history (marking lives in AttendanceRecorder)."""

    def __init__(self, sessions: AttendanceRepository, students: StudentRepository):
        self._sessions = sessions
        self._students = students

    def history_for_student(self, actor: Actor, *, student_id: int) -> list[HistoryEntry]:
        authorize(actor, Operation.VIEW_STUDENT_HISTORY)

        if actor.role == Role.STUDENT:
            own = find_student_for_actor(self._students, actor)
            if own is None or own.student_id != int(student_id):
                raise AuthorizationError("Students can only view their own attendance", student_id=int(student_id))

        return build_history(int(student_id), self._sessions.list_views(student_id=int(student_id)))

    def history_for_subject(self, actor: Actor, *, subject_id: int) -> Sequence[SessionView]:
        """Sessions of one subject, latest first."""

        authorize(actor, Operation.VIEW_SUBJECT_HISTORY)
        views = self._sessions.list_views(subject_id=int(subject_id))
        return sorted(views, key=lambda v: (v.session_date, v.session_id), reverse=True)
