from __future__ import annotations

import logging
from collections import abc
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import DateInput, day_bounds
from ..common.locks import KeyedLock
from ..common.validators import optional_text, require_id
from ..core.constants import SESSION_CREATE_ATTEMPTS
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    ConflictError,
    DuplicateSessionError,
    NotFoundError,
    ValidationError,
)
from ..core.permissions import Operation, authorize
from ..students.repository import StudentRepository
from ..subjects.repository import SubjectRepository
from ..users.model import Actor
from .model import AttendanceRecord, AttendanceSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

RecordInput = Union[AttendanceRecord, Mapping[str, Any]]


@dataclass(frozen=True)
class RecordResult:
    session: AttendanceSession
    created: bool


def parse_records(records: Optional[Iterable[RecordInput]]) -> list[AttendanceRecord]:
    """Normalize submitted records and reject an empty or self-duplicating batch.

    Mappings use the keys ``student_id`` (or ``student``) and ``status``.
    """

    if isinstance(records, (str, bytes, Mapping)) or (records is not None and not isinstance(records, abc.Iterable)):
        raise ValidationError("Records must be a list of {student_id, status} objects", field="records")

    parsed: list[AttendanceRecord] = []
    seen: set[int] = set()

    for raw in records or ():
        if isinstance(raw, AttendanceRecord):
            record = raw
        elif isinstance(raw, Mapping):
            student_id = require_id(raw.get("student_id", raw.get("student")), "Student")
            status_s = raw.get("status")
            try:
                status = AttendanceStatus(status_s)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid attendance status: {status_s!r}", student_id=student_id)
            record = AttendanceRecord(student_id=student_id, status=status)
        else:
            raise ValidationError(f"Invalid attendance record: {raw!r}", field="records")

        if record.student_id in seen:
            raise ValidationError(
                f"Student {record.student_id} appears more than once in this batch",
                student_id=record.student_id,
            )
        seen.add(record.student_id)
        parsed.append(record)

    if not parsed:
        raise ValidationError("Subject and records are required", field="records")
    return parsed


class AttendanceRecorder:
    """Use case: mark a day's attendance for a subject.

    Keeps one session per (subject, calendar day) and at most one record per
    student inside it. Everything is validated before the store is touched,
    so a rejected call leaves no partial mutation behind.
    """

    def __init__(
        self,
        sessions: AttendanceRepository,
        students: StudentRepository,
        subjects: SubjectRepository,
        *,
        locks: Optional[KeyedLock] = None,
        max_attempts: int = SESSION_CREATE_ATTEMPTS,
    ):
        self._sessions = sessions
        self._students = students
        self._subjects = subjects
        self._locks = locks or KeyedLock()
        self._max_attempts = max(1, int(max_attempts))

    def record_attendance(
        self,
        actor: Actor,
        *,
        date: DateInput,
        subject_id: Any,
        records: Optional[Iterable[RecordInput]],
        topic: Optional[str] = None,
    ) -> RecordResult:
        authorize(actor, Operation.MARK_ATTENDANCE)

        subject_id = require_id(subject_id, "Subject")
        entries = parse_records(records)
        day_start, day_end = day_bounds(date)
        topic = optional_text(topic, "Topic")

        if not self._subjects.get_by_id(subject_id):
            raise NotFoundError("Subject", subject_id)
        self._check_students(actor, entries)

        with self._locks.hold((subject_id, day_start)):
            for attempt in range(1, self._max_attempts + 1):
                existing = self._sessions.find_for_subject_and_day(
                    subject_id=subject_id, day_start=day_start, day_end=day_end
                )

                if existing is None:
                    try:
                        session = self._sessions.create_session(
                            subject_id=subject_id,
                            session_date=day_start,
                            records=entries,
                            topic=topic,
                        )
                    except DuplicateSessionError:
                        # Another process created it between our lookup and insert.
                        logger.info(
                            "Lost session creation race for subject %s on %s (attempt %s)",
                            subject_id,
                            day_start,
                            attempt,
                        )
                        continue
                    logger.info(
                        "Created session %s for subject %s on %s with %s records",
                        session.session_id,
                        subject_id,
                        day_start,
                        len(entries),
                    )
                    return RecordResult(session=session, created=True)

                self._reject_already_marked(existing, entries)
                session = self._sessions.append_records(session_id=existing.session_id, records=entries)
                logger.info("Appended %s records to session %s", len(entries), session.session_id)
                return RecordResult(session=session, created=False)

        raise ConcurrencyError(
            "Attendance session is being modified concurrently, please retry",
            subject_id=subject_id,
            date=day_start.isoformat(),
        )

    def _check_students(self, actor: Actor, entries: Sequence[AttendanceRecord]) -> None:
        found = self._students.get_many([e.student_id for e in entries])
        for e in entries:
            student = found.get(e.student_id)
            if student is None:
                raise NotFoundError("Student", e.student_id)
            if actor.role == Role.TEACHER and student.assigned_teacher_id != actor.user_id:
                logger.warning("Teacher %s tried to mark unassigned student %s", actor.user_id, e.student_id)
                raise AuthorizationError(
                    "Unauthorized: You can only mark attendance for your assigned students. "
                    f"Student ID: {e.student_id}",
                    student_id=e.student_id,
                )

    @staticmethod
    def _reject_already_marked(session: AttendanceSession, entries: Sequence[AttendanceRecord]) -> None:
        marked = session.student_ids
        for e in entries:
            if e.student_id in marked:
                raise ConflictError(
                    f"Attendance already marked for student {e.student_id} on this date.",
                    student_id=e.student_id,
                    session_id=session.session_id,
                )
