from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, DuplicateSessionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, AttendanceSession, RecordView, SessionView, StudentRef
from .repository import AttendanceRepository


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _load_session(cur, session_id: int) -> Optional[AttendanceSession]:
        cur.execute(
            "SELECT session_id, subject_id, session_date, topic FROM attendance_sessions WHERE session_id=%s",
            (int(session_id),),
        )
        row = fetchone(cur)
        if not row:
            return None

        cur.execute(
            "SELECT student_id, status FROM attendance_records WHERE session_id=%s ORDER BY record_id",
            (int(session_id),),
        )
        records = tuple(
            AttendanceRecord(student_id=int(r["student_id"]), status=AttendanceStatus(r["status"])) for r in fetchall(cur)
        )
        return AttendanceSession(
            session_id=int(row["session_id"]),
            session_date=_as_date(row["session_date"]),
            subject_id=int(row["subject_id"]),
            records=records,
            topic=row.get("topic"),
        )

    @staticmethod
    def _insert_records(cur, session_id: int, records: Sequence[AttendanceRecord]) -> None:
        cur.executemany(
            "INSERT INTO attendance_records(session_id, student_id, status) VALUES(%s,%s,%s)",
            [(int(session_id), int(r.student_id), r.status.value) for r in records],
        )

    def find_for_subject_and_day(self, *, subject_id: int, day_start: date, day_end: date) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id
                FROM attendance_sessions
                WHERE subject_id=%s AND session_date >= %s AND session_date < %s
                ORDER BY session_id
                LIMIT 1
                """,
                (int(subject_id), day_start, day_end),
            )
            row = fetchone(cur)
            if not row:
                return None
            return self._load_session(cur, int(row["session_id"]))

    def create_session(
        self,
        *,
        subject_id: int,
        session_date: date,
        records: Sequence[AttendanceRecord],
        topic: Optional[str] = None,
    ) -> AttendanceSession:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO attendance_sessions(subject_id, session_date, topic) VALUES(%s,%s,%s)",
                    (int(subject_id), session_date, topic),
                )
            except IntegrityError as e:
                if is_duplicate_key(e, key_name="uq_sessions_subject_day"):
                    raise DuplicateSessionError(
                        "Attendance session already exists for this subject and day",
                        subject_id=subject_id,
                        date=session_date.isoformat(),
                    ) from e
                raise

            session_id = int(cur.lastrowid)
            self._insert_records(cur, session_id, records)
            return self._load_session(cur, session_id)

    def append_records(self, *, session_id: int, records: Sequence[AttendanceRecord]) -> AttendanceSession:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the session serializes appenders across processes.
            cur.execute("SELECT session_id FROM attendance_sessions WHERE session_id=%s FOR UPDATE", (int(session_id),))
            fetchone(cur)
            cur.execute("SELECT student_id FROM attendance_records WHERE session_id=%s", (int(session_id),))
            marked = {int(r["student_id"]) for r in fetchall(cur)}
            for r in records:
                if r.student_id in marked:
                    raise ConflictError(
                        f"Attendance already marked for student {r.student_id} on this date.",
                        student_id=r.student_id,
                        session_id=session_id,
                    )

            try:
                self._insert_records(cur, session_id, records)
            except IntegrityError as e:
                if is_duplicate_key(e, key_name="uq_records_session_student"):
                    raise ConflictError("Attendance already marked on this date.", session_id=session_id) from e
                raise
            return self._load_session(cur, session_id)

    def list_views(
        self,
        *,
        student_id: Optional[int] = None,
        subject_id: Optional[int] = None,
    ) -> Sequence[SessionView]:
        clauses: list[str] = []
        params: list[object] = []

        if student_id is not None:
            clauses.append("s.session_id IN (SELECT session_id FROM attendance_records WHERE student_id=%s)")
            params.append(int(student_id))
        if subject_id is not None:
            clauses.append("s.subject_id=%s")
            params.append(int(subject_id))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.session_id, s.session_date, s.subject_id, s.topic,
                    sub.name AS subject_name,
                    r.student_id, r.status,
                    st.student_id AS known_student_id, st.name AS student_name, st.roll_number
                FROM attendance_sessions s
                LEFT JOIN subjects sub ON sub.subject_id = s.subject_id
                LEFT JOIN attendance_records r ON r.session_id = s.session_id
                LEFT JOIN students st ON st.student_id = r.student_id
                {where}
                ORDER BY s.session_id, r.record_id
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        views: list[SessionView] = []
        current: Optional[dict] = None
        for row in rows:
            if current is None or current["session_id"] != int(row["session_id"]):
                if current is not None:
                    views.append(SessionView(**current))
                current = {
                    "session_id": int(row["session_id"]),
                    "session_date": _as_date(row["session_date"]),
                    "subject_id": int(row["subject_id"]),
                    "subject_name": row.get("subject_name"),
                    "topic": row.get("topic"),
                    "records": (),
                }

            if row.get("student_id") is None:
                continue  # session without records

            student = None
            if row.get("known_student_id") is not None:
                student = StudentRef(
                    student_id=int(row["known_student_id"]),
                    name=row["student_name"],
                    roll_number=row["roll_number"],
                )
            current["records"] += (
                RecordView(student_id=int(row["student_id"]), status=AttendanceStatus(row["status"]), student=student),
            )

        if current is not None:
            views.append(SessionView(**current))
        return views
