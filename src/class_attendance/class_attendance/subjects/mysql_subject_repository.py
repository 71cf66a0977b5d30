from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Subject
from .repository import SubjectRepository


def _to_subject(row: dict) -> Subject:
    return Subject(
        subject_id=int(row["subject_id"]),
        name=row["name"],
        code=row["code"],
        teacher_id=int(row["teacher_id"]),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id, name, code, teacher_id FROM subjects WHERE subject_id=%s", (int(subject_id),))
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def get_by_code(self, code: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id, name, code, teacher_id FROM subjects WHERE code=%s", (code,))
            row = fetchone(cur)
            return _to_subject(row) if row else None

    def list_subjects(self, *, teacher_id: Optional[int] = None) -> Sequence[Subject]:
        sql = "SELECT subject_id, name, code, teacher_id FROM subjects"
        params: tuple = ()
        if teacher_id is not None:
            sql += " WHERE teacher_id=%s"
            params = (int(teacher_id),)
        sql += " ORDER BY name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_subject(r) for r in fetchall(cur)]

    def create_subject(self, *, name: str, code: str, teacher_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO subjects(name, code, teacher_id) VALUES(%s,%s,%s)",
                (name, code, int(teacher_id)),
            )
            return int(cur.lastrowid)
