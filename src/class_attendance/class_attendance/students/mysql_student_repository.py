from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, name, roll_number, email, batch, contact, assigned_teacher_id, user_id"


def _to_student(row: dict) -> Student:
    return Student(
        student_id=int(row["student_id"]),
        name=row["name"],
        roll_number=row["roll_number"],
        email=row["email"],
        batch=row["batch"],
        contact=row.get("contact"),
        assigned_teacher_id=int(row["assigned_teacher_id"]),
        user_id=int(row["user_id"]) if row.get("user_id") is not None else None,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_one("student_id", int(student_id))

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[Student]:
        return self._get_one("email", email)

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        return self._get_one("roll_number", roll_number)

    def get_many(self, student_ids: Sequence[int]) -> dict[int, Student]:
        ids = sorted({int(i) for i in student_ids})
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id IN ({placeholders})", tuple(ids))
            return {s.student_id: s for s in (_to_student(r) for r in fetchall(cur))}

    def list_students(self, *, assigned_teacher_id: Optional[int] = None) -> Sequence[Student]:
        sql = f"SELECT {_COLUMNS} FROM students"
        params: tuple = ()
        if assigned_teacher_id is not None:
            sql += " WHERE assigned_teacher_id=%s"
            params = (int(assigned_teacher_id),)
        sql += " ORDER BY roll_number"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_student(r) for r in fetchall(cur)]

    def create_student(
        self,
        *,
        name: str,
        roll_number: str,
        email: str,
        batch: str,
        contact: Optional[str],
        assigned_teacher_id: int,
        user_id: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(name, roll_number, email, batch, contact, assigned_teacher_id, user_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (name, roll_number, email, batch, contact, int(assigned_teacher_id), user_id),
            )
            return int(cur.lastrowid)

    def update_student(self, student: Student) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, roll_number=%s, email=%s, batch=%s, contact=%s
                WHERE student_id=%s
                """,
                (student.name, student.roll_number, student.email, student.batch, student.contact, student.student_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        # attendance_records keep their student_id (no FK): history survives.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
