from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.class_attendance.class_attendance.attendance.model import (
    AttendanceRecord,
    AttendanceSession,
    RecordView,
    SessionView,
    StudentRef,
)
from src.class_attendance.class_attendance.container import wire_container
from src.class_attendance.class_attendance.core.enums import Role
from src.class_attendance.class_attendance.core.exceptions import ConflictError, DuplicateSessionError
from src.class_attendance.class_attendance.students.model import Student
from src.class_attendance.class_attendance.subjects.model import Subject
from src.class_attendance.class_attendance.users.model import Actor, User

ADMIN_ID = 1
TEACHER_ID = 2
OTHER_TEACHER_ID = 3
STUDENT_USER_ID = 4
PASSWORD = "password123"


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self._users: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self._users, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        user_id = self._next_id
        self._next_id += 1
        self._users[user_id] = User(user_id=user_id, name=name, email=email, password_hash=password_hash, role=role)
        return user_id

    def delete_by_id(self, user_id: int) -> bool:
        return self._users.pop(int(user_id), None) is not None

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        user = self._users.get(int(user_id))
        if not user:
            return False
        self._users[user.user_id] = replace(user, is_active=is_active)
        return True

    def list_all(self):
        return sorted(self._users.values(), key=lambda u: u.user_id, reverse=True)

    def count_by_role(self, role: Role) -> int:
        return sum(1 for u in self._users.values() if u.role == role)


class InMemoryStudents:
    def __init__(self, students: Sequence[Student] = ()):
        self._students: dict[int, Student] = {s.student_id: s for s in students}
        self._next_id = max(self._students, default=0) + 1

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._students.get(int(student_id))

    def get_many(self, student_ids):
        return {int(i): self._students[int(i)] for i in student_ids if int(i) in self._students}

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        return next((s for s in self._students.values() if s.user_id == user_id), None)

    def get_by_email(self, email: str) -> Optional[Student]:
        return next((s for s in self._students.values() if s.email == email), None)

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        return next((s for s in self._students.values() if s.roll_number == roll_number), None)

    def list_students(self, *, assigned_teacher_id: Optional[int] = None):
        items = [
            s for s in self._students.values() if assigned_teacher_id is None or s.assigned_teacher_id == assigned_teacher_id
        ]
        return sorted(items, key=lambda s: s.roll_number)

    def create_student(self, *, name, roll_number, email, batch, contact, assigned_teacher_id, user_id) -> int:
        student_id = self._next_id
        self._next_id += 1
        self._students[student_id] = Student(
            student_id=student_id,
            name=name,
            roll_number=roll_number,
            email=email,
            batch=batch,
            contact=contact,
            assigned_teacher_id=assigned_teacher_id,
            user_id=user_id,
        )
        return student_id

    def update_student(self, student: Student) -> bool:
        if student.student_id not in self._students:
            return False
        self._students[student.student_id] = student
        return True

    def delete_by_id(self, student_id: int) -> bool:
        return self._students.pop(int(student_id), None) is not None


class InMemorySubjects:
    def __init__(self, subjects: Sequence[Subject] = ()):
        self._subjects: dict[int, Subject] = {s.subject_id: s for s in subjects}
        self._next_id = max(self._subjects, default=0) + 1

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        return self._subjects.get(int(subject_id))

    def get_by_code(self, code: str) -> Optional[Subject]:
        return next((s for s in self._subjects.values() if s.code == code), None)

    def list_subjects(self, *, teacher_id: Optional[int] = None):
        return [s for s in self._subjects.values() if teacher_id is None or s.teacher_id == teacher_id]

    def create_subject(self, *, name: str, code: str, teacher_id: int) -> int:
        subject_id = self._next_id
        self._next_id += 1
        self._subjects[subject_id] = Subject(subject_id=subject_id, name=name, code=code, teacher_id=teacher_id)
        return subject_id

    def delete_by_id(self, subject_id: int) -> None:
        self._subjects.pop(int(subject_id), None)


class InMemoryAttendance:
    """Store with the same uniqueness guarantees as the MySQL schema."""

    def __init__(self, students: InMemoryStudents, subjects: InMemorySubjects):
        self._students = students
        self._subjects = subjects
        self._sessions: dict[int, AttendanceSession] = {}
        self._next_id = 1
        self._mutex = threading.Lock()
        self.create_calls = 0
        self.append_calls = 0

    @property
    def sessions(self) -> list[AttendanceSession]:
        return list(self._sessions.values())

    def find_for_subject_and_day(self, *, subject_id: int, day_start: date, day_end: date):
        for s in self._sessions.values():
            if s.subject_id == subject_id and day_start <= s.session_date < day_end:
                return s
        return None

    def create_session(self, *, subject_id, session_date, records, topic=None) -> AttendanceSession:
        with self._mutex:
            self.create_calls += 1
            if any(s.subject_id == subject_id and s.session_date == session_date for s in self._sessions.values()):
                raise DuplicateSessionError("duplicate session", subject_id=subject_id)
            session = AttendanceSession(
                session_id=self._next_id,
                session_date=session_date,
                subject_id=subject_id,
                records=tuple(records),
                topic=topic,
            )
            self._sessions[session.session_id] = session
            self._next_id += 1
            return session

    def append_records(self, *, session_id: int, records) -> AttendanceSession:
        with self._mutex:
            self.append_calls += 1
            session = self._sessions[session_id]
            for r in records:
                if r.student_id in session.student_ids:
                    raise ConflictError("already marked", student_id=r.student_id)
            session = replace(session, records=session.records + tuple(records))
            self._sessions[session_id] = session
            return session

    def add(self, *, subject_id: int, session_date: date, records, topic=None) -> AttendanceSession:
        """Test helper: seed a session directly."""

        return self.create_session(subject_id=subject_id, session_date=session_date, records=records, topic=topic)

    def list_views(self, *, student_id=None, subject_id=None):
        views = []
        for s in sorted(self._sessions.values(), key=lambda x: x.session_id):
            if subject_id is not None and s.subject_id != subject_id:
                continue
            if student_id is not None and student_id not in s.student_ids:
                continue
            subject = self._subjects.get_by_id(s.subject_id)
            views.append(
                SessionView(
                    session_id=s.session_id,
                    session_date=s.session_date,
                    subject_id=s.subject_id,
                    subject_name=subject.name if subject else None,
                    topic=s.topic,
                    records=tuple(_record_view(r, self._students.get_by_id(r.student_id)) for r in s.records),
                )
            )
        return views


def _record_view(record: AttendanceRecord, student: Optional[Student]) -> RecordView:
    ref = StudentRef(student.student_id, student.name, student.roll_number) if student else None
    return RecordView(student_id=record.student_id, status=record.status, student=ref)


def make_student(student_id: int, *, teacher_id: int = TEACHER_ID, user_id: Optional[int] = None, name: str = "") -> Student:
    return Student(
        student_id=student_id,
        name=name or f"Student {student_id}",
        roll_number=str(100 + student_id),
        email=f"s{student_id}@test.com",
        batch="2024-A",
        assigned_teacher_id=teacher_id,
        user_id=user_id,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 15, 9, 30, 0)


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id=ADMIN_ID, role=Role.ADMIN, email="admin@example.com")


@pytest.fixture
def teacher() -> Actor:
    return Actor(user_id=TEACHER_ID, role=Role.TEACHER, email="teacher1@test.com")


@pytest.fixture
def other_teacher() -> Actor:
    return Actor(user_id=OTHER_TEACHER_ID, role=Role.TEACHER, email="teacher2@test.com")


@pytest.fixture
def student_actor() -> Actor:
    return Actor(user_id=STUDENT_USER_ID, role=Role.STUDENT, email="s1@test.com")


@pytest.fixture
def users_repo() -> InMemoryUsers:
    pw = generate_password_hash(PASSWORD)
    return InMemoryUsers(
        [
            User(ADMIN_ID, "Admin User", "admin@example.com", pw, Role.ADMIN),
            User(TEACHER_ID, "John Teacher", "teacher1@test.com", pw, Role.TEACHER),
            User(OTHER_TEACHER_ID, "Jane Teacher", "teacher2@test.com", pw, Role.TEACHER),
            User(STUDENT_USER_ID, "Student 1", "s1@test.com", pw, Role.STUDENT),
        ]
    )


@pytest.fixture
def students_repo() -> InMemoryStudents:
    return InMemoryStudents(
        [
            make_student(1, user_id=STUDENT_USER_ID),
            make_student(2),
            make_student(3),
            make_student(4, teacher_id=OTHER_TEACHER_ID),
        ]
    )


@pytest.fixture
def subjects_repo() -> InMemorySubjects:
    return InMemorySubjects(
        [
            Subject(subject_id=10, name="Mathematics", code="MATH101", teacher_id=TEACHER_ID),
            Subject(subject_id=11, name="Physics", code="PHY101", teacher_id=OTHER_TEACHER_ID),
        ]
    )


@pytest.fixture
def attendance_repo(students_repo, subjects_repo) -> InMemoryAttendance:
    return InMemoryAttendance(students_repo, subjects_repo)


@pytest.fixture
def container(users_repo, students_repo, subjects_repo, attendance_repo):
    return wire_container(
        users_repo=users_repo,
        students_repo=students_repo,
        subjects_repo=subjects_repo,
        attendance_repo=attendance_repo,
    )
