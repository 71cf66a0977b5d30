from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..common.validators import optional_text, require_email, require_id, require_non_empty
from ..core.constants import DEFAULT_STUDENT_PASSWORD
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.permissions import Operation, authorize
from ..users.model import Actor
from ..users.repository import UserRepository
from ..users.service import UserService
from .model import Student, StudentChanges
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def find_student_for_actor(students: StudentRepository, actor: Actor) -> Optional[Student]:
    """Student profile of a login: linked user id first, then email (legacy rows)."""

    student = students.get_by_user_id(actor.user_id)
    if student is None and actor.email:
        student = students.get_by_email(actor.email)
    return student


class StudentService:
    """Use cases: student roster management."""

    def __init__(self, students: StudentRepository, users: UserRepository, user_service: UserService):
        self._students = students
        self._users = users
        self._user_service = user_service

    def list_students(self, actor: Actor) -> Sequence[Student]:
        authorize(actor, Operation.LIST_STUDENTS)
        if actor.role == Role.TEACHER:
            return self._students.list_students(assigned_teacher_id=actor.user_id)
        return self._students.list_students()

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    def _require_teacher(self, teacher_id: int) -> int:
        teacher = self._users.get_by_id(teacher_id)
        if not teacher or teacher.role != Role.TEACHER:
            raise ValidationError("Assigned teacher must be an existing teacher", assigned_teacher_id=teacher_id)
        return teacher.user_id

    def create_student(
        self,
        actor: Actor,
        *,
        name: str,
        roll_number: str,
        email: str,
        batch: str,
        contact: Optional[str] = None,
        assigned_teacher_id: Optional[int] = None,
    ) -> Student:
        authorize(actor, Operation.CREATE_STUDENT)

        name = require_non_empty(name, "Name")
        roll_number = require_non_empty(roll_number, "Roll number")
        email = require_email(email)
        batch = require_non_empty(batch, "Batch")
        contact = optional_text(contact, "Contact")

        if actor.role == Role.TEACHER:
            # Teachers enrol students into their own roster only.
            if assigned_teacher_id not in (None, "") and int(assigned_teacher_id) != actor.user_id:
                raise AuthorizationError("Teachers can only add students assigned to themselves")
            teacher_id = actor.user_id
        else:
            teacher_id = self._require_teacher(require_id(assigned_teacher_id, "Assigned teacher"))

        if self._students.get_by_roll_number(roll_number):
            raise ValidationError("Student with this Roll Number already exists", roll_number=roll_number)
        if self._students.get_by_email(email):
            raise ValidationError("Student with this email already exists", email=email)

        user = self._users.get_by_email(email)
        if user is None:
            logger.info("Creating new student login for %s", email)
            user = self._user_service.register(name=name, email=email, password=DEFAULT_STUDENT_PASSWORD, role=Role.STUDENT)
        else:
            logger.info("Linking student %s to existing login %s", roll_number, user.user_id)

        student_id = self._students.create_student(
            name=name,
            roll_number=roll_number,
            email=email,
            batch=batch,
            contact=contact,
            assigned_teacher_id=teacher_id,
            user_id=user.user_id,
        )
        return Student(
            student_id=student_id,
            name=name,
            roll_number=roll_number,
            email=email,
            batch=batch,
            contact=contact,
            assigned_teacher_id=teacher_id,
            user_id=user.user_id,
        )

    def update_student(self, actor: Actor, *, student_id: int, changes: StudentChanges) -> Student:
        authorize(actor, Operation.UPDATE_STUDENT)

        student = self.get_student(student_id)
        if actor.role == Role.TEACHER and student.assigned_teacher_id != actor.user_id:
            raise AuthorizationError("You can only update your assigned students", student_id=student.student_id)

        updated = replace(
            student,
            name=optional_text(changes.name) or student.name,
            roll_number=optional_text(changes.roll_number) or student.roll_number,
            email=require_email(changes.email) if optional_text(changes.email) else student.email,
            batch=optional_text(changes.batch) or student.batch,
            contact=student.contact if changes.contact is None else optional_text(changes.contact, "Contact"),
        )

        if updated.roll_number != student.roll_number:
            other = self._students.get_by_roll_number(updated.roll_number)
            if other and other.student_id != student.student_id:
                raise ValidationError("Student with this Roll Number already exists", roll_number=updated.roll_number)
        if updated.email != student.email:
            other = self._students.get_by_email(updated.email)
            if other and other.student_id != student.student_id:
                raise ValidationError("Student with this email already exists", email=updated.email)

        self._students.update_student(updated)
        return updated

    def delete_student(self, actor: Actor, *, student_id: int) -> None:
        authorize(actor, Operation.DELETE_STUDENT)

        student = self.get_student(student_id)
        self._students.delete_by_id(student.student_id)
        logger.info("Student %s removed by %s; attendance history kept", student.student_id, actor.user_id)
