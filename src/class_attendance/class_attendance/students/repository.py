from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_many(self, student_ids: Sequence[int]) -> dict[int, Student]:
        """Lookup by id; unknown ids are simply absent from the result."""

        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        raise NotImplementedError

    def list_students(self, *, assigned_teacher_id: Optional[int] = None) -> Sequence[Student]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_student(self, student: Student) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError
