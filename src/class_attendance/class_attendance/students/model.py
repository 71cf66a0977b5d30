from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student profile (separate from the login account)."""

    student_id: int
    name: str
    roll_number: str
    email: str
    batch: str
    assigned_teacher_id: int
    contact: Optional[str] = None
    user_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "roll_number": self.roll_number,
            "email": self.email,
            "batch": self.batch,
            "contact": self.contact,
            "assigned_teacher_id": self.assigned_teacher_id,
            "user_id": self.user_id,
        }


@dataclass(frozen=True)
class StudentChanges:
    """Partial update; ``None`` fields keep their current value."""

    name: Optional[str] = None
    roll_number: Optional[str] = None
    email: Optional[str] = None
    batch: Optional[str] = None
    contact: Optional[str] = None
