from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Subject:
    """Domain entity: a course owned by exactly one teacher."""

    subject_id: int
    name: str
    code: str
    teacher_id: int

    def to_dict(self) -> dict:
        return {
            "subject_id": self.subject_id,
            "name": self.name,
            "code": self.code,
            "teacher_id": self.teacher_id,
        }
