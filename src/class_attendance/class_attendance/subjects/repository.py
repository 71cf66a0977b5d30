from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Subject]:
        raise NotImplementedError

    def list_subjects(self, *, teacher_id: Optional[int] = None) -> Sequence[Subject]:
        raise NotImplementedError

    def create_subject(self, *, name: str, code: str, teacher_id: int) -> int:
        raise NotImplementedError
