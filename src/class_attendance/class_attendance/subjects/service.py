from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_id, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..core.permissions import Operation, authorize
from ..users.model import Actor
from ..users.repository import UserRepository
from .model import Subject
from .repository import SubjectRepository

logger = logging.getLogger(__name__)


class SubjectService:
    def __init__(self, subjects: SubjectRepository, users: UserRepository):
        self._subjects = subjects
        self._users = users

    def list_subjects(self, actor: Actor) -> Sequence[Subject]:
        authorize(actor, Operation.LIST_SUBJECTS)
        if actor.role == Role.TEACHER:
            return self._subjects.list_subjects(teacher_id=actor.user_id)
        return self._subjects.list_subjects()

    def get_subject(self, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError("Subject", subject_id)
        return subject

    def create_subject(self, actor: Actor, *, name: str, code: str, teacher_id: int) -> Subject:
        authorize(actor, Operation.CREATE_SUBJECT)

        name = require_non_empty(name, "Name")
        code = require_non_empty(code, "Code").upper()
        teacher_id = require_id(teacher_id, "Teacher")

        teacher = self._users.get_by_id(teacher_id)
        if not teacher or teacher.role != Role.TEACHER:
            raise ValidationError("Subject teacher must be an existing teacher", teacher_id=teacher_id)
        if self._subjects.get_by_code(code):
            raise ValidationError("Subject code already exists", code=code)

        subject_id = self._subjects.create_subject(name=name, code=code, teacher_id=teacher_id)
        logger.info("Subject %s (%s) created for teacher %s", code, subject_id, teacher_id)
        return Subject(subject_id=subject_id, name=name, code=code, teacher_id=teacher_id)
