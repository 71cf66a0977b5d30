"""Per-operation authorization policy.

Every use case names its ``Operation`` and calls :func:`authorize` before doing
any work, so the role rules live in one table instead of inline ``if role``
checks scattered through the services.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from .enums import Role
from .exceptions import AuthorizationError

if TYPE_CHECKING:
    from ..users.model import Actor


class Operation(str, Enum):
    MARK_ATTENDANCE = "mark_attendance"
    VIEW_STUDENT_HISTORY = "view_student_history"
    VIEW_SUBJECT_HISTORY = "view_subject_history"

    VIEW_CLASS_REPORT = "view_class_report"
    VIEW_MONTHLY_SUMMARY = "view_monthly_summary"
    VIEW_SUBJECT_SUMMARY = "view_subject_summary"
    VIEW_OWN_STATS = "view_own_stats"

    MANAGE_USERS = "manage_users"

    LIST_STUDENTS = "list_students"
    CREATE_STUDENT = "create_student"
    UPDATE_STUDENT = "update_student"
    DELETE_STUDENT = "delete_student"

    LIST_SUBJECTS = "list_subjects"
    CREATE_SUBJECT = "create_subject"


_ALL = frozenset(Role)
_STAFF = frozenset({Role.ADMIN, Role.TEACHER})
_ADMIN = frozenset({Role.ADMIN})

POLICY: dict[Operation, frozenset[Role]] = {
    Operation.MARK_ATTENDANCE: _STAFF,
    Operation.VIEW_STUDENT_HISTORY: _ALL,
    Operation.VIEW_SUBJECT_HISTORY: _STAFF,
    Operation.VIEW_CLASS_REPORT: _ALL,
    Operation.VIEW_MONTHLY_SUMMARY: _ALL,
    Operation.VIEW_SUBJECT_SUMMARY: _ALL,
    Operation.VIEW_OWN_STATS: frozenset({Role.STUDENT}),
    Operation.MANAGE_USERS: _ADMIN,
    Operation.LIST_STUDENTS: _STAFF,
    Operation.CREATE_STUDENT: _STAFF,
    Operation.UPDATE_STUDENT: _STAFF,
    Operation.DELETE_STUDENT: _ADMIN,
    Operation.LIST_SUBJECTS: _ALL,
    Operation.CREATE_SUBJECT: _ADMIN,
}


def is_allowed(role: Role, operation: Operation) -> bool:
    return role in POLICY.get(operation, frozenset())


def authorize(actor: "Actor", operation: Operation) -> None:
    if not is_allowed(actor.role, operation):
        raise AuthorizationError(
            f"Role ({actor.role.value}) is not allowed to {operation.value.replace('_', ' ')}",
            operation=operation.value,
        )
