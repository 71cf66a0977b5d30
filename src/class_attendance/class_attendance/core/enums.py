from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"

    @property
    def is_staff(self) -> bool:
        return self in (Role.ADMIN, Role.TEACHER)


class AttendanceStatus(str, Enum):
    """Per-student outcome of one class session, as stored in the DB."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"

    @property
    def is_attended(self) -> bool:
        # Late still counts towards the attendance percentage.
        return self in (AttendanceStatus.PRESENT, AttendanceStatus.LATE)
