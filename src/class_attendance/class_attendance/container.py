from __future__ import annotations

from dataclasses import dataclass

from .analytics.service import AnalyticsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.recorder import AttendanceRecorder
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.locks import KeyedLock
from .core.constants import AT_RISK_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    students_repo: StudentRepository
    subjects_repo: SubjectRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    subject_service: SubjectService
    attendance_recorder: AttendanceRecorder
    attendance_service: AttendanceService
    analytics_service: AnalyticsService


def wire_container(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    subjects_repo: SubjectRepository,
    attendance_repo: AttendanceRepository,
    at_risk_threshold: float = AT_RISK_THRESHOLD,
) -> Container:
    """Build services over any repository implementations (MySQL or fakes)."""

    user_service = UserService(users_repo)

    return Container(
        users_repo=users_repo,
        students_repo=students_repo,
        subjects_repo=subjects_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        user_service=user_service,
        student_service=StudentService(students_repo, users_repo, user_service),
        subject_service=SubjectService(subjects_repo, users_repo),
        attendance_recorder=AttendanceRecorder(attendance_repo, students_repo, subjects_repo, locks=KeyedLock()),
        attendance_service=AttendanceService(attendance_repo, students_repo),
        analytics_service=AnalyticsService(
            attendance_repo, students_repo, users_repo, at_risk_threshold=at_risk_threshold
        ),
    )


def build_container(*, db_config: dict, at_risk_threshold: float = AT_RISK_THRESHOLD) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        at_risk_threshold=at_risk_threshold,
    )
