"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_container
from src.class_attendance.class_attendance.core.enums import Role
from src.class_attendance.class_attendance.users.model import Actor


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    admin = Actor(user_id=1, role=Role.ADMIN)
    subject = container.subject_service.list_subjects(admin)[0]
    students = container.student_service.list_students(admin)

    result = container.attendance_recorder.record_attendance(
        admin,
        date=date.today(),
        subject_id=subject.subject_id,
        records=[{"student_id": s.student_id, "status": "Present"} for s in students],
        topic="Introduction",
    )
    print("created" if result.created else "appended", result.session.to_dict())

    report = container.analytics_service.class_report(admin)
    for row in report.full_report:
        print(f"{row.roll_number:>6} {row.name:<20} {row.percentage:6.2f}%{'  AT RISK' if row.is_low_attendance else ''}")


if __name__ == "__main__":
    main()
