from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_actor, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @auth
    def mark_attendance():
        body = json_body()
        result = container.attendance_recorder.record_attendance(
            current_actor(),
            date=body.get("date"),
            subject_id=body.get("subject_id", body.get("subject")),
            records=body.get("records"),
            topic=body.get("topic"),
        )
        if result.created:
            return jsonify(result.session.to_dict()), 201
        return jsonify({"message": "Attendance updated", "attendance": result.session.to_dict()})

    @app.route("/api/attendance/student/<int:student_id>", endpoint="student_attendance")
    @auth
    def student_attendance(student_id: int):
        history = container.attendance_service.history_for_student(current_actor(), student_id=student_id)
        return jsonify([h.to_dict() for h in history])

    @app.route("/api/attendance/subject/<int:subject_id>", endpoint="subject_attendance")
    @auth
    def subject_attendance(subject_id: int):
        sessions = container.attendance_service.history_for_subject(current_actor(), subject_id=subject_id)
        return jsonify([s.to_dict() for s in sessions])
