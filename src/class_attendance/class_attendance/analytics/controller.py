from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.web import current_actor, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/analytics/class-report", endpoint="class_report")
    @auth
    def class_report():
        return jsonify(container.analytics_service.class_report(current_actor()).to_dict())

    @app.route("/api/analytics/monthly", endpoint="monthly_summary")
    @auth
    def monthly_summary():
        rows = container.analytics_service.monthly_summary(current_actor())
        return jsonify([asdict(r) for r in rows])

    @app.route("/api/analytics/subjects", endpoint="subject_summary")
    @auth
    def subject_summary():
        rows = container.analytics_service.subject_summary(current_actor())
        return jsonify([asdict(r) for r in rows])

    @app.route("/api/analytics/student/me", endpoint="my_stats")
    @auth
    def my_stats():
        return jsonify(container.analytics_service.my_stats(current_actor()).to_dict())

    @app.route("/api/analytics/student/<int:student_id>", endpoint="student_stats")
    @auth
    def student_stats(student_id: int):
        detail = container.analytics_service.student_detail(current_actor(), student_id=student_id)
        return jsonify(detail.to_dict())
