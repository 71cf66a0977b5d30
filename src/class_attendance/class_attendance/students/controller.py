from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_actor, json_body, login_required
from ..container import Container
from .model import StudentChanges


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @auth
    def list_students():
        students = container.student_service.list_students(current_actor())
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    @auth
    def create_student():
        body = json_body()
        student = container.student_service.create_student(
            current_actor(),
            name=body.get("name", ""),
            roll_number=body.get("roll_number", ""),
            email=body.get("email", ""),
            batch=body.get("batch", ""),
            contact=body.get("contact"),
            assigned_teacher_id=body.get("assigned_teacher_id"),
        )
        return jsonify(student.to_dict()), 201

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    @auth
    def update_student(student_id: int):
        body = json_body()
        changes = StudentChanges(
            name=body.get("name"),
            roll_number=body.get("roll_number"),
            email=body.get("email"),
            batch=body.get("batch"),
            contact=body.get("contact"),
        )
        student = container.student_service.update_student(current_actor(), student_id=student_id, changes=changes)
        return jsonify(student.to_dict())

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @auth
    def delete_student(student_id: int):
        container.student_service.delete_student(current_actor(), student_id=student_id)
        return jsonify({"message": "Student removed"})
