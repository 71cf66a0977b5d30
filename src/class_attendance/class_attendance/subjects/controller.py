from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_actor, json_body, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/subjects", methods=["GET"], endpoint="list_subjects")
    @auth
    def list_subjects():
        subjects = container.subject_service.list_subjects(current_actor())
        return jsonify([s.to_dict() for s in subjects])

    @app.route("/api/subjects", methods=["POST"], endpoint="create_subject")
    @auth
    def create_subject():
        body = json_body()
        subject = container.subject_service.create_subject(
            current_actor(),
            name=body.get("name", ""),
            code=body.get("code", ""),
            teacher_id=body.get("teacher_id"),
        )
        return jsonify(subject.to_dict()), 201
