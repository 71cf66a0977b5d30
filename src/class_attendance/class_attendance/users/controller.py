from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import current_actor, json_body, login_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        actor = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=int(app.config.get("SESSION_DAYS", 7)))
        session["user_id"] = actor.user_id
        session["role"] = actor.role.value

        return jsonify({"user_id": actor.user_id, "name": actor.name, "email": actor.email, "role": actor.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", endpoint="me")
    @auth
    def me():
        actor = current_actor()
        return jsonify({"user_id": actor.user_id, "name": actor.name, "email": actor.email, "role": actor.role.value})

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @auth
    def list_users():
        users = container.user_service.list_users(current_actor())
        return jsonify([u.public_view() for u in users])

    @app.route("/api/users", methods=["POST"], endpoint="add_user")
    @auth
    def add_user():
        body = json_body()
        try:
            role = Role(body.get("role") or Role.STUDENT.value)
        except ValueError:
            raise ValidationError("Invalid role", role=body.get("role"))

        user = container.user_service.create_account(
            current_actor(),
            name=body.get("name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
            role=role,
        )
        return jsonify(user.public_view()), 201

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @auth
    def delete_user(user_id: int):
        container.user_service.delete_user(current_actor(), user_id=user_id)
        return jsonify({"message": "User removed"})

    @app.route("/api/users/<int:user_id>/status", methods=["PATCH"], endpoint="update_user_status")
    @auth
    def update_user_status(user_id: int):
        body = json_body()
        if "is_active" not in body:
            raise ValidationError("is_active is required", field="is_active")
        user = container.user_service.set_active(current_actor(), user_id=user_id, is_active=bool(body["is_active"]))
        return jsonify({"user_id": user.user_id, "is_active": user.is_active})
