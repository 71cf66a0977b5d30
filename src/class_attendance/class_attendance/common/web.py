from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConcurrencyError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from ..container import Container
    from ..users.model import Actor

logger = logging.getLogger(__name__)

# Most specific first.
STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ConcurrencyError, 409),
)


def status_for(error: DomainError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def error_response(error: DomainError):
    return jsonify({"error": error.to_dict()}), status_for(error)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, AuthorizationError):
            logger.info("Forbidden %s %s: %s", request.method, request.path, e.message)
        return error_response(e)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": {"code": "http_error", "message": e.description, "details": {}}}), e.code

        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = str(e) if app.config.get("DEBUG") else "Internal server error"
        return jsonify({"error": {"code": "internal_error", "message": message, "details": {}}}), 500


def login_required(container: "Container"):
    """Resolve the session login into ``g.actor`` or answer 401."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user_id = session.get("user_id")
            if user_id is None:
                return error_response(AuthenticationError("Not authorized, please log in"))
            try:
                g.actor = container.auth_service.resolve(int(user_id))
            except AuthenticationError as e:
                session.clear()
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_actor() -> "Actor":
    return g.actor


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        body = request.form.to_dict()
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
