from __future__ import annotations

import logging
from typing import Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.permissions import Operation, authorize
from .model import Actor, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> Actor:
        email = (email or "").strip().lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            logger.info("Login failed for %s (unknown or inactive)", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' from seed.sql
            ok = False

        if not ok:
            logger.info("Login failed for %s (bad password)", email)
            raise AuthenticationError("Invalid email or password")

        return Actor.of(user)

    def resolve(self, user_id: int) -> Actor:
        """Rebuild the actor for a stored login, rejecting disabled accounts."""

        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("Not authorized, please log in again")
        return Actor.of(user)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(self, actor: Actor, *, name: str, email: str, password: str, role: Role) -> User:
        authorize(actor, Operation.MANAGE_USERS)
        return self.register(name=name, email=email, password=password, role=role)

    def register(self, *, name: str, email: str, password: str, role: Role) -> User:
        """Create a login without an acting admin (bootstrap / student enrolment)."""

        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("User already exists", email=email)

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Created %s account %s (id=%s)", role.value, email, user_id)
        return User(user_id=user_id, name=name, email=email, password_hash="", role=role)

    def list_users(self, actor: Actor) -> Sequence[User]:
        authorize(actor, Operation.MANAGE_USERS)
        return self._users.list_all()

    def delete_user(self, actor: Actor, *, user_id: int) -> None:
        authorize(actor, Operation.MANAGE_USERS)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User", user_id)
        if user.user_id == actor.user_id:
            raise ValidationError("You cannot delete your own account", user_id=user.user_id)
        if user.role == Role.ADMIN and self._users.count_by_role(Role.ADMIN) <= 1:
            raise ValidationError("Cannot delete the last admin account", user_id=user.user_id)

        self._users.delete_by_id(user.user_id)
        logger.info("User %s deleted by %s", user.user_id, actor.user_id)

    def set_active(self, actor: Actor, *, user_id: int, is_active: bool) -> User:
        authorize(actor, Operation.MANAGE_USERS)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User", user_id)
        if user.user_id == actor.user_id and not is_active:
            raise ValidationError("You cannot deactivate your own account", user_id=user.user_id)

        self._users.set_active(user.user_id, is_active=bool(is_active))
        return User(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role,
            is_active=bool(is_active),
        )
