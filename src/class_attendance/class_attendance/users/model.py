from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a login account.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True

    def public_view(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an operation."""

    user_id: int
    role: Role
    email: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def of(cls, user: User) -> "Actor":
        return cls(user_id=user.user_id, role=user.role, email=user.email, name=user.name)
