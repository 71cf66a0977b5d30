from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", field=field_name)
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters", field=field_name)
    return value


def require_email(value: Optional[str], field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"{field_name} is not a valid email address", field=field_name)
    return email


def require_id(value: Any, field_name: str) -> int:
    """Coerce a positive integer identifier (form values arrive as strings)."""

    if value is None or value == "":
        raise ValidationError(f"{field_name} is required", field=field_name)
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid id", field=field_name)
    if ident <= 0:
        raise ValidationError(f"{field_name} is not a valid id", field=field_name)
    return ident


def optional_text(value: Any, field_name: str = "Value") -> Optional[str]:
    """Strip free text; blank becomes ``None``. Numbers are accepted as text."""

    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text", field=field_name)
    return value.strip() or None
