from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_str(payload: Optional[dict[str, Any]], key: str) -> Optional[str]:
    """Read an optional string field from a JSON body, treating blanks as missing."""

    if not payload:
        return None
    value = payload.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None
