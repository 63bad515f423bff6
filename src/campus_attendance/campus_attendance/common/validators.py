from __future__ import annotations

from typing import Any, Optional

from ..core.constants import MAX_PROFILE_EXTENSION_KEY_LENGTH, MAX_PROFILE_EXTENSION_KEYS
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_non_negative_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number


def validate_extensions(extensions: Optional[dict]) -> dict:
    """Check the bounded `extensions` field stored on student profiles.

    Only a small flat mapping of scalar values is accepted; everything else
    must become a real column.
    """

    if extensions is None:
        return {}
    if not isinstance(extensions, dict):
        raise ValidationError("extensions must be an object")
    if len(extensions) > MAX_PROFILE_EXTENSION_KEYS:
        raise ValidationError(f"extensions allows at most {MAX_PROFILE_EXTENSION_KEYS} keys")

    for key, value in extensions.items():
        if not isinstance(key, str) or not key or len(key) > MAX_PROFILE_EXTENSION_KEY_LENGTH:
            raise ValidationError(f"Invalid extension key: {key!r}")
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise ValidationError(f"Extension {key!r} must be a scalar value")
    return dict(extensions)
