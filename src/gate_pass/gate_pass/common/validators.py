from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.constants import MAX_PHONE_DIGITS, MIN_PHONE_DIGITS
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Invalid input data")
    return value.strip() or None


def require_phone(value: Any, field_name: str) -> str:
    """Accept digits with an optional leading '+'; spaces and dashes are dropped."""
    raw = require_non_empty(value, field_name)
    compact = raw.replace(" ", "").replace("-", "")
    digits = compact[1:] if compact.startswith("+") else compact
    if not digits.isdigit():
        raise ValidationError(f"{field_name} must contain only digits")
    if len(digits) < MIN_PHONE_DIGITS:
        raise ValidationError(f"{field_name} must be at least {MIN_PHONE_DIGITS} digits")
    if len(digits) > MAX_PHONE_DIGITS:
        raise ValidationError(f"{field_name} must be at most {MAX_PHONE_DIGITS} digits")
    return compact


def optional_phone(value: Any, field_name: str) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return require_phone(value, field_name)


def require_date(value: Any, field_name: str) -> date:
    raw = require_non_empty(value, field_name)
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")
