"""Shared input normalizers for request schemas."""

from typing import Any


def blank_to_none(value: Any) -> Any:
    """Empty or whitespace-only strings mean "absent"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def strip_text(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def require_value(value: Any, label: str) -> Any:
    """Reject None/blank for a field that must always carry a value."""
    value = blank_to_none(value)
    if value is None:
        raise ValueError(f"{label} is required")
    return strip_text(value)


def check_password_length(password: str, min_length: int) -> str:
    if len(password) < min_length:
        raise ValueError(f"Password must be at least {min_length} characters")
    return password
