"""Helpers for turning value objects into JSON-safe dictionaries and back."""

from datetime import datetime, timezone
from typing import Any, Optional


def dump_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def load_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_float(value: Any) -> Optional[float]:
    """Parse loosely typed numeric input ("4,500", 4500, None)."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", "").replace("$", "").strip())
    except ValueError:
        return None


def load_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "y")
    return bool(value)


def first_present(data: dict, *keys: str) -> Any:
    """Return the first non-empty value among alias keys."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None
