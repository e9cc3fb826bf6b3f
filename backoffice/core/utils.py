"""
Utility helpers shared across repositories/routers.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Optional

from .errors import ValidationError


def now_iso() -> str:
    """UTC timestamp in the persisted format, ex.: 2024-05-01T12:30:00.000Z."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored ISO timestamp; naive values are taken as UTC. Returns None when unparseable."""
    if not value or not isinstance(value, str):
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def parse_filter_date(value: Any, field: str, *, end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse a date/datetime coming from a query string.
    A date-only upper bound covers the whole day.
    """
    if value in (None, ""):
        return None
    raw = str(value).strip()
    if len(raw) == 10:
        try:
            day = date.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"{field} debe ser una fecha válida")
        moment = time.max if end_of_day else time.min
        return datetime.combine(day, moment, tzinfo=timezone.utc)
    parsed = parse_timestamp(raw)
    if parsed is None:
        raise ValidationError(f"{field} debe ser una fecha válida")
    return parsed


def coerce_id(value: Any, label: str = "ID") -> int:
    if isinstance(value, bool):
        raise ValidationError(f"El {label} debe ser un número válido mayor a 0")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"El {label} debe ser un número válido mayor a 0")
    if number <= 0:
        raise ValidationError(f"El {label} debe ser un número válido mayor a 0")
    return number


def optional_ref(value: Any, label: str) -> Optional[int]:
    """Weak references: empty values and 0 mean "no reference"."""
    if value in (None, "", 0, "0"):
        return None
    return coerce_id(value, label)


def to_number(value: Any, default: float | int = 0) -> float | int:
    """Lenient numeric coercion; integral values stay ints."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number:  # NaN
        return default
    return int(number) if number.is_integer() else number


def to_non_negative_number(value: Any, field: str) -> float | int:
    """Strict counterpart of to_number for user input: non-numeric or negative values are rejected."""
    message = f"El campo {field} debe ser un número válido mayor o igual a 0"
    if isinstance(value, bool) or value is None:
        raise ValidationError(message)
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message)
    if number != number or number in (float("inf"), float("-inf")) or number < 0:
        raise ValidationError(message)
    return int(number) if number.is_integer() else number


def to_non_negative_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"El campo {field} debe ser un número válido mayor o igual a 0")
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"El campo {field} debe ser un número válido mayor o igual a 0")
    if number < 0 or not number.is_integer():
        raise ValidationError(f"El campo {field} debe ser un número válido mayor o igual a 0")
    return int(number)


def clean_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ("" if value is None else str(value))
