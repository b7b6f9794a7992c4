"""Normalisation helpers for the loosely typed legacy catalogue columns."""
import json
import math
import re
from datetime import datetime

_TRUE_WORDS = ("true", "1", "yes")
_FALSE_WORDS = ("false", "0", "no")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def is_numeric(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if not isinstance(value, str):
        return False
    try:
        number = float(value.strip())
    except ValueError:
        return False
    return math.isfinite(number)


def coerce_boolean(value):
    """Map request/legacy values to True, False or None when undecidable."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    if is_numeric(value):
        return bool(int(float(value)))
    lower = str(value).strip().lower()
    if lower in _TRUE_WORDS:
        return True
    if lower in _FALSE_WORDS:
        return False
    return None


def nullable_bool(value):
    """Query-string flag: blank means "no filter"."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    lower = str(value).strip().lower()
    if lower in ("1", "true", "on", "yes"):
        return True
    if lower in ("0", "false", "off", "no", ""):
        return False
    return None


def string_or_null(value):
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def safe_decode(value):
    """Decode a JSON string, returning the input unchanged when it is not JSON."""
    if not value or not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def decode_json_list(value) -> list:
    decoded = safe_decode(value)
    if isinstance(decoded, list):
        return decoded
    return []


def numeric_string(value):
    """Keep only digits, dots and minus signs of a price-like value."""
    if value is None or value == "":
        return None
    if is_numeric(value):
        return str(value)
    cleaned = _NON_NUMERIC.sub("", str(value))
    return cleaned or None


def to_float(value, default=0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def is_valid_discount(original, discount) -> bool:
    if original is None or discount is None:
        return False
    discount_value = to_float(discount)
    return 0 < discount_value < to_float(original)


def format_datetime(value):
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS``; unparsable input yields None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    try:
        return datetime.fromisoformat(str(value).strip()).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None


__all__ = [
    "coerce_boolean",
    "nullable_bool",
    "string_or_null",
    "safe_decode",
    "decode_json_list",
    "numeric_string",
    "to_float",
    "is_valid_discount",
    "format_datetime",
    "is_numeric",
]
