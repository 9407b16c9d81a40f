"""Setting key validation and value coercion."""

import json
import math
import re
from decimal import Decimal
from typing import Any, Dict, Mapping

from trustypcs.core.errors import InvalidSettingKey

SETTING_KEY_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def is_valid_key(key: Any) -> bool:
    """Check a key against the allowed pattern (whole string)."""
    return isinstance(key, str) and SETTING_KEY_PATTERN.fullmatch(key) is not None


def validate_key(key: str) -> str:
    """Return the key or raise InvalidSettingKey."""
    if not is_valid_key(key):
        raise InvalidSettingKey(key)
    return key


def format_number(value: float) -> str:
    """
    Format a float the way JavaScript's Number#toString does.

    Integral values below 1e21 print as integers, magnitudes of 1e21 and up
    or below 1e-6 use exponent form ("1e+300", "1.5e-7"), everything else is
    plain decimal.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    magnitude = abs(value)
    if value.is_integer() and magnitude < 1e21:
        return str(int(value))

    text = repr(value)
    if magnitude >= 1e21 or magnitude < 1e-6:
        mantissa, _, exponent = text.partition("e")
        exp = int(exponent)
        return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"
    if "e" in text:
        # repr switches to exponent form below 1e-4
        return format(Decimal(text), "f")
    return text


def coerce_value(value: Any) -> str:
    """
    Convert a decoded JSON value to its stored string form.

    Booleans and null use their JSON spelling, floats follow JavaScript
    number formatting, and arrays/objects are stored as compact JSON.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_number(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def prepare_updates(updates: Mapping[str, Any]) -> Dict[str, str]:
    """
    Validate every key and coerce every value of an update batch.

    Raises InvalidSettingKey for the first bad key in iteration order,
    before anything is returned, so callers never write a partial batch.
    """
    for key in updates:
        validate_key(key)
    return {key: coerce_value(value) for key, value in updates.items()}
