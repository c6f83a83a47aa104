"""Total coercion helpers for untrusted provider data.

None of these functions raise: provider payloads are partial and loosely
typed, so every value falls back to a neutral default instead.
"""

import math
from collections.abc import Mapping
from typing import Any


def is_record(value: Any) -> bool:
    """Return True if value is a mapping (a JSON object)."""
    return isinstance(value, Mapping)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> int | float:
    """Coerce a raw value to a finite number.

    Numbers pass through, numeric strings are parsed (integral strings stay
    ints), everything else - including booleans, None, NaN and infinities -
    becomes 0.

    Args:
        value: Raw value from a provider payload.

    Returns:
        Finite int or float.
    """
    if _is_number(value):
        return value if math.isfinite(value) else 0

    if isinstance(value, str):
        text = value.strip()
        # Python accepts digit separators ("1_000"), JSON numbers do not
        if not text or "_" in text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return 0
        return parsed if math.isfinite(parsed) else 0

    return 0


def _to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_string_array(value: Any) -> list[str]:
    """Convert each element of a list or tuple to a string, or return []."""
    if isinstance(value, (list, tuple)):
        return [_to_string(v) for v in value]
    return []


def to_boolean(value: Any) -> bool:
    """Coerce a raw value to bool.

    Booleans pass through, strings are true only for "true" (any case),
    anything else uses Python truthiness.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


def to_non_negative(value: Any) -> int | float:
    """Coerce to a number, treating negatives as invalid (0)."""
    number = to_number(value)
    return number if number > 0 else 0
