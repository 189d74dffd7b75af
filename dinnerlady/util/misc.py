from __future__ import annotations

import math
from typing import Any


def to_bool(value: Any) -> bool:
    """Robustly convert a value to a boolean.

    Handles common string representations for True (e.g., "true", "1", "yes")
    and False (e.g., "false", "0", "no"). Falls back to standard Python
    boolean casting for other types.
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on", "t", "y"}:
            return True
        if lowered in {"false", "0", "no", "off", "f", "n"}:
            return False
    return bool(value)


def to_float(value: Any) -> float:
    """Convert a config value to a finite float.

    Accepts numbers and numeric strings. Booleans are rejected because a
    stray ``true`` in a JSON file is almost certainly a mistake for a number.

    Raises:
        ValueError: If the value is not numeric or not finite.
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got boolean {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"expected a number, got {value!r}") from exc
    if not math.isfinite(result):
        raise ValueError(f"expected a finite number, got {value!r}")
    return result


def to_int(value: Any) -> int:
    """Convert a config value to an int, accepting integral floats ("2.0")."""
    result = to_float(value)
    if not result.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(result)
