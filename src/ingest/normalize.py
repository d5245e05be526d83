"""Cell and header normalization applied while parsing a workbook.

Headers become snake_case metric keys (``"Standard Queue 1-Level"`` →
``standard_queue_1_level``); cells become numbers, trimmed strings or
None.  Nothing here depends on specific column names.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from datetime import date, datetime, time
from typing import Any

_SEPARATORS = re.compile(r"[\s\-]+")
_SPECIAL = re.compile(r"[()\[\]{}.,;:!?'\"]")
_MULTI_UNDERSCORE = re.compile(r"_+")


def normalize_column_name(name: Any) -> str:
    """Normalize a header cell to a metric key; non-strings give ``""``."""
    if not name or not isinstance(name, str):
        return ""
    key = name.lower()
    key = _SEPARATORS.sub("_", key)
    key = _SPECIAL.sub("", key)
    key = _MULTI_UNDERSCORE.sub("_", key)
    return key.strip("_")


def normalize_sheet_name(name: Any) -> str:
    if not name or not isinstance(name, str):
        return ""
    return name.lower()


def is_numeric(value: Any) -> bool:
    """True for finite numbers and for strings that parse as one (commas ignored)."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return False
        try:
            return math.isfinite(float(cleaned))
        except ValueError:
            return False
    return False


def convert_value(value: Any) -> Any:
    """Convert a raw cell to its stored form.

    Empty → None, numbers unchanged, numeric strings → float, other strings
    trimmed, dates/times → ISO-8601 text.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        cleaned = trimmed.replace(",", "")
        if is_numeric(cleaned):
            return float(cleaned)
        return trimmed
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


def is_empty_value(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_empty_column(values: Iterable[Any]) -> bool:
    """True when the column has no cells or every cell is blank."""
    values = list(values)
    return not values or all(is_empty_value(v) for v in values)
