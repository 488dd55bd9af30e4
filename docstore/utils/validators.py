"""Validation and coercion helpers used across the project."""

from __future__ import annotations

import math
import re
from typing import Any, Final, Optional, Union

Number = Union[int, float]

# Collection names are interpolated into SQL, so only plain identifiers are allowed.
COLLECTION_NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,63}$")

# Decimal literals only: no underscores, hex or "nan"/"inf" spellings.
NUMERIC_STRING_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$"
)


def is_valid_collection_name(name: str) -> bool:
    """Check that *name* can be used as a table name without quoting issues."""
    if not isinstance(name, str):
        return False
    return bool(COLLECTION_NAME_PATTERN.match(name))


def validate_collection_name(name: str) -> str:
    """Return *name* unchanged or raise ``ValueError`` if it is not an identifier."""
    if not is_valid_collection_name(name):
        raise ValueError(f"Invalid collection name: {name!r}")
    return name


def to_number(value: Any) -> Optional[Number]:
    """
    Coerce *value* to an ``int`` or ``float``.

    - None and blank strings are 0
    - booleans become 0/1
    - ints and finite floats are returned as-is
    - strings holding a finite decimal literal are parsed
    - everything else (NaN, infinities, containers, other strings) yields ``None``
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if not NUMERIC_STRING_PATTERN.match(text):
            return None
        if any(ch in text for ch in ".eE"):
            number = float(text)
            return number if math.isfinite(number) else None
        return int(text)
    return None
