"""Best-effort parsing of free-text form fields.

None of these helpers raise: unparsable text falls back to a default.
"""

import math
import re
from typing import Optional

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{3}\b)")


def _clean_number_text(text: Optional[str]) -> str:
    if not text:
        return ""
    cleaned = text.strip().lstrip("$").strip()
    return _THOUSANDS_SEPARATOR.sub("", cleaned)


def parse_int(text: Optional[str], default: int = 0) -> int:
    """Parse the leading integer of ``text`` ("3 beds" -> 3, "2.5" -> 2)."""
    match = _INT_PREFIX.match(_clean_number_text(text))
    return int(match.group(0)) if match else default


def parse_float(text: Optional[str], default: float = 0.0) -> float:
    """Parse the leading decimal of ``text`` ("$450,000" -> 450000.0)."""
    match = _FLOAT_PREFIX.match(_clean_number_text(text))
    if not match:
        return default
    value = float(match.group(0))
    # "1e999" overflows to inf
    return value if math.isfinite(value) else default


def parse_address(text: Optional[str]) -> dict:
    """
    Split "street, city, STATE ZIP" into address parts.

    Heuristic only: comma separated segments, the last of which holds the
    state and zip separated by whitespace. Missing parts come back as "".
    Extra leading segments (unit numbers and the like) stay with the street.
    """
    text = text or ""
    parts = [part.strip() for part in text.split(",")]

    street = parts[0] or text
    city = parts[1] if len(parts) > 1 else ""
    state_zip = ""
    if len(parts) >= 3:
        street = ", ".join(parts[:-2]) or text
        city = parts[-2]
        state_zip = parts[-1]

    tokens = state_zip.split()
    state = " ".join(tokens[:-1]) if len(tokens) > 1 else "".join(tokens)
    zip_code = tokens[-1] if len(tokens) > 1 else ""

    return {
        "street": street,
        "city": city,
        "state": state,
        "zip": zip_code,
    }
