"""
Cell-level helpers shared by every cleaning stage.

Records stay plain dicts; a cell's variant is read with ``cell_kind`` and
moved between variants only through the explicit ``coerce_*`` functions.

Text rendering (``cell_text``) follows the browser client's ``String(value)``
so composite keys and CSV exports match what the dashboard produced before
cleaning moved server-side.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from dateutil import parser as dateutil_parser

# Literal sentinels the resolver treats as "no value" (case-sensitive).
MISSING_TOKENS: frozenset[str] = frozenset({"", "NaN"})

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Leading-numeric prefix, the same acceptance rule as JavaScript parseFloat.
LEADING_NUMBER_PATTERN = re.compile(r"^\s*[+-]?(?:\d|\.\d|Infinity)")

_HAS_DIGIT = re.compile(r"\d")

# Two fallbacks differing in year, month and day; a date part the text
# omits shows up as a difference between the two parses.
_DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

Number = Union[int, float]


class CellKind(str, Enum):
    ABSENT = "absent"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE_ISO = "date_iso"


def is_missing(value: Any) -> bool:
    """True for ``None``, the empty string and the literal ``"NaN"``."""
    if value is None:
        return True
    return isinstance(value, str) and value in MISSING_TOKENS


def cell_kind(value: Any) -> CellKind:
    if value is None:
        return CellKind.ABSENT
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return CellKind.BOOLEAN
    if isinstance(value, (int, float)):
        return CellKind.NUMBER
    if isinstance(value, str) and ISO_DATE_PATTERN.match(value):
        return CellKind.DATE_ISO
    return CellKind.TEXT


def _number_text(value: Number) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def cell_text(value: Any) -> str:
    """Render a cell the way the dashboard client stringifies it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _number_text(value)
    return str(value)


def looks_numeric(value: Any) -> bool:
    """parseFloat-style check: does the value start with a number?"""
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, (int, float)):
        return not math.isnan(value)
    return bool(LEADING_NUMBER_PATTERN.match(str(value)))


# ─────────────────────────────────────────────────────────────────────────────
# Coercions  (return the coerced value, or None when the rule does not apply)
# ─────────────────────────────────────────────────────────────────────────────

def _normalise_number(number: float) -> Number:
    return int(number) if number.is_integer() else number


def coerce_number(value: Any) -> Optional[Number]:
    """Finite numeric value of ``value``; integral results come back as int."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _normalise_number(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    # Python's float() accepts digit separators, the client never did
    if not text or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return _normalise_number(number)


def coerce_boolean(value: Any) -> Optional[bool]:
    if not isinstance(value, str):
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def coerce_iso_date(value: Any) -> Optional[str]:
    """
    Parse free-form date text and return ``YYYY-MM-DD``.

    Time-of-day is dropped; aware datetimes are moved to UTC first so the
    calendar day matches an ISO ``...Z`` timestamp.  Text without any digit
    is never treated as a date (avoids bare month or weekday names), and
    text missing its year, month or day ("10am", "12:30", "1/2") stays text.
    """
    if not isinstance(value, str) or not _HAS_DIGIT.search(value):
        return None
    try:
        parsed, alternate = (
            dateutil_parser.parse(value, default=default) for default in _DATE_DEFAULTS
        )
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.date() != alternate.date():
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()
