"""Value classification helpers used while profiling record columns.

Record values arrive either as strings (CSV cells) or as native JSON values
(numbers, booleans, nested objects and arrays). These helpers give every value
a single text rendering and answer the questions the inference engine asks of
it: is it structured, is it a number, is it a calendar date.
"""

import json
import math
import re
from datetime import date, datetime
from typing import Any

Value = str | int | float | bool | dict[str, Any] | list[Any] | None

# Quick shape checks before attempting a real parse
_DATE_SHAPE = re.compile(r"^\d{1,4}[-/.]\d{1,2}[-/.]\d{1,4}")
_NAMED_MONTH_SHAPE = re.compile(r"[A-Za-z]{3,}")

# Fallback formats tried after ISO-8601
_DATE_FORMATS = [
    "%d/%m/%Y",  # DD/MM/YYYY: 30/03/2026
    "%m/%d/%Y",  # MM/DD/YYYY: 03/30/2026
    "%d-%m-%Y",  # DD-MM-YYYY: 30-03-2026
    "%Y/%m/%d",  # YYYY/MM/DD: 2026/03/30
    "%d.%m.%Y",  # DD.MM.YYYY: 30.03.2026
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%d %b %Y",  # 30 Mar 2026
    "%b %d %Y",  # Mar 30 2026
    "%B %d, %Y",  # March 30, 2026
    "%d %B %Y",  # 30 March 2026
]


def is_empty(value: Value) -> bool:
    """Null and empty-string values carry no type evidence."""
    return value is None or value == ""


def render(value: Value) -> str:
    """Render a value as text, the form its length is measured in."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def is_structured(value: Value) -> bool:
    """Check whether a value is a nested object or array, or its JSON text."""
    if isinstance(value, (dict, list)):
        return True
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text.startswith(("{", "[")):
        return False
    try:
        parsed = json.loads(text)
    except ValueError:
        return False
    return isinstance(parsed, (dict, list))


def as_number(value: Value) -> float | None:
    """Parse a value as a float, returning None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        # Digit separators are Python syntax, not data
        if "_" in value:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    # NaN and infinities fit no numeric column type
    return number if math.isfinite(number) else None


def is_decimal(number: float) -> bool:
    """Check whether a parsed number has a fractional part."""
    return not number.is_integer()


def is_date(value: Value) -> bool:
    """Check whether a value parses as a calendar date or date-time.

    Plain numbers are never dates, even when a lenient parser would read them
    as a year.
    """
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text or as_number(text) is not None:
        return False
    if not (_DATE_SHAPE.match(text) or _NAMED_MONTH_SHAPE.search(text)):
        return False
    return parse_date(text) is not None


def parse_date(text: str) -> date | None:
    """Parse text with ISO-8601 first, then the common fallback formats."""
    # Fast path: ISO formats are the most common in dumps and exports
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)  # noqa: DTZ007
        except ValueError:
            continue

    return None
