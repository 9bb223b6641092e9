"""Type conversion for raw field values.

Each field declares a semantic type (string, number, boolean, date). Raw
values are coerced before any rule runs; a value that cannot be coerced
yields the CONVERSION_FAILED sentinel instead of raising.
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Any, Callable


class _ConversionFailure:
    """Marker for a value that could not be converted to its declared type."""

    _instance: "_ConversionFailure | None" = None

    def __new__(cls) -> "_ConversionFailure":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CONVERSION_FAILED"

    def __bool__(self) -> bool:
        return False


CONVERSION_FAILED = _ConversionFailure()

DEFAULT_TYPE = "string"

# Leading numeric prefix, as accepted by JavaScript's parseFloat
_FLOAT_PREFIX = re.compile(
    r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)

_TRUE_TOKENS = {"true", "on"}
_FALSE_TOKENS = {"false", "off"}

_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y%m%d",
    "%Y%m%d%H%M%S",
)


def stringify(value: Any) -> str:
    """Render a value as text for string fields and message templates."""
    if value is None or value is CONVERSION_FAILED:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    return str(value)


def to_number(value: Any) -> float | _ConversionFailure:
    """Parse a value as a float the way parseFloat does."""
    if value is None or isinstance(value, bool):
        return CONVERSION_FAILED

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # Integers beyond float range
            number = math.inf if value > 0 else -math.inf
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value.strip())
        if not match:
            return CONVERSION_FAILED
        number = float(match.group().replace("Infinity", "inf"))
    else:
        return CONVERSION_FAILED

    if math.isnan(number):
        return CONVERSION_FAILED
    return number


def to_boolean(value: Any) -> bool | _ConversionFailure:
    """Accept true/on and false/off tokens."""
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return CONVERSION_FAILED
    if value in _TRUE_TOKENS:
        return True
    if value in _FALSE_TOKENS:
        return False
    return CONVERSION_FAILED


def to_date(value: Any) -> datetime | _ConversionFailure:
    """Parse a calendar date/time into a timezone-aware datetime.

    Naive values are taken as UTC. Numbers are millisecond timestamps.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, bool) or value is None:
        return CONVERSION_FAILED

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return CONVERSION_FAILED

    if not isinstance(value, str):
        return CONVERSION_FAILED

    text = value.strip()
    if not text:
        return CONVERSION_FAILED

    parsed = _parse_date_string(text)
    if parsed is None:
        return CONVERSION_FAILED
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _parse_date_string(text: str) -> datetime | None:
    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _to_string(value: Any) -> str:
    return stringify(value)


CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "string": _to_string,
    "number": to_number,
    "boolean": to_boolean,
    "date": to_date,
}


def convert(value: Any, type_name: str | None = DEFAULT_TYPE) -> Any:
    """Convert a raw value to the declared type.

    Unknown types pass the raw value through unchanged.

    Returns:
        The converted value, or CONVERSION_FAILED
    """
    converter = CONVERTERS.get(type_name) if isinstance(type_name, str) else None
    if converter is None:
        return value
    return converter(value)


def is_conversion_failure(value: Any) -> bool:
    return value is CONVERSION_FAILED
