"""
Wire formatting helpers.

Two timestamp conventions coexist on the platform:

- RAW_UTC: ``<date>T<time>:00.000Z`` built by plain concatenation, used by
  event creation and by tickets created with a new event.
- OFFSET_REWRITTEN: the same instant parsed, re-rendered in UTC and with
  the trailing ``Z`` replaced by a fixed offset (``-0300``), used by
  coupons and by tickets added to an existing event.

The two shift stored instants by the offset relative to each other.
"""

import enum
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Union

DEFAULT_UTC_OFFSET = "-0300"

_RAW_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class TimestampConvention(str, enum.Enum):
    RAW_UTC = "raw_utc"
    OFFSET_REWRITTEN = "offset_rewritten"


def compose_utc_timestamp(date: str, time: str) -> str:
    """Concatenate a date and an HH:MM time into a UTC ISO instant."""
    return f"{date}T{time}:00.000Z"


def rewrite_utc_offset(timestamp: str, offset: str = DEFAULT_UTC_OFFSET) -> str:
    """
    Round-trip a UTC ISO instant through datetime and swap ``Z`` for ``offset``.

    Raises:
        ValueError: If the timestamp is not a valid instant
    """
    parsed = datetime.strptime(timestamp, _RAW_FORMAT).replace(tzinfo=timezone.utc)
    rendered = (
        parsed.strftime("%Y-%m-%dT%H:%M:%S")
        + f".{parsed.microsecond // 1000:03d}Z"
    )
    return rendered.replace("Z", offset)


def format_timestamp(
    date: str,
    time: str,
    convention: TimestampConvention,
    offset: str = DEFAULT_UTC_OFFSET,
) -> str:
    raw = compose_utc_timestamp(date, time)
    if convention == TimestampConvention.OFFSET_REWRITTEN:
        return rewrite_utc_offset(raw, offset)
    return raw


def parse_locale_decimal(value: Union[str, int, float]) -> Union[int, float]:
    """
    Parse a comma-decimal locale string into a JSON number.

    Only the first comma is replaced, so "1.234,5" is rejected rather than
    silently misread. Integral values come back as int ("5,00" -> 5).

    Raises:
        ValueError: If the value is not a number
    """
    text = str(value).strip().replace(",", ".", 1)
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Invalid decimal value: {value!r}")
    if not number.is_finite():
        raise ValueError(f"Invalid decimal value: {value!r}")
    if number == number.to_integral_value():
        return int(number)
    return float(number)
