"""
Shared cell coercion for every import path.

All parsers (header-mapped rows and the fallback CSV dialect) go through these
helpers so that "missing" means the same thing everywhere: empty strings,
``#DIV/0!`` and ``NaN`` (any case) are missing, never zero.
"""
import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from global_config import MISSING_SENTINELS, MS_PER_DAY, SPREADSHEET_EPOCH

SPREADSHEET_EPOCH_UTC = datetime(*SPREADSHEET_EPOCH, tzinfo=timezone.utc)

# "MM/DD/YYYY HH:MM:SSAM" as written by some launch monitors, space before AM/PM optional
_US_CLOCK_RE = re.compile(
    r"^(\d{1,2})/(\d{1,2})/(\d{4})\s+(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])$"
)

_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%m/%d/%y %H:%M:%S",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%d %b %Y %H:%M:%S",
    "%d %b %Y",
    "%b %d, %Y %H:%M:%S",
    "%b %d, %Y",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_number(value: Any) -> Optional[float]:
    """Coerce a raw cell to a float, or None when missing / unparsable."""
    if value is None:
        return None
    if _is_number(value):
        number = float(value)
        return number if math.isfinite(number) else None

    text = str(value).strip()
    if text.upper() in MISSING_SENTINELS:
        return None
    try:
        number = float(text.replace(",", ""))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_int(value: Any) -> Optional[int]:
    """Coerce a raw cell to the nearest integer"""
    number = parse_number(value)
    if number is None:
        return None
    # halves round up
    return int(math.floor(number + 0.5))


def parse_text(value: Any) -> Optional[str]:
    """Trimmed string, None when empty"""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def from_spreadsheet_serial(serial: float) -> datetime:
    """Spreadsheet date serial (days since 1899-12-30) to a UTC datetime"""
    return SPREADSHEET_EPOCH_UTC + timedelta(milliseconds=round(serial * MS_PER_DAY))


def _from_serial(value) -> Optional[datetime]:
    if not math.isfinite(value):
        return None
    try:
        return from_spreadsheet_serial(float(value))
    except OverflowError:
        return None


def _parse_us_clock(text: str) -> Optional[datetime]:
    match = _US_CLOCK_RE.match(text)
    if not match:
        return None
    month, day, year, hour, minute, second, meridiem = match.groups()
    hour = int(hour) % 12
    if meridiem.upper() == "PM":
        hour += 12
    try:
        return datetime(int(year), int(month), int(day), hour, int(minute), int(second or 0),
                        tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Coerce a raw cell to a UTC datetime.

    Numbers are spreadsheet serials. Strings are tried as ISO 8601, then as
    a numeric serial, then the AM/PM clock format, then a list of common
    export formats. Naive values are taken as UTC. Anything else yields None
    rather than a made-up date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if _is_number(value):
        return _from_serial(value)

    text = str(value).strip()
    if not text:
        return None

    try:
        return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    # csv cells arrive as text, so numeric strings are serials too
    serial = parse_number(text)
    if serial is not None:
        return _from_serial(serial)

    moment = _parse_us_clock(text)
    if moment is not None:
        return moment

    for fmt in _DATE_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def epoch_millis(moment: Optional[datetime]) -> Optional[int]:
    """Milliseconds since the Unix epoch, None passes through"""
    if moment is None:
        return None
    return int(round(_as_utc(moment).timestamp() * 1000))


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))
