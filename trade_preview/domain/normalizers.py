"""Cell normalizers turning raw spreadsheet values into canonical strings and numbers.

Every function here accepts whatever a CSV or spreadsheet reader hands back
(numbers, strings, ``datetime``/``date``/``time`` objects, ``None`` or NaN) and
never raises: malformed input degrades to an empty or best-effort value.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from numbers import Real

import pandas as pd

from trade_preview.config import SETTINGS

_DMY_PATTERN = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{2,5})$")
_ISO_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T\s].*)?$")
_HMS_PATTERN = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})$")
_HM_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")
_TRAILING_HMS_PATTERN = re.compile(r"(\d{1,2}):(\d{2}):(\d{2})$")
_YEAR_TOKEN = re.compile(r"(?<!\d)(\d{4})(?!\d)")
_DAY_TOKEN = re.compile(r"(?<!\d)\d{1,2}(?!\d)")
_NON_NUMERIC = re.compile(r"[^0-9.+-]")
_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def is_missing(value: object) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def to_text(value: object) -> str:
    """Stringify a cell the way it reads in the sheet (``7.0`` becomes ``"7"``)."""
    if is_missing(value):
        return ""
    if _is_number(value):
        number = float(value)  # type: ignore[arg-type]
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
    return str(value).strip()


def to_numeric(value: object) -> float | None:
    if value is None:
        return None
    if _is_number(value):
        number = float(value)  # type: ignore[arg-type]
        return number if math.isfinite(number) else None
    cleaned = _NON_NUMERIC.sub("", str(value).replace(",", "")).strip()
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def coerce_number(value: object) -> float | None:
    """Stricter than :func:`to_numeric`: strings must parse as a whole once commas go."""
    if _is_number(value):
        number = float(value)  # type: ignore[arg-type]
    elif isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def rupees_to_lacs(value: object) -> float:
    number = to_numeric(value)
    if number is None:
        return 0.0
    return round(number / SETTINGS.lac_divisor, SETTINGS.lac_precision)


def sanitize_display(value: object) -> str:
    """Blank out the usual "not available" placeholders, keep anything else as typed."""
    text = to_text(value)
    if _NON_ALNUM.sub("", text.upper()) in SETTINGS.no_value_tokens:
        return ""
    return text


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def serial_to_date(serial: float) -> date | None:
    """Convert a spreadsheet serial day number, or ``None`` when out of range."""
    if not SETTINGS.serial_min < serial < SETTINGS.serial_max:
        return None
    try:
        return SETTINGS.serial_epoch + timedelta(days=math.floor(serial))
    except OverflowError:
        return None


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_dmy(match: re.Match[str]) -> str | None:
    day, month, year_token = match.groups()
    year = int(year_token)
    if year > SETTINGS.transposed_year_threshold:
        serial = serial_to_date(year)
        return format_date(serial) if serial else None
    if len(year_token) == 2:
        year += 1900 if year >= SETTINGS.two_digit_year_pivot else 2000
    parsed = _safe_date(year, int(month), int(day))
    return format_date(parsed) if parsed else None


def _parse_generic(text: str) -> str | None:
    """Free-form dates such as ``"16 Jan 2025"``; needs a day and a 4-digit year."""
    years = {int(token) for token in _YEAR_TOKEN.findall(text)}
    if not years or not _DAY_TOKEN.search(_YEAR_TOKEN.sub(" ", text)):
        return None
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed) or parsed.year not in years:
        return None
    return format_date(parsed.date())


def normalize_date(value: object) -> str:
    """Return ``YYYY-MM-DD`` for anything date-like, else the trimmed original."""
    if is_missing(value):
        return ""
    if isinstance(value, datetime):
        return format_date(value.date())
    if isinstance(value, date):
        return format_date(value)

    text = to_text(value)
    numeric = coerce_number(value)
    if numeric is not None:
        serial = serial_to_date(numeric)
        return format_date(serial) if serial is not None else text

    iso = _ISO_PATTERN.match(text)
    if iso:
        parsed = _safe_date(*(int(part) for part in iso.groups()))
        if parsed is not None:
            return format_date(parsed)

    dmy = _DMY_PATTERN.match(text)
    if dmy:
        result = _parse_dmy(dmy)
        if result:
            return result

    return _parse_generic(text) or text


def parse_date_value(value: object) -> date | None:
    """Parse a cell or filter bound into a :class:`date`, or ``None``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    normalized = normalize_date(value)
    iso = _ISO_PATTERN.match(normalized)
    if not iso:
        return None
    return _safe_date(*(int(part) for part in iso.groups()))


def fraction_to_time(fraction: float) -> str:
    normalized = fraction % 1
    total_seconds = round(normalized * 86400) % 86400
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def normalize_time(value: object) -> str:
    """Return ``HH:MM:SS`` for anything time-like, else the trimmed original."""
    if is_missing(value):
        return ""
    if isinstance(value, (datetime, time)):
        return f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    if isinstance(value, date):
        return "00:00:00"

    numeric = coerce_number(value)
    if numeric is not None:
        if 0 <= numeric < 1:
            return fraction_to_time(numeric)
        if 1 < numeric < SETTINGS.serial_max and numeric % 1 > 0:
            return fraction_to_time(numeric % 1)
        if 0 <= numeric <= 24 and float(numeric).is_integer():
            return f"{int(numeric):02d}:00:00"

    text = to_text(value)
    hms = _HMS_PATTERN.match(text)
    if hms:
        hours, minutes, seconds = hms.groups()
        return f"{int(hours):02d}:{minutes}:{seconds}"
    hm = _HM_PATTERN.match(text)
    if hm:
        hours, minutes = hm.groups()
        return f"{int(hours):02d}:{minutes}:00"
    trailing = _TRAILING_HMS_PATTERN.search(text)
    if trailing:
        hours, minutes, seconds = trailing.groups()
        return f"{int(hours):02d}:{minutes}:{seconds}"
    return text


def normalize_identifier(value: object) -> str:
    return to_text(value).upper()


def is_valid_identifier(identifier: str) -> bool:
    return bool(SETTINGS.isin_pattern.match(identifier or ""))


def split_rating(rating: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in re.split(r"[;|]", rating or "") if part.strip())
