"""Date decomposition helpers shared by the resolver and the export paths."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Union

__all__ = [
    "DateParts",
    "Timestamp",
    "is_iso_date",
    "to_datetime",
    "date_parts_from_timestamp",
    "compute_year_month_day",
]

Timestamp = Union[datetime, date, int, float]

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
# Same cut-off pydantic uses to tell epoch seconds from milliseconds.
_MS_THRESHOLD = 2e10


@dataclass(frozen=True)
class DateParts:
    date_iso: str
    year_month: str
    day: str


def is_iso_date(value: Optional[str]) -> bool:
    return bool(value) and _ISO_DATE_RE.match(str(value)) is not None


def to_datetime(value: Optional[Timestamp]) -> Optional[datetime]:
    """Coerce ``value`` to a datetime; epoch numbers are read as UTC.

    Returns ``None`` for missing or unusable values instead of raising.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(numeric) or math.isinf(numeric):
        return None
    if abs(numeric) > _MS_THRESHOLD:
        numeric /= 1000.0
    try:
        return datetime.fromtimestamp(numeric, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def date_parts_from_timestamp(value: Optional[Timestamp], *, now: Optional[datetime] = None) -> DateParts:
    """Decompose ``value`` (or ``now``/the current time) into ISO date parts."""

    moment = to_datetime(value) or now or datetime.now()
    return DateParts(
        date_iso=f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}",
        year_month=f"{moment.year:04d}-{moment.month:02d}",
        day=f"{moment.day:02d}",
    )


def compute_year_month_day(
    date_iso: Optional[str] = None,
    last_modified: Optional[Timestamp] = None,
    *,
    now: Optional[datetime] = None,
) -> tuple[str, str]:
    """Return ``(YYYY-MM, DD)`` from ``date_iso`` when well formed, else from the timestamp."""

    if date_iso:
        match = _ISO_DATE_RE.match(str(date_iso))
        if match:
            year, month, day = match.groups()
            return f"{year}-{month}", day
    parts = date_parts_from_timestamp(last_modified, now=now)
    return parts.year_month, parts.day
