"""Parsing of the signals returned by the OCR collaborator.

The OCR text printed on site photos usually carries a timestamp stamp
("26 de ago. de 2025 10:36") and GPS coordinates ("23.5109591S 47.5655273W").
Everything here is best effort: unparseable input yields empty results.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .dates import is_iso_date
from .normalize import strip_accents
from .schemas import OcrResult, PhotoRecord

__all__ = [
    "DateSignal",
    "Coordinates",
    "extract_date_from_text",
    "extract_coordinates_from_text",
    "extract_time_from_text",
    "attach_ocr_result",
]

_MONTHS_PT = (
    ("janeiro", "01"), ("jan", "01"),
    ("fevereiro", "02"), ("fev", "02"),
    ("marco", "03"), ("mar", "03"),
    ("abril", "04"), ("abr", "04"),
    ("maio", "05"), ("mai", "05"),
    ("junho", "06"), ("jun", "06"),
    ("julho", "07"), ("jul", "07"),
    ("agosto", "08"), ("ago", "08"),
    ("setembro", "09"), ("set", "09"),
    ("outubro", "10"), ("out", "10"),
    ("novembro", "11"), ("nov", "11"),
    ("dezembro", "12"), ("dez", "12"),
)

_PT_DATE_RE = re.compile(r"(\d{1,2})\s*de\s*([a-z]+)\.?\s*de\s*(\d{4})")
_SLASH_DATE_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_TIME_RE = re.compile(r"\b(\d{2}):(\d{2})\b")
_HEMISPHERE_RE = re.compile(r"(\d+\.?\d*)\s*([NS])\s+(\d+\.?\d*)\s*([EWO])", re.IGNORECASE)
_DECIMAL_RE = re.compile(r"(-?\d+\.?\d*)\s*,\s*(-?\d+\.?\d*)")


@dataclass(frozen=True)
class DateSignal:
    date_iso: Optional[str] = None
    year_month: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.date_iso is not None


@dataclass(frozen=True)
class Coordinates:
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def found(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def _signal(year: str, month: str, day: str) -> DateSignal:
    month = month.zfill(2)
    day = day.zfill(2)
    candidate = f"{year}-{month}-{day}"
    if not is_iso_date(candidate) or not (1 <= int(month) <= 12 and 1 <= int(day) <= 31):
        return DateSignal()
    return DateSignal(date_iso=candidate, year_month=f"{year}-{month}")


def extract_date_from_text(text: Optional[str]) -> DateSignal:
    """Find a date written as ``26 de ago. de 2025``, ``26/08/2025`` or ``2025-08-26``."""

    if not text:
        return DateSignal()

    lowered = strip_accents(text).lower()
    match = _PT_DATE_RE.search(lowered)
    if match:
        day, month_name, year = match.groups()
        for prefix, month in _MONTHS_PT:
            if month_name.startswith(prefix):
                signal = _signal(year, month, day)
                if signal.found:
                    return signal
                break

    match = _SLASH_DATE_RE.search(text)
    if match:
        day, month, year = match.groups()
        signal = _signal(year, month, day)
        if signal.found:
            return signal

    match = _ISO_DATE_RE.search(text)
    if match:
        year, month, day = match.groups()
        return _signal(year, month, day)

    return DateSignal()


def _in_range(lat: float, lng: float) -> bool:
    return abs(lat) <= 90 and abs(lng) <= 180


def extract_coordinates_from_text(text: Optional[str]) -> Coordinates:
    """Parse ``23.51S 47.56W`` (S/W/O are negative) or ``-23.51, -47.56``."""

    if not text:
        return Coordinates()

    match = _HEMISPHERE_RE.search(text)
    if match:
        lat = float(match.group(1))
        lng = float(match.group(3))
        if match.group(2).upper() == "S":
            lat = -lat
        if match.group(4).upper() in {"W", "O"}:
            lng = -lng
        if _in_range(lat, lng):
            return Coordinates(latitude=lat, longitude=lng)

    match = _DECIMAL_RE.search(text)
    if match:
        lat = float(match.group(1))
        lng = float(match.group(2))
        if _in_range(lat, lng):
            return Coordinates(latitude=lat, longitude=lng)

    return Coordinates()


def extract_time_from_text(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = _TIME_RE.search(text)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


def attach_ocr_result(photo: PhotoRecord, ocr: OcrResult) -> PhotoRecord:
    """Return a copy of ``photo`` enriched with the OCR collaborator payload.

    A date already attached to the photo (EXIF) is kept. Otherwise the date
    printed in the OCR text wins over the collaborator's ``date`` field.
    Classification fields are left untouched: ``local``/``servico`` are stored
    as hints the resolver weighs below every other source.
    """

    update = {
        "ocr_text": ocr.text or "",
        "ocr_local": ocr.local or None,
        "ocr_servico": ocr.servico or None,
    }

    if not is_iso_date(photo.date_iso):
        signal = extract_date_from_text(ocr.text)
        if not signal.found and ocr.date:
            signal = extract_date_from_text(ocr.date)
        if signal.found:
            update.update(
                date_iso=signal.date_iso,
                year_month=signal.year_month,
                day=signal.date_iso[-2:],
                date_source="ocr",
            )

    hora = extract_time_from_text(ocr.date) or extract_time_from_text(ocr.text)
    if hora and not photo.hora:
        update["hora"] = hora

    coordinates = extract_coordinates_from_text(ocr.text)
    if coordinates.found and photo.latitude is None:
        update.update(latitude=coordinates.latitude, longitude=coordinates.longitude)

    return photo.model_copy(update=update)
