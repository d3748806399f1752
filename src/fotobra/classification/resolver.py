"""Deterministic single-pass classification of one photo.

Each field is resolved by the first source that yields a value, in a fixed
order, and a later step never overwrites a field resolved earlier::

    date        attached EXIF/OCR date > lastModified
    frente      path patterns > OCR patterns > alias rule > OCR hint
    disciplina  folder dictionary > filename dictionary > alias rule > OCR dictionary
    servico     folder dictionary > filename dictionary > alias rule > OCR dictionary > OCR hint

The winning source of every field is recorded on the result.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Optional, Tuple

from .dates import date_parts_from_timestamp, is_iso_date, to_datetime
from .matchers.aliases import AliasRuleMatcher, apply_alias_rules
from .matchers.dictionary import DictionaryLookup, find_disciplina_in_text, find_servico_in_text
from .matchers.frente import extract_frente_from_ocr, match_frente
from .normalize import normalize_key, normalize_text
from .schemas import (
    FIELDS,
    ClassificationResult,
    ClassificationSources,
    Confidence,
    FieldResolution,
    PhotoRecord,
    Status,
    is_unknown,
)

LOGGER = logging.getLogger(__name__)

__all__ = ["classify_photo", "derive_confidence", "evaluate_record", "needs_review"]


def derive_confidence(
    frente_known: bool,
    disciplina_known: bool,
    servico_known: bool,
    date_known: bool,
) -> Tuple[Confidence, Status]:
    """Map the number of resolved signals (out of 4) to a confidence tier and status."""

    resolved = sum(bool(flag) for flag in (frente_known, disciplina_known, servico_known, date_known))
    if resolved >= 4:
        return "high", "AUTO_OK"
    if resolved == 3:
        return "medium", "AUTO_OK"
    if resolved == 2:
        return "low", "REVISAR"
    return "none", "MANUAL"


def _record_date_known(photo: PhotoRecord) -> bool:
    return is_iso_date(photo.date_iso) and photo.date_source != "none"


def evaluate_record(photo: PhotoRecord) -> Tuple[Confidence, Status]:
    """Confidence and status of an already classified record."""

    return derive_confidence(
        not is_unknown("frente", photo.frente),
        not is_unknown("disciplina", photo.disciplina),
        not is_unknown("servico", photo.servico),
        _record_date_known(photo),
    )


def needs_review(photo: PhotoRecord) -> bool:
    """``True`` unless the record would be auto-approved by :func:`derive_confidence`."""

    return evaluate_record(photo)[1] != "AUTO_OK"


class _Resolution:
    """Mutable per-photo state; a field is only ever set once."""

    def __init__(self, photo_id: str) -> None:
        self.photo_id = photo_id
        self.fields: Dict[str, FieldResolution] = {field: FieldResolution() for field in FIELDS}

    def known(self, field: str) -> bool:
        return self.fields[field].known

    def offer(self, field: str, value: Optional[str], source: str) -> bool:
        if self.known(field) or not value:
            return False
        self.fields[field] = FieldResolution(value=value, source=source)
        LOGGER.debug(
            "resolver.field",
            extra={"photo_id": self.photo_id, "field": field, "value": value, "source": source},
        )
        return True


def _resolve_date(photo: PhotoRecord, now: Optional[datetime]):
    # A date tagged lastModified/none came from an earlier pass; recompute it.
    attached = photo.date_source not in {"lastModified", "none"}
    if attached and is_iso_date(photo.date_iso):
        source = photo.date_source or "exif"
        return photo.date_iso, photo.date_iso[:7], photo.date_iso[-2:], source
    parts = date_parts_from_timestamp(photo.last_modified, now=now)
    source = "lastModified" if to_datetime(photo.last_modified) is not None else "none"
    return parts.date_iso, parts.year_month, parts.day, source


def _frente_source(folder_path: str) -> str:
    # Combined folder+filename hit; credit the folder when it matches on its own.
    return "folder" if match_frente(folder_path) else "filename"


def _hint(field: str, value: Optional[str]) -> Optional[str]:
    key = normalize_key(value)
    if not key or is_unknown(field, key):
        return None
    return key


def classify_photo(
    photo: PhotoRecord,
    *,
    now: Optional[datetime] = None,
    matcher: Optional[AliasRuleMatcher] = None,
    lookup: Optional[DictionaryLookup] = None,
) -> ClassificationResult:
    """Classify ``photo`` from its folder path, filename and OCR text.

    Never raises on missing inputs: unresolved fields come back as sentinels
    and a photo without any timestamp falls back to ``now`` (date not counted
    as resolved).
    """

    folder_path = photo.folder_path or ""
    filename = photo.filename or ""
    ocr_text = photo.ocr_text or ""
    state = _Resolution(photo.id)

    # 1. date
    date_iso, year_month, day, date_source = _resolve_date(photo, now)

    # 2. frente from path patterns, then OCR patterns
    hit = match_frente(f"{normalize_text(folder_path)} {normalize_text(filename)}")
    if hit is not None:
        state.offer("frente", hit[0], _frente_source(folder_path))
    else:
        state.offer("frente", extract_frente_from_ocr(ocr_text), "ocr")

    # 3-4. dictionary over folder, then filename
    for text, source in ((folder_path, "folder"), (filename, "filename")):
        state.offer("disciplina", find_disciplina_in_text(text, lookup=lookup), source)
    for text, source in ((folder_path, "folder"), (filename, "filename")):
        state.offer("servico", find_servico_in_text(text, lookup=lookup), source)

    # 5. alias rules over every text source combined
    if not all(state.known(field) for field in FIELDS):
        alias = apply_alias_rules(folder_path, filename, ocr_text, matcher=matcher)
        if alias.score > 0:
            state.offer("frente", alias.frente, "folder")
            state.offer("disciplina", alias.disciplina, "alias")
            state.offer("servico", alias.servico, "alias")

    # 6. dictionary over OCR text
    if ocr_text:
        state.offer("disciplina", find_disciplina_in_text(ocr_text, lookup=lookup), "ocr")
        state.offer("servico", find_servico_in_text(ocr_text, lookup=lookup), "ocr")

    # OCR collaborator hints rank below everything else
    state.offer("frente", _hint("frente", photo.ocr_local), "ocr")
    state.offer("servico", _hint("servico", photo.ocr_servico), "ocr")

    # 7. confidence and status
    fields = state.fields
    confidence, status = derive_confidence(
        fields["frente"].known,
        fields["disciplina"].known,
        fields["servico"].known,
        date_source != "none",
    )

    return ClassificationResult(
        frente=fields["frente"].external("frente"),
        disciplina=fields["disciplina"].external("disciplina"),
        servico=fields["servico"].external("servico"),
        date_iso=date_iso,
        year_month=year_month,
        day=day,
        confidence=confidence,
        status=status,
        source=ClassificationSources(
            frente=fields["frente"].source,
            disciplina=fields["disciplina"].source,
            servico=fields["servico"].source,
            date=date_source,
        ),
    )
