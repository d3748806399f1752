"""Batch orchestration: per-photo classification, then folder propagation."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from .matchers.aliases import AliasRuleMatcher
from .matchers.dictionary import DictionaryLookup
from .propagation import propagate_by_folder
from .resolver import classify_photo, evaluate_record
from .schemas import FIELDS, PhotoRecord

LOGGER = logging.getLogger(__name__)

__all__ = ["classify_batch", "summarize"]


def _rescore(photo: PhotoRecord) -> PhotoRecord:
    if not any(getattr(photo.source, field) == "propagated" for field in FIELDS):
        return photo
    confidence, status = evaluate_record(photo)
    return photo.model_copy(update={"confidence": confidence, "status": status})


def classify_batch(
    photos: Iterable[PhotoRecord],
    *,
    propagate: bool = True,
    now: Optional[datetime] = None,
    matcher: Optional[AliasRuleMatcher] = None,
    lookup: Optional[DictionaryLookup] = None,
    on_record: Optional[Callable[[PhotoRecord], None]] = None,
) -> List[PhotoRecord]:
    """Classify every photo independently, then propagate across folders.

    Propagation only starts once every record has been classified. Records
    that inherit fields get their confidence and status derived again.
    """

    matcher = matcher or AliasRuleMatcher()
    lookup = lookup or DictionaryLookup()
    classified: List[PhotoRecord] = []
    for photo in photos:
        result = classify_photo(photo, now=now, matcher=matcher, lookup=lookup)
        record = photo.with_result(result)
        classified.append(record)
        if on_record is not None:
            on_record(record)

    if not propagate:
        return classified

    propagated = [_rescore(photo) for photo in propagate_by_folder(classified)]
    LOGGER.debug(
        "pipeline.done",
        extra={
            "records": len(propagated),
            "propagated": sum(1 for before, after in zip(classified, propagated) if before is not after),
        },
    )
    return propagated


def summarize(photos: Iterable[PhotoRecord]) -> dict:
    """Count records per status and confidence tier."""

    summary = {"total": 0, "status": {}, "confidence": {}}
    for photo in photos:
        summary["total"] += 1
        summary["status"][photo.status] = summary["status"].get(photo.status, 0) + 1
        summary["confidence"][photo.confidence] = summary["confidence"].get(photo.confidence, 0) + 1
    return summary
