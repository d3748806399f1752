"""Second-phase propagation of classifications across sibling photos."""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from .schemas import FIELDS, PhotoRecord, is_unknown

LOGGER = logging.getLogger(__name__)

__all__ = ["FIELD_POINTS", "folder_score", "canonical_fields", "propagate_by_folder"]

FIELD_POINTS = 10


def folder_score(photo: PhotoRecord) -> int:
    """10 points per resolved classification field."""

    return FIELD_POINTS * sum(not is_unknown(field, getattr(photo, field)) for field in FIELDS)


def canonical_fields(photos: Iterable[PhotoRecord]) -> Dict[str, Optional[str]]:
    """Return the folder's canonical value for every field.

    For each field the value comes from the highest-scoring photo that has it
    resolved; the first such photo wins ties. A field no photo resolves maps
    to ``None``.
    """

    best: Dict[str, Optional[str]] = {field: None for field in FIELDS}
    best_score: Dict[str, int] = {field: -1 for field in FIELDS}
    for photo in photos:
        score = folder_score(photo)
        for field in FIELDS:
            value = getattr(photo, field)
            if is_unknown(field, value):
                continue
            if score > best_score[field]:
                best[field] = value
                best_score[field] = score
    return best


def propagate_by_folder(photos: Iterable[PhotoRecord]) -> List[PhotoRecord]:
    """Fill unresolved fields from sibling photos sharing the same ``folder_path``.

    Returns a new list in the input order; input records are not mutated and
    already resolved fields are never touched. Photos with an empty folder
    are returned unchanged. Applying the function twice gives the same result
    as applying it once: after one pass every field is either resolved on all
    photos of a folder or on none of them.
    """

    records = list(photos)
    folders: "OrderedDict[str, List[int]]" = OrderedDict()
    for index, photo in enumerate(records):
        if photo.folder_path:
            folders.setdefault(photo.folder_path, []).append(index)

    result = list(records)
    for folder, indexes in folders.items():
        if len(indexes) < 2:
            continue
        canonical = canonical_fields(records[index] for index in indexes)
        for index in indexes:
            photo = records[index]
            update: Dict[str, object] = {}
            source = photo.source
            for field in FIELDS:
                value = canonical[field]
                if value is None or not is_unknown(field, getattr(photo, field)):
                    continue
                update[field] = value
                source = source.model_copy(update={field: "propagated"})
            if not update:
                continue
            update["source"] = source
            result[index] = photo.model_copy(update=update)
            LOGGER.debug(
                "propagation.fill",
                extra={"photo_id": photo.id, "folder": folder, "fields": sorted(k for k in update if k != "source")},
            )
    return result
