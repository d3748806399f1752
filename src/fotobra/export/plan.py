"""Destination planning for a whole batch of classified photos."""
from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..classification.schemas import PhotoRecord
from .paths import ExportPathInput, build_export_path, build_simple_export_path, infer_empresa_from_folder

LOGGER = logging.getLogger(__name__)

__all__ = ["ExportEntry", "export_input_for", "plan_export"]


@dataclass(frozen=True)
class ExportEntry:
    photo_id: str
    source: str
    destination: str

    def as_dict(self) -> Dict[str, str]:
        return {"id": self.photo_id, "source": self.source, "destination": self.destination}


def export_input_for(photo: PhotoRecord, empresa: Optional[str] = None) -> ExportPathInput:
    return ExportPathInput(
        empresa=empresa,
        frente=photo.frente,
        categoria=photo.disciplina,
        servico=photo.servico,
        date_iso=photo.date_iso,
        last_modified=photo.last_modified,
        filename=photo.filename,
    )


def _with_suffix(path: str, counter: int) -> str:
    stem, ext = posixpath.splitext(path)
    return f"{stem}_{counter}{ext}"


def plan_export(
    photos: Iterable[PhotoRecord],
    empresa: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> List[ExportEntry]:
    """Return one unique destination per photo, in input order.

    ``empresa`` forces the full layout for every photo; otherwise the company
    is inferred from each folder and the simple layout is used when none is
    recognised. Colliding destinations get ``_2``, ``_3``... before the
    extension, numbered in input order.
    """

    entries: List[ExportEntry] = []
    taken: set[str] = set()
    for photo in photos:
        company = empresa or infer_empresa_from_folder(photo.folder_path)
        data = export_input_for(photo, company)
        destination = build_export_path(data, now=now) if company else build_simple_export_path(data, now=now)
        candidate = destination
        counter = 1
        while candidate in taken:
            counter += 1
            candidate = _with_suffix(destination, counter)
        if candidate != destination:
            LOGGER.debug("export.collision", extra={"photo_id": photo.id, "path": destination, "renamed": candidate})
        taken.add(candidate)
        source = posixpath.join(photo.folder_path, photo.filename) if photo.folder_path else photo.filename
        entries.append(ExportEntry(photo_id=photo.id, source=source, destination=candidate))
    return entries
