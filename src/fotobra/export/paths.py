"""Archive path construction for classified photos.

Layouts::

    EMPRESA/FRENTE/CATEGORIA/SERVICO/YYYY-MM/DD/filename    (full)
    FRENTE/DISCIPLINA/SERVICO/YYYY-MM/DD/filename           (simple)

Segments keep accents and only lose characters that break folders or ZIP
entries on common file systems.
"""
from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..classification.dates import Timestamp, compute_year_month_day
from ..classification.lexicon import load_empresas
from ..classification.normalize import normalize_text
from ..classification.schemas import (
    DISCIPLINA_NAO_INFORMADA,
    FRENTE_NAO_INFORMADA,
    SERVICO_NAO_IDENTIFICADO,
)

__all__ = [
    "EMPRESA_NAO_INFORMADA",
    "CATEGORIA_NAO_INFORMADA",
    "DEFAULT_FILENAME",
    "MAX_SEGMENT_LENGTH",
    "ExportPathInput",
    "safe_segment",
    "compute_year_month_day",
    "infer_empresa_from_folder",
    "build_export_path",
    "build_simple_export_path",
]

EMPRESA_NAO_INFORMADA = "EMPRESA_NAO_INFORMADA"
CATEGORIA_NAO_INFORMADA = "CATEGORIA_NAO_INFORMADA"
DEFAULT_FILENAME = "foto.jpg"
MAX_SEGMENT_LENGTH = 80

_FORBIDDEN_RE = re.compile(r'[\\/:"*?<>|]+')
_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_DOTS_RE = re.compile(r"\.+$")
_UNDERSCORES_RE = re.compile(r"_+")


class ExportPathInput(BaseModel):
    """Fields needed to place one photo in the archive."""

    empresa: Optional[str] = None
    frente: Optional[str] = None
    categoria: Optional[str] = None
    servico: Optional[str] = None
    date_iso: Optional[str] = None
    last_modified: Optional[Timestamp] = None
    filename: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def safe_segment(value: Optional[str], fallback: str) -> str:
    """Sanitise one path segment; empty results collapse to ``fallback``."""

    cleaned = (value or fallback).strip()
    cleaned = _FORBIDDEN_RE.sub(" ", cleaned)
    cleaned = _WHITESPACE_RE.sub("_", cleaned)
    cleaned = _TRAILING_DOTS_RE.sub("", cleaned)
    cleaned = _UNDERSCORES_RE.sub("_", cleaned).strip("_")
    return cleaned[:MAX_SEGMENT_LENGTH] or fallback


def infer_empresa_from_folder(folder_path: Optional[str]) -> Optional[str]:
    """Return the first company whose keyword appears as a whole word in ``folder_path``."""

    haystack = normalize_text(folder_path)
    if not haystack:
        return None
    padded = f" {haystack} "
    for group in load_empresas():
        if any(f" {keyword} " in padded for keyword in group.keywords):
            return group.label
    return None


def _date_segments(data: ExportPathInput, now: Optional[datetime]) -> str:
    year_month, day = compute_year_month_day(data.date_iso, data.last_modified, now=now)
    return f"{year_month}/{day}"


def build_export_path(data: ExportPathInput, *, now: Optional[datetime] = None) -> str:
    """``EMPRESA/FRENTE/CATEGORIA/SERVICO/YYYY-MM/DD/filename``."""

    segments = [
        safe_segment(data.empresa, EMPRESA_NAO_INFORMADA),
        safe_segment(data.frente, FRENTE_NAO_INFORMADA),
        safe_segment(data.categoria, CATEGORIA_NAO_INFORMADA),
        safe_segment(data.servico, SERVICO_NAO_IDENTIFICADO),
        _date_segments(data, now),
        safe_segment(data.filename, DEFAULT_FILENAME),
    ]
    return "/".join(segments)


def build_simple_export_path(data: ExportPathInput, *, now: Optional[datetime] = None) -> str:
    """``FRENTE/DISCIPLINA/SERVICO/YYYY-MM/DD/filename``; ``empresa`` is ignored."""

    segments = [
        safe_segment(data.frente, FRENTE_NAO_INFORMADA),
        safe_segment(data.categoria, DISCIPLINA_NAO_INFORMADA),
        safe_segment(data.servico, SERVICO_NAO_IDENTIFICADO),
        _date_segments(data, now),
        safe_segment(data.filename, DEFAULT_FILENAME),
    ]
    return "/".join(segments)
