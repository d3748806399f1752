"""Deterministic repair of classification triples produced outside the resolver.

The AI collaborator and manual edits hand back triples that may carry blank
values or alternate "unknown" spellings. :func:`apply_fallbacks` fills what it
can from the folder path, the filename and the service, and canonicalises
everything else to the standard sentinels.
"""
from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .lexicon import load_disciplina_keywords, load_service_disciplina_map
from .matchers.frente import extract_frente_from_path
from .normalize import normalize_key, normalize_text
from .schemas import (
    DISCIPLINA_NAO_INFORMADA,
    FRENTE_NAO_INFORMADA,
    SERVICO_NAO_IDENTIFICADO,
    is_unknown,
)

LOGGER = logging.getLogger(__name__)

__all__ = [
    "ClassificationTriple",
    "infer_disciplina_from_path",
    "infer_disciplina_from_servico",
    "apply_fallbacks",
]


class ClassificationTriple(BaseModel):
    frente: Optional[str] = None
    disciplina: Optional[str] = None
    servico: Optional[str] = None

    model_config = ConfigDict(frozen=True)


def infer_disciplina_from_path(text: Optional[str]) -> Optional[str]:
    """Return the first keyword group with any keyword contained in ``text``."""

    haystack = normalize_text(text)
    if not haystack:
        return None
    for group in load_disciplina_keywords():
        if any(keyword in haystack for keyword in group.keywords):
            return group.label
    return None


def infer_disciplina_from_servico(servico: Optional[str]) -> Optional[str]:
    """Map a service to its discipline: exact key first, then substring either way."""

    if is_unknown("servico", servico):
        return None
    key = normalize_key(servico)
    if not key:
        return None
    mapping = load_service_disciplina_map()
    direct = mapping.get(key)
    if direct:
        return direct
    for service_key, disciplina in mapping.items():
        if service_key in key or key in service_key:
            return disciplina
    return None


def apply_fallbacks(
    triple: ClassificationTriple,
    folder_path: Optional[str] = None,
    filename: Optional[str] = None,
) -> ClassificationTriple:
    """Fill unknown fields of ``triple``; the result only carries canonical sentinels."""

    frente = triple.frente
    if is_unknown("frente", frente):
        frente = extract_frente_from_path(folder_path)
        if frente == FRENTE_NAO_INFORMADA:
            frente = extract_frente_from_path(filename)

    servico = triple.servico
    if is_unknown("servico", servico):
        servico = SERVICO_NAO_IDENTIFICADO

    disciplina = triple.disciplina
    if is_unknown("disciplina", disciplina):
        disciplina = (
            infer_disciplina_from_path(folder_path)
            or infer_disciplina_from_path(filename)
            or infer_disciplina_from_servico(servico)
            or DISCIPLINA_NAO_INFORMADA
        )

    repaired = ClassificationTriple(frente=frente, disciplina=disciplina, servico=servico)
    if repaired != triple:
        LOGGER.debug("fallbacks.applied", extra={"before": triple.model_dump(), "after": repaired.model_dump()})
    return repaired
