"""Work-front ("frente") recognition from folder paths, filenames and OCR text.

The recognizers form an ordered battery evaluated against the normalised,
space-joined ``folder_path + filename``; the first hit wins. Numeric suffixes
are zero padded (2 digits for zone codes, 3 for chainage and station markers)
and components are joined with underscores.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ..normalize import normalize_text
from ..schemas import FRENTE_NAO_INFORMADA

LOGGER = logging.getLogger(__name__)

__all__ = [
    "FrenteRecognizer",
    "RECOGNIZERS",
    "match_frente",
    "extract_frente_from_path",
    "extract_frente_from_ocr",
]


@dataclass(frozen=True)
class FrenteRecognizer:
    name: str
    category: str
    pattern: re.Pattern[str]
    template: str

    def render(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if match is None:
            return None
        groups = [int(group) if group.isdigit() else group for group in match.groups()]
        return self.template.format(*groups)


def _r(name: str, category: str, pattern: str, template: str) -> FrenteRecognizer:
    return FrenteRecognizer(name=name, category=category, pattern=re.compile(pattern), template=template)


def _all_of(*words: str) -> str:
    return "^" + "".join(f"(?=.*{word})" for word in words)


RECOGNIZERS: Tuple[FrenteRecognizer, ...] = (
    # FREE FLOW gantries
    _r("free_flow_p", "zone_numeric", r"FREE ?FLOW ?P ?(\d{1,2})", "FREE_FLOW_P{0:02d}"),
    _r("free_flow_p_loose", "zone_numeric", r"FREE ?FLOW.*?P ?(\d{1,2})", "FREE_FLOW_P{0:02d}"),
    _r("free_flow_norte", "zone_directional", _all_of("FREE ?FLOW", "NORTE"), "FREE_FLOW_NORTE"),
    _r("free_flow_sul", "zone_directional", _all_of("FREE ?FLOW", "SUL"), "FREE_FLOW_SUL"),
    _r("free_flow_leste", "zone_directional", _all_of("FREE ?FLOW", "LESTE"), "FREE_FLOW_LESTE"),
    _r("free_flow_oeste", "zone_directional", _all_of("FREE ?FLOW", "OESTE"), "FREE_FLOW_OESTE"),
    _r("free_flow_context_p", "zone_numeric", r"^(?=.*(?:FREE|FLOW)).*?\bP ?(\d{1,2})\b", "FREE_FLOW_P{0:02d}"),
    # Operational service bases
    _r("bso", "zone_numeric", r"\bBSO ?(\d{1,2})\b", "BSO_{0:02d}"),
    _r("bso_norte", "zone_directional", _all_of("BSO", "NORTE"), "BSO_NORTE"),
    _r("bso_sul", "zone_directional", _all_of("BSO", "SUL"), "BSO_SUL"),
    _r("bso_leste", "zone_directional", _all_of("BSO", "LESTE"), "BSO_LESTE"),
    _r("bso_oeste", "zone_directional", _all_of("BSO", "OESTE"), "BSO_OESTE"),
    _r("bso_central", "zone_directional", _all_of("BSO", "CENTRAL"), "BSO_CENTRAL"),
    # Toll plazas
    _r("praca", "zone_numeric", r"\bPRACA ?(\d{1,2})\b", "PRACA_{0:02d}"),
    _r("praca_pedagio_central", "zone_directional", _all_of("PRACA", "PEDAGIO", "CENTRAL"), "PRACA_PEDAGIO_CENTRAL"),
    _r("praca_pedagio_norte", "zone_directional", _all_of("PRACA", "PEDAGIO", "NORTE"), "PRACA_PEDAGIO_NORTE"),
    _r("praca_pedagio_sul", "zone_directional", _all_of("PRACA", "PEDAGIO", "SUL"), "PRACA_PEDAGIO_SUL"),
    _r("praca_pedagio", "zone_code", _all_of("PRACA", "PEDAGIO"), "PRACA_PEDAGIO_CENTRAL"),
    # Lots and stretches
    _r("lote", "zone_numeric", r"\bLOTE ?(\d{1,2})\b", "LOTE_{0:02d}"),
    _r("lote_letra", "zone_code", r"\bLOTE ?([A-E])\b", "LOTE_{0}"),
    _r("trecho", "zone_numeric", r"\bTRECHO ?(\d{1,2})\b", "TRECHO_{0:02d}"),
    # Chainage and station markers
    _r("km_range", "chainage", r"\bKM ?(\d{1,3}) (?:AO? )?(\d{1,3})\b", "KM_{0:03d}_{1:03d}"),
    _r("km", "chainage", r"\bKM ?(\d{1,3})\b", "KM_{0:03d}"),
    _r("estaca", "chainage", r"\bESTACA ?(\d{1,4})\b", "ESTACA_{0:03d}"),
    # Site facilities and structures
    _r("canteiro_central", "zone_directional", _all_of("CANTEIRO", "CENTRAL"), "CANTEIRO_CENTRAL"),
    _r("canteiro_apoio", "zone_code", _all_of("CANTEIRO", "APOIO"), "CANTEIRO_APOIO"),
    _r("canteiro", "zone_numeric", r"CANTEIRO ?(\d{1,2})", "CANTEIRO_{0:02d}"),
    _r("canteiro_obras", "zone_code", r"CANTEIRO", "CANTEIRO_OBRAS"),
    _r("ponte", "zone_numeric", r"\bPONTE ?(\d{1,2})\b", "PONTE_{0:02d}"),
    _r("viaduto", "zone_numeric", r"\bVIADUTO ?(\d{1,2})\b", "VIADUTO_{0:02d}"),
    # Carriageway direction
    _r("pista_norte", "direction", r"PISTA NORTE|SENTIDO NORTE", "PISTA_NORTE"),
    _r("pista_sul", "direction", r"PISTA SUL|SENTIDO SUL", "PISTA_SUL"),
    _r("sentido_capital", "direction", r"SENTIDO CAPITAL", "SENTIDO_CAPITAL"),
    _r("sentido_interior", "direction", r"SENTIDO INTERIOR", "SENTIDO_INTERIOR"),
)


def match_frente(text: str) -> Optional[Tuple[str, FrenteRecognizer]]:
    """Return ``(code, recognizer)`` for the first recognizer hitting ``text``."""

    haystack = normalize_text(text)
    if not haystack:
        return None
    for recognizer in RECOGNIZERS:
        code = recognizer.render(haystack)
        if code is not None:
            LOGGER.debug("frente.match", extra={"recognizer": recognizer.name, "code": code})
            return code, recognizer
    return None


def extract_frente_from_path(folder_path: Optional[str] = None, filename: Optional[str] = None) -> str:
    """Return the work-front code found in folder path + filename, or the sentinel."""

    combined = f"{normalize_text(folder_path)} {normalize_text(filename)}"
    hit = match_frente(combined)
    return hit[0] if hit else FRENTE_NAO_INFORMADA


def extract_frente_from_ocr(ocr_text: Optional[str]) -> Optional[str]:
    """Same battery over OCR text; ``None`` (not the sentinel) when nothing matches."""

    if not ocr_text:
        return None
    frente = extract_frente_from_path(ocr_text)
    return frente if frente != FRENTE_NAO_INFORMADA else None
