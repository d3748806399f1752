"""Deterministic classification of construction-site photos.

The resolver combines path patterns, closed vocabularies, the alias rule
table and OCR signals into a ``(frente, disciplina, servico)`` triple plus a
confidence tier; :func:`classify_batch` adds the folder propagation phase.
"""

from .dates import compute_year_month_day, date_parts_from_timestamp
from .fallbacks import (
    ClassificationTriple,
    apply_fallbacks,
    infer_disciplina_from_path,
    infer_disciplina_from_servico,
)
from .lexicon import (
    load_alias_rules,
    load_disciplina_keywords,
    load_empresas,
    load_service_disciplina_map,
    load_vocabulary,
)
from .matchers import (
    AliasRuleMatcher,
    DictionaryLookup,
    apply_alias_rules,
    extract_frente_from_ocr,
    extract_frente_from_path,
    find_disciplina_in_text,
    find_servico_in_text,
)
from .normalize import normalize_key, normalize_text, strip_accents
from .ocr_signals import (
    attach_ocr_result,
    extract_coordinates_from_text,
    extract_date_from_text,
    extract_time_from_text,
)
from .pipeline import classify_batch, summarize
from .propagation import propagate_by_folder
from .resolver import classify_photo, derive_confidence, evaluate_record, needs_review
from .schemas import (
    DISCIPLINA_NAO_INFORMADA,
    FRENTE_NAO_INFORMADA,
    SERVICO_NAO_IDENTIFICADO,
    AliasMatch,
    AliasRule,
    ClassificationResult,
    FieldResolution,
    OcrResult,
    PhotoRecord,
    is_unknown,
)

__all__ = [
    "FRENTE_NAO_INFORMADA",
    "DISCIPLINA_NAO_INFORMADA",
    "SERVICO_NAO_IDENTIFICADO",
    "AliasMatch",
    "AliasRule",
    "AliasRuleMatcher",
    "ClassificationResult",
    "ClassificationTriple",
    "DictionaryLookup",
    "FieldResolution",
    "OcrResult",
    "PhotoRecord",
    "apply_alias_rules",
    "apply_fallbacks",
    "attach_ocr_result",
    "classify_batch",
    "classify_photo",
    "compute_year_month_day",
    "date_parts_from_timestamp",
    "derive_confidence",
    "evaluate_record",
    "extract_coordinates_from_text",
    "extract_date_from_text",
    "extract_frente_from_ocr",
    "extract_frente_from_path",
    "extract_time_from_text",
    "find_disciplina_in_text",
    "find_servico_in_text",
    "infer_disciplina_from_path",
    "infer_disciplina_from_servico",
    "is_unknown",
    "load_alias_rules",
    "load_disciplina_keywords",
    "load_empresas",
    "load_service_disciplina_map",
    "load_vocabulary",
    "needs_review",
    "normalize_key",
    "normalize_text",
    "propagate_by_folder",
    "strip_accents",
    "summarize",
]
