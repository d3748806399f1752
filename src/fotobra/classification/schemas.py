"""Pydantic models and sentinel conventions for photo classification."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .normalize import normalize_text

__all__ = [
    "FRENTE_NAO_INFORMADA",
    "DISCIPLINA_NAO_INFORMADA",
    "SERVICO_NAO_IDENTIFICADO",
    "SENTINELS",
    "FIELDS",
    "ClassificationField",
    "Confidence",
    "Status",
    "FieldSource",
    "DateSource",
    "FieldResolution",
    "AliasRule",
    "AliasMatch",
    "ClassificationSources",
    "ClassificationResult",
    "OcrResult",
    "PhotoRecord",
    "is_unknown",
]

# ---------------------------------------------------------------------------
# Sentinels (stable contract strings)
# ---------------------------------------------------------------------------

FRENTE_NAO_INFORMADA = "FRENTE_NAO_INFORMADA"
DISCIPLINA_NAO_INFORMADA = "DISCIPLINA_NAO_INFORMADA"
SERVICO_NAO_IDENTIFICADO = "SERVICO_NAO_IDENTIFICADO"

ClassificationField = Literal["frente", "disciplina", "servico"]
FIELDS: Tuple[ClassificationField, ...] = ("frente", "disciplina", "servico")

SENTINELS = {
    "frente": FRENTE_NAO_INFORMADA,
    "disciplina": DISCIPLINA_NAO_INFORMADA,
    "servico": SERVICO_NAO_IDENTIFICADO,
}

# Spellings emitted by the AI collaborator and older sessions.
_ALTERNATE_SENTINELS = {
    "frente": {FRENTE_NAO_INFORMADA, "FRENTE_NAO_IDENTIFICADA"},
    "disciplina": {DISCIPLINA_NAO_INFORMADA, "DISCIPLINA_NAO_IDENTIFICADA"},
    "servico": {SERVICO_NAO_IDENTIFICADO, "SERVICO_NAO_INFORMADO"},
}
_UNKNOWN_MARKERS = ("NAO_INFORMAD", "NAO_IDENTIFICAD")

Confidence = Literal["high", "medium", "low", "none"]
Status = Literal["AUTO_OK", "REVISAR", "MANUAL"]
FieldSource = Literal["folder", "filename", "alias", "ocr", "ai", "propagated", "none"]
DateSource = Literal["exif", "lastModified", "ocr", "none"]


def is_unknown(field: str, value: Optional[str]) -> bool:
    """Return ``True`` when ``value`` stands for "unknown" in ``field``.

    Accepts the canonical sentinel, the alternate spellings produced by the AI
    collaborator, blank strings and ``None``.
    """

    if value is None:
        return True
    stripped = str(value).strip()
    if not stripped:
        return True
    if stripped in _ALTERNATE_SENTINELS.get(field, ()):
        return True
    upper = stripped.upper()
    return any(marker in upper for marker in _UNKNOWN_MARKERS)


@dataclass(frozen=True)
class FieldResolution:
    """Tagged ``Unknown | Known(value)`` carried by the resolver.

    ``value`` is ``None`` while the field is unknown; sentinel strings only
    appear once the resolution is serialised with :meth:`external`.
    """

    value: Optional[str] = None
    source: str = "none"

    @property
    def known(self) -> bool:
        return self.value is not None

    def external(self, field: str) -> str:
        return self.value if self.value is not None else SENTINELS[field]

    @classmethod
    def from_external(cls, field: str, value: Optional[str], source: str = "none") -> "FieldResolution":
        if is_unknown(field, value):
            return cls()
        return cls(value=str(value), source=source)


# ---------------------------------------------------------------------------
# Alias rules
# ---------------------------------------------------------------------------


class AliasRule(BaseModel):
    """Keyword group mapping to one or more classification fields."""

    match: Tuple[str, ...] = Field(..., min_length=1, description="Tokens that must all appear (AND)")
    disciplina: Optional[str] = None
    servico: Optional[str] = None
    frente: Optional[str] = None
    priority: int = Field(0, ge=0, le=100, description="Higher wins on conflict")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("match", mode="before")
    @classmethod
    def _normalize_tokens(cls, value):
        if isinstance(value, str):
            value = [value]
        tokens = tuple(normalize_text(token) for token in value or ())
        if any(not token for token in tokens):
            raise ValueError("alias rule tokens must contain at least one letter or digit")
        return tokens

    def target(self, field: str) -> Optional[str]:
        value = getattr(self, field)
        return value or None


class AliasMatch(BaseModel):
    """Per-field winners of the alias pass; ``score`` is 0 when nothing fired."""

    disciplina: Optional[str] = None
    servico: Optional[str] = None
    frente: Optional[str] = None
    score: int = 0
    field_scores: dict[str, int] = Field(default_factory=dict)
    rules: dict[str, Tuple[str, ...]] = Field(default_factory=dict)

    def value(self, field: str) -> Optional[str]:
        return getattr(self, field)


# ---------------------------------------------------------------------------
# Photo records and results
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClassificationSources(_CamelModel):
    frente: FieldSource = "none"
    disciplina: FieldSource = "none"
    servico: FieldSource = "none"
    date: DateSource = "none"


class ClassificationResult(_CamelModel):
    """Output of :func:`fotobra.classification.resolver.classify_photo`."""

    frente: str = FRENTE_NAO_INFORMADA
    disciplina: str = DISCIPLINA_NAO_INFORMADA
    servico: str = SERVICO_NAO_IDENTIFICADO
    date_iso: Optional[str] = None
    year_month: Optional[str] = None
    day: Optional[str] = None
    confidence: Confidence = "none"
    status: Status = "MANUAL"
    source: ClassificationSources = Field(default_factory=ClassificationSources)


class OcrResult(_CamelModel):
    """Payload returned by the external OCR collaborator (untrusted)."""

    text: str = ""
    confidence: Optional[float] = None
    date: Optional[str] = Field(default=None, description="Free-form date, usually DD/MM/YYYY HH:MM")
    local: Optional[str] = None
    servico: Optional[str] = None


class PhotoRecord(_CamelModel):
    """Subset of the photo entity read and written by the engine."""

    id: str
    folder_path: str = ""
    filename: str = ""
    last_modified: Optional[datetime] = None

    ocr_text: str = ""
    ocr_local: Optional[str] = None
    ocr_servico: Optional[str] = None

    date_iso: Optional[str] = None
    year_month: Optional[str] = None
    day: Optional[str] = None
    date_source: Optional[DateSource] = None
    hora: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    frente: str = FRENTE_NAO_INFORMADA
    disciplina: str = DISCIPLINA_NAO_INFORMADA
    servico: str = SERVICO_NAO_IDENTIFICADO
    confidence: Confidence = "none"
    status: Status = "MANUAL"
    source: ClassificationSources = Field(default_factory=ClassificationSources)
    alertas: List[str] = Field(default_factory=list)

    @field_validator("folder_path", "filename", "ocr_text", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("frente", "disciplina", "servico", mode="before")
    @classmethod
    def _sentinel_for_unknown(cls, value, info):
        if is_unknown(info.field_name, value):
            return SENTINELS[info.field_name]
        return value

    def resolution(self, field: str) -> FieldResolution:
        return FieldResolution.from_external(field, getattr(self, field), getattr(self.source, field))

    def with_result(self, result: ClassificationResult) -> "PhotoRecord":
        """Return a copy carrying the fields produced by the resolver."""

        return self.model_copy(
            update={
                "frente": result.frente,
                "disciplina": result.disciplina,
                "servico": result.servico,
                "date_iso": result.date_iso,
                "year_month": result.year_month,
                "day": result.day,
                "date_source": result.source.date,
                "confidence": result.confidence,
                "status": result.status,
                "source": result.source,
            }
        )
