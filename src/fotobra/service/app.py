
from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from pydantic import BaseModel, Field

from .._version import __version__
from ..classification.matchers.aliases import AliasRuleMatcher
from ..classification.matchers.dictionary import DictionaryLookup
from ..classification.ocr_signals import attach_ocr_result
from ..classification.pipeline import classify_batch, summarize
from ..classification.schemas import OcrResult, PhotoRecord
from ..config import get_settings
from ..export.paths import ExportPathInput, build_export_path, build_simple_export_path

APP_VERSION = __version__

# ---- Singletons with lock ----
_engine_lock = threading.Lock()
_state: Dict[str, Any] = {"matcher": None, "lookup": None}


def _load_engine_once():
    with _engine_lock:
        if _state["matcher"] is None:
            _state["matcher"] = AliasRuleMatcher()
            _state["lookup"] = DictionaryLookup()
    return _state["matcher"], _state["lookup"]


def reset_engine() -> None:
    with _engine_lock:
        _state["matcher"] = None
        _state["lookup"] = None


# ---- FastAPI app ----
app = FastAPI(title="fotobra API", version=APP_VERSION)


class PhotoIn(PhotoRecord):
    ocr: Optional[OcrResult] = None


class ClassifyIn(BaseModel):
    photos: List[PhotoIn] = Field(..., description="Fotos a classificar")
    propagate: bool = True


class ClassifyOut(BaseModel):
    photos: List[Dict[str, Any]]
    summary: Dict[str, Any]


class ExportPathOut(BaseModel):
    path: str
    layout: str


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": APP_VERSION,
        "resources": get_settings().as_dict(),
    }


@app.post("/classify", response_model=ClassifyOut)
def classify(payload: ClassifyIn):
    matcher, lookup = _load_engine_once()
    photos = []
    for item in payload.photos:
        photo = PhotoRecord.model_validate(item.model_dump(exclude={"ocr"}))
        if item.ocr is not None:
            photo = attach_ocr_result(photo, item.ocr)
        photos.append(photo)

    classified = classify_batch(photos, propagate=payload.propagate, matcher=matcher, lookup=lookup)
    return ClassifyOut(
        photos=[photo.model_dump(mode="json", by_alias=True) for photo in classified],
        summary=summarize(classified),
    )


@app.post("/export-path", response_model=ExportPathOut)
def export_path(payload: ExportPathInput):
    if payload.empresa:
        return ExportPathOut(path=build_export_path(payload), layout="full")
    return ExportPathOut(path=build_simple_export_path(payload), layout="simple")
