"""CLI entrypoint for batch classification of photo records."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError
from tqdm import tqdm

from ..classification.ocr_signals import attach_ocr_result
from ..classification.pipeline import classify_batch, summarize
from ..classification.schemas import OcrResult, PhotoRecord
from ..config import get_settings
from ..utils.io_utils import iter_jsonl, write_jsonl
from ..utils.logging import configure_json_logger, flush_handlers, generate_trace_id, log_event

__all__ = ["classify_command", "parse_record"]


def parse_record(row: Dict[str, Any]) -> PhotoRecord:
    """Build a :class:`PhotoRecord`; an ``ocr`` object is attached as OCR signals."""

    payload = dict(row)
    ocr_payload = payload.pop("ocr", None)
    photo = PhotoRecord.model_validate(payload)
    if ocr_payload:
        photo = attach_ocr_result(photo, OcrResult.model_validate(ocr_payload))
    return photo


def classify_command(
    input_path: Path = typer.Option(..., "--input", exists=True, dir_okay=False, help="JSONL com os registros das fotos"),
    output_path: Path = typer.Option(..., "--output", dir_okay=False, help="JSONL de destino com as fotos classificadas"),
    propagate: bool = typer.Option(
        True, "--propagate/--no-propagate", help="Propaga a classificação entre fotos da mesma pasta"
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", dir_okay=False, help="Log JSONL opcional"),
    log_to_dir: bool = typer.Option(
        False, "--log", help="Grava o log JSONL em log_dir (FOTOBRA_LOG_DIR) quando --log-file não é informado"
    ),
    fail_fast: bool = typer.Option(False, "--fail-fast/--no-fail-fast", help="Interrompe no primeiro registro inválido"),
) -> None:
    """Classifica frente, disciplina e serviço de cada foto do arquivo JSONL."""

    trace_id = generate_trace_id()
    if log_file is None and log_to_dir:
        log_file = get_settings().log_dir / f"classify-{trace_id}.jsonl"
    logger = configure_json_logger(log_file)
    log_event(logger, "classify.start", trace_id=trace_id, input=str(input_path), propagate=propagate)

    photos: List[PhotoRecord] = []
    errors = 0
    for idx, row in enumerate(iter_jsonl(input_path)):
        try:
            photos.append(parse_record(row))
        except ValidationError as exc:
            if fail_fast:
                raise
            errors += 1
            typer.echo(f"Error processing record {idx}: {exc}", err=True)
            log_event(logger, "classify.record_error", trace_id=trace_id, record_idx=idx, error=str(exc))

    with tqdm(total=len(photos), desc="Classifying photos", unit="photo") as pbar:
        classified = classify_batch(photos, propagate=propagate, on_record=lambda _: pbar.update(1))

    written = write_jsonl(output_path, (photo.model_dump(mode="json", by_alias=True) for photo in classified))
    summary = summarize(classified)
    log_event(logger, "classify.done", trace_id=trace_id, written=written, errors=errors, summary=summary)
    flush_handlers(logger)

    typer.echo(
        json.dumps(
            {"output": str(output_path), "records": written, "errors": errors, "summary": summary},
            indent=2,
            ensure_ascii=False,
        )
    )
