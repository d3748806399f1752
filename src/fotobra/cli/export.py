"""CLI commands computing archive destinations."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from ..classification.schemas import PhotoRecord
from ..export.paths import ExportPathInput, build_export_path, build_simple_export_path
from ..export.plan import plan_export
from ..utils.io_utils import iter_jsonl

__all__ = ["export_path_command", "export_plan_command"]


def export_path_command(
    frente: Optional[str] = typer.Option(None, "--frente", help="Frente de obra"),
    disciplina: Optional[str] = typer.Option(None, "--disciplina", help="Disciplina (categoria)"),
    servico: Optional[str] = typer.Option(None, "--servico", help="Serviço executado"),
    date_iso: Optional[str] = typer.Option(None, "--date", help="Data da foto no formato YYYY-MM-DD"),
    filename: Optional[str] = typer.Option(None, "--filename", help="Nome do arquivo"),
    empresa: Optional[str] = typer.Option(
        None, "--empresa", help="Empresa; quando informada usa o layout completo EMPRESA/FRENTE/..."
    ),
) -> None:
    """Imprime o caminho de exportação de uma foto."""

    data = ExportPathInput(
        empresa=empresa,
        frente=frente,
        categoria=disciplina,
        servico=servico,
        date_iso=date_iso,
        filename=filename,
    )
    typer.echo(build_export_path(data) if empresa else build_simple_export_path(data))


def export_plan_command(
    input_path: Path = typer.Option(..., "--input", exists=True, dir_okay=False, help="JSONL com fotos classificadas"),
    output_path: Path = typer.Option(..., "--output", dir_okay=False, help="Arquivo JSON com o plano de exportação"),
    empresa: Optional[str] = typer.Option(None, "--empresa", help="Força a empresa para todas as fotos"),
) -> None:
    """Gera o destino de cada foto, resolvendo colisões de nome."""

    photos = [PhotoRecord.model_validate(row) for row in iter_jsonl(input_path)]
    entries = plan_export(photos, empresa=empresa)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps([entry.as_dict() for entry in entries], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    typer.echo(json.dumps({"output": str(output_path), "entries": len(entries)}, indent=2, ensure_ascii=False))
