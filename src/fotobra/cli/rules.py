"""Inspection of the alias rule table."""
from __future__ import annotations

import json
from typing import Optional

import typer

from ..classification.matchers.aliases import apply_alias_rules, build_haystack
from ..classification.matchers.frente import extract_frente_from_path

__all__ = ["app"]

app = typer.Typer(help="Consulta das regras de alias.", add_completion=False)


@app.command("show")
def show_rules(
    text: str = typer.Option(..., "--text", help="Texto livre (pasta, nome do arquivo ou OCR)"),
    filename: Optional[str] = typer.Option(None, "--filename", help="Nome do arquivo, avaliado junto ao texto"),
) -> None:
    """Mostra os vencedores por campo das regras de alias para um texto."""

    match = apply_alias_rules(text, filename)
    payload = {
        "haystack": build_haystack(text, filename),
        "frente_pattern": extract_frente_from_path(text, filename),
        "alias": match.model_dump(mode="json"),
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
