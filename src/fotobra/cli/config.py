"""Utility commands to inspect the resolved classification resources."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

import typer

from ..classification.lexicon import describe_tables
from ..config import ResourcePaths, get_settings

__all__ = ["app"]

app = typer.Typer(
    help="Ferramentas de diagnóstico da configuração das tabelas de classificação.",
    add_completion=False,
)


def _inventory(paths: ResourcePaths) -> Dict[str, Dict[str, str | bool]]:
    inventory: Dict[str, Dict[str, str | bool]] = {}
    for key, value in paths.as_dict().items():
        path = Path(value)
        if path.is_dir():
            kind = "directory"
        elif path.is_file():
            kind = "file"
        else:
            kind = "missing"
        inventory[key] = {"path": str(path), "exists": path.exists(), "kind": kind}
    return inventory


@app.command("paths")
def show_paths(
    config_file: Path = typer.Option(
        None,
        "--config-file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Configuração TOML/YAML alternativa no lugar das variáveis de ambiente.",
    ),
    refresh: bool = typer.Option(
        False,
        "--refresh",
        help="Ignora o cache e reconstrói as configurações a partir do ambiente ou do arquivo.",
    ),
    count_rows: bool = typer.Option(
        True,
        "--count/--no-count",
        help="Carrega as tabelas e informa o número de entradas de cada uma.",
    ),
) -> None:
    """Imprime em JSON os caminhos resolvidos por ``ResourcePaths``."""

    settings = get_settings(refresh=refresh, config_file=config_file)
    payload = {
        "config_source": str(config_file) if config_file else "environment",
        "paths": _inventory(settings),
    }
    if count_rows:
        payload["tables"] = describe_tables(settings)

    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
