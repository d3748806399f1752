"""Loaders for the static classification tables shipped in ``fotobra/resources``.

Every table is read once per path and cached; the returned structures are
immutable (tuples and frozen models) so they can be shared freely.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError

from ..config import get_settings
from .normalize import normalize_key, normalize_text
from .schemas import AliasRule

LOGGER = logging.getLogger(__name__)

__all__ = [
    "KeywordGroup",
    "Vocabulary",
    "load_alias_rules",
    "load_vocabulary",
    "load_disciplina_keywords",
    "load_service_disciplina_map",
    "load_empresas",
    "clear_caches",
    "describe_tables",
]


@dataclass(frozen=True)
class Vocabulary:
    """Closed vocabularies of valid disciplines and services."""

    disciplinas: Tuple[str, ...]
    servicos: Tuple[str, ...]


@dataclass(frozen=True)
class KeywordGroup:
    """Label inferred when any of ``keywords`` occurs in a text."""

    label: str
    keywords: Tuple[str, ...]


def _load_json_object(path: Path) -> Dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected dictionary at {path}, got {type(data)!r}")
    return data


def _resolve(path: str | Path | None, default: Path) -> Path:
    return Path(path).expanduser().resolve() if path else default


@lru_cache(maxsize=8)
def _alias_rules_from(path: Path) -> Tuple[AliasRule, ...]:
    payload = _load_json_object(path)
    entries = payload.get("rules")
    if not isinstance(entries, list):
        raise ValueError(f"{path} must define a 'rules' list")
    rules = []
    for index, entry in enumerate(entries):
        try:
            rules.append(AliasRule.model_validate(entry))
        except ValidationError as exc:
            raise ValueError(f"Invalid alias rule #{index} in {path}: {exc}") from exc
    LOGGER.debug("aliases.loaded", extra={"path": str(path), "rules": len(rules)})
    return tuple(rules)


def load_alias_rules(path: str | Path | None = None) -> Tuple[AliasRule, ...]:
    """Return the alias rule table in declaration order."""

    return _alias_rules_from(_resolve(path, get_settings().aliases_path))


@lru_cache(maxsize=8)
def _vocabulary_from(path: Path) -> Vocabulary:
    payload = _load_json_object(path)
    disciplinas = tuple(str(item) for item in payload.get("disciplinas", []) if str(item).strip())
    servicos = tuple(str(item) for item in payload.get("servicos", []) if str(item).strip())
    if not disciplinas or not servicos:
        raise ValueError(f"{path} must define non-empty 'disciplinas' and 'servicos' lists")
    return Vocabulary(disciplinas=disciplinas, servicos=servicos)


def load_vocabulary(path: str | Path | None = None) -> Vocabulary:
    return _vocabulary_from(_resolve(path, get_settings().vocabulary_path))


def _keyword_groups(payload: Mapping[str, Any], section: str, label_key: str, path: Path) -> Tuple[KeywordGroup, ...]:
    entries = payload.get(section)
    if not isinstance(entries, list):
        raise ValueError(f"{path} must define a '{section}' list")
    groups = []
    for entry in entries:
        label = str(entry.get(label_key, "")).strip()
        keywords = tuple(token for token in (normalize_text(k) for k in entry.get("keywords", [])) if token)
        if label and keywords:
            groups.append(KeywordGroup(label=label, keywords=keywords))
    return tuple(groups)


@lru_cache(maxsize=8)
def _disciplina_keywords_from(path: Path) -> Tuple[KeywordGroup, ...]:
    return _keyword_groups(_load_json_object(path), "groups", "disciplina", path)


def load_disciplina_keywords(path: str | Path | None = None) -> Tuple[KeywordGroup, ...]:
    return _disciplina_keywords_from(_resolve(path, get_settings().disciplina_keywords_path))


@lru_cache(maxsize=8)
def _empresas_from(path: Path) -> Tuple[KeywordGroup, ...]:
    return _keyword_groups(_load_json_object(path), "empresas", "empresa", path)


def load_empresas(path: str | Path | None = None) -> Tuple[KeywordGroup, ...]:
    return _empresas_from(_resolve(path, get_settings().empresas_path))


@lru_cache(maxsize=8)
def _service_map_from(path: Path) -> Tuple[Tuple[str, str], ...]:
    mapping = _load_json_object(path).get("mapping")
    if not isinstance(mapping, dict):
        raise ValueError(f"{path} must define a 'mapping' object")
    return tuple((normalize_key(service), str(disciplina)) for service, disciplina in mapping.items())


def load_service_disciplina_map(path: str | Path | None = None) -> Dict[str, str]:
    """Return ``{SERVICE_KEY: DISCIPLINA}`` preserving declaration order."""

    return dict(_service_map_from(_resolve(path, get_settings().service_disciplina_path)))


def clear_caches() -> None:
    """Forget every loaded table (tests swapping resource files)."""

    for loader in (_alias_rules_from, _vocabulary_from, _disciplina_keywords_from, _empresas_from, _service_map_from):
        loader.cache_clear()


def describe_tables(settings: Optional[Any] = None) -> Dict[str, int]:
    """Return row counts of every table, handy for ``fotobra config paths``."""

    settings = settings or get_settings()
    vocabulary = _vocabulary_from(Path(settings.vocabulary_path))
    return {
        "alias_rules": len(_alias_rules_from(Path(settings.aliases_path))),
        "disciplinas": len(vocabulary.disciplinas),
        "servicos": len(vocabulary.servicos),
        "disciplina_keywords": len(_disciplina_keywords_from(Path(settings.disciplina_keywords_path))),
        "service_disciplina": len(_service_map_from(Path(settings.service_disciplina_path))),
        "empresas": len(_empresas_from(Path(settings.empresas_path))),
    }
