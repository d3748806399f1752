"""Centralized configuration and resource resolution for fotobra.

This module exposes :func:`get_settings` returning the canonical locations of
the classification tables (alias rules, vocabularies, keyword groups). Paths
can be customized via environment variables or by pointing
``FOTOBRA_CONFIG_FILE`` to a TOML/YAML document with a ``[paths]`` section.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover - Python 3.10
    tomllib = None  # type: ignore[assignment]

try:  # Optional dependency
    import yaml  # type: ignore[import-not-found]
except ImportError:  # pragma: no cover - PyYAML is optional at runtime
    yaml = None  # type: ignore[assignment]

__all__ = ["ResourcePaths", "get_settings", "reset_settings"]

_PACKAGE_ROOT = Path(__file__).resolve().parent
_BUNDLED_RESOURCES = _PACKAGE_ROOT / "resources"
_CONFIG_CACHE: Optional["ResourcePaths"] = None
_CONFIG_SOURCE: Optional[Path] = None


@dataclass(frozen=True)
class ResourcePaths:
    """Resolved filesystem locations for classification resources."""

    resources_dir: Path
    aliases_path: Path
    vocabulary_path: Path
    disciplina_keywords_path: Path
    service_disciplina_path: Path
    empresas_path: Path
    log_dir: Path

    def as_dict(self) -> Dict[str, str]:
        """Expose the resolved paths as plain strings (useful for logging)."""

        return {
            "resources_dir": str(self.resources_dir),
            "aliases_path": str(self.aliases_path),
            "vocabulary_path": str(self.vocabulary_path),
            "disciplina_keywords_path": str(self.disciplina_keywords_path),
            "service_disciplina_path": str(self.service_disciplina_path),
            "empresas_path": str(self.empresas_path),
            "log_dir": str(self.log_dir),
        }


def _normalize_path(value: Optional[str | Path], *, base: Optional[Path]) -> Optional[Path]:
    if value is None or value == "":
        return None
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = ((base or Path.cwd()) / candidate).expanduser()
    return candidate.resolve()


def _load_config_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file '{path}' does not exist")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        if tomllib is None:  # pragma: no cover - Python 3.10
            raise RuntimeError("TOML configuration requires Python 3.11 or tomllib")
        with path.open("rb") as handle:
            return tomllib.load(handle)
    if suffix in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("YAML configuration requires the 'PyYAML' package")
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
            return loaded or {}
    raise ValueError(f"Unsupported config file format: '{suffix}'")


def _coalesce_mapping(source: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not isinstance(source, Mapping):
        return {}
    return source


def _build_paths(config_file: Optional[Path]) -> ResourcePaths:
    config_data: Mapping[str, Any] = {}
    config_dir: Optional[Path] = None
    if config_file is not None:
        config_file = _normalize_path(config_file, base=None)
        if config_file is not None:
            config_data = _load_config_file(config_file)
            config_dir = config_file.parent

    paths_section = _coalesce_mapping(config_data.get("paths"))
    env = os.environ

    resources_dir = _normalize_path(
        env.get("FOTOBRA_RESOURCES_DIR") or paths_section.get("resources"),
        base=config_dir,
    ) or _BUNDLED_RESOURCES

    aliases_path = _normalize_path(
        env.get("FOTOBRA_ALIASES_PATH") or paths_section.get("aliases"),
        base=config_dir,
    ) or (resources_dir / "aliases.json")

    vocabulary_path = _normalize_path(
        env.get("FOTOBRA_VOCABULARY_PATH") or paths_section.get("vocabulary"),
        base=config_dir,
    ) or (resources_dir / "vocabulary.json")

    disciplina_keywords_path = _normalize_path(
        env.get("FOTOBRA_DISCIPLINA_KEYWORDS_PATH") or paths_section.get("disciplina_keywords"),
        base=config_dir,
    ) or (resources_dir / "disciplina_keywords.json")

    service_disciplina_path = _normalize_path(
        env.get("FOTOBRA_SERVICE_DISCIPLINA_PATH") or paths_section.get("service_disciplina"),
        base=config_dir,
    ) or (resources_dir / "service_disciplina.json")

    empresas_path = _normalize_path(
        env.get("FOTOBRA_EMPRESAS_PATH") or paths_section.get("empresas"),
        base=config_dir,
    ) or (resources_dir / "empresas.json")

    log_dir = _normalize_path(
        env.get("FOTOBRA_LOG_DIR") or paths_section.get("logs"),
        base=config_dir,
    ) or (Path.cwd() / "outputs" / "logs").resolve()

    return ResourcePaths(
        resources_dir=resources_dir,
        aliases_path=aliases_path,
        vocabulary_path=vocabulary_path,
        disciplina_keywords_path=disciplina_keywords_path,
        service_disciplina_path=service_disciplina_path,
        empresas_path=empresas_path,
        log_dir=log_dir,
    )


def get_settings(*, refresh: bool = False, config_file: str | Path | None = None) -> ResourcePaths:
    """Return the cached :class:`ResourcePaths` configuration.

    Parameters
    ----------
    refresh:
        When ``True`` the cached configuration is discarded and recomputed.
    config_file:
        Optional explicit path to the configuration document. When provided the
        returned instance is not cached globally, allowing callers (e.g. tests)
        to override settings temporarily.
    """

    global _CONFIG_CACHE, _CONFIG_SOURCE

    explicit_path = Path(config_file).expanduser() if config_file is not None else None

    if explicit_path is not None:
        return _build_paths(explicit_path)

    env_path = os.getenv("FOTOBRA_CONFIG_FILE")
    source_path = Path(env_path).expanduser() if env_path else None

    if refresh or _CONFIG_CACHE is None or _CONFIG_SOURCE != source_path:
        _CONFIG_CACHE = _build_paths(source_path)
        _CONFIG_SOURCE = source_path

    return _CONFIG_CACHE


def reset_settings() -> None:
    """Clear the cached configuration (mainly useful for tests)."""

    global _CONFIG_CACHE, _CONFIG_SOURCE
    _CONFIG_CACHE = None
    _CONFIG_SOURCE = None
