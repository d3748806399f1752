import json
import sys
from pathlib import Path

import pytest

from fotobra.classification.lexicon import clear_caches, describe_tables, load_alias_rules
from fotobra.classification.matchers.aliases import apply_alias_rules
from fotobra.config import get_settings, reset_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    clear_caches()
    yield
    reset_settings()
    clear_caches()


def test_defaults_point_to_bundled_resources(monkeypatch) -> None:
    for name in ("FOTOBRA_RESOURCES_DIR", "FOTOBRA_ALIASES_PATH", "FOTOBRA_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings(refresh=True)

    assert settings.aliases_path.name == "aliases.json"
    assert settings.aliases_path.parent == settings.resources_dir
    assert settings.vocabulary_path.exists()
    assert get_settings() is settings


def test_environment_overrides_alias_table(tmp_path: Path, monkeypatch) -> None:
    custom = tmp_path / "aliases.json"
    custom.write_text(
        json.dumps({"rules": [{"match": ["PIPOCA"], "servico": "SERVICO_TESTE", "priority": 50}]}),
        encoding="utf-8",
    )
    monkeypatch.setenv("FOTOBRA_ALIASES_PATH", str(custom))
    reset_settings()

    assert get_settings().aliases_path == custom.resolve()
    assert len(load_alias_rules()) == 1
    assert apply_alias_rules("Pipoca", "a.jpg").servico == "SERVICO_TESTE"


@pytest.mark.skipif(sys.version_info < (3, 11), reason="tomllib requires Python 3.11")
def test_toml_config_file_paths_section(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("FOTOBRA_ALIASES_PATH", raising=False)
    monkeypatch.delenv("FOTOBRA_LOG_DIR", raising=False)
    config = tmp_path / "fotobra.toml"
    config.write_text('[paths]\nlogs = "logs"\naliases = "tables/aliases.json"\n', encoding="utf-8")

    settings = get_settings(config_file=config)

    assert settings.log_dir == (tmp_path / "logs").resolve()
    assert settings.aliases_path == (tmp_path / "tables" / "aliases.json").resolve()


def test_yaml_config_file(tmp_path: Path, monkeypatch) -> None:
    pytest.importorskip("yaml")
    monkeypatch.delenv("FOTOBRA_EMPRESAS_PATH", raising=False)
    config = tmp_path / "fotobra.yaml"
    config.write_text("paths:\n  empresas: custom/empresas.json\n", encoding="utf-8")

    settings = get_settings(config_file=config)

    assert settings.empresas_path == (tmp_path / "custom" / "empresas.json").resolve()


def test_config_file_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        get_settings(config_file=tmp_path / "missing.toml")

    bad = tmp_path / "config.ini"
    bad.write_text("[paths]\n", encoding="utf-8")
    with pytest.raises(ValueError):
        get_settings(config_file=bad)


def test_describe_tables_counts_rows(monkeypatch) -> None:
    monkeypatch.delenv("FOTOBRA_ALIASES_PATH", raising=False)
    counts = describe_tables(get_settings(refresh=True))

    assert counts["alias_rules"] > 100
    assert counts["disciplinas"] >= 16
    assert counts["empresas"] > 0
