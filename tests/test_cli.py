"""Smoke tests for the Typer CLI router."""
import json
from pathlib import Path

from typer.testing import CliRunner

from fotobra.cli.main import app
from fotobra.config import reset_settings

runner = CliRunner()


def _write_jsonl(path: Path, rows) -> None:
    with path.open("w", encoding="utf-8") as handle:
        for row in rows:
            handle.write(json.dumps(row) + "\n")


def test_help_shows_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("classify", "export-path", "export-plan", "config", "rules"):
        assert command in result.stdout


def test_version_option() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "fotobra" in result.stdout


def test_classify_command(tmp_path: Path) -> None:
    dataset = tmp_path / "photos.jsonl"
    _write_jsonl(
        dataset,
        [
            {"id": "a", "folderPath": "BSO 03/Fotos", "filename": "sarjeta.jpg", "lastModified": 1710498600000},
            {"id": "b", "folderPath": "BSO 03/Fotos", "filename": "IMG_2.jpg", "lastModified": 1710498600000},
            {
                "id": "c",
                "folderPath": "",
                "filename": "IMG_3.jpg",
                "ocr": {"text": "26 de ago. de 2025 10:36\nDrenagem", "local": "Praça 2"},
            },
        ],
    )
    output = tmp_path / "out" / "classified.jsonl"
    log_file = tmp_path / "classify.log"

    result = runner.invoke(
        app,
        ["classify", "--input", str(dataset), "--output", str(output), "--log-file", str(log_file)],
    )

    assert result.exit_code == 0, result.output
    rows = [json.loads(line) for line in output.read_text(encoding="utf-8").splitlines()]
    assert [row["id"] for row in rows] == ["a", "b", "c"]
    assert rows[1]["disciplina"] == "DRENAGEM"
    assert rows[1]["source"]["disciplina"] == "propagated"
    assert rows[1]["status"] == "AUTO_OK"
    assert rows[2]["dateIso"] == "2025-08-26"
    assert rows[2]["source"]["date"] == "ocr"
    assert rows[2]["disciplina"] == "DRENAGEM"
    assert rows[2]["frente"] == "PRACA_2"

    events = [json.loads(line)["event"] for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert events[0] == "classify.start"
    assert events[-1] == "classify.done"


def test_classify_skips_invalid_records_unless_fail_fast(tmp_path: Path) -> None:
    dataset = tmp_path / "photos.jsonl"
    _write_jsonl(dataset, [{"folderPath": "sem id"}, {"id": "ok", "filename": "foto.jpg"}])
    output = tmp_path / "classified.jsonl"

    result = runner.invoke(app, ["classify", "--input", str(dataset), "--output", str(output), "--no-propagate"])
    assert result.exit_code == 0
    assert len(output.read_text(encoding="utf-8").splitlines()) == 1

    result = runner.invoke(
        app, ["classify", "--input", str(dataset), "--output", str(output), "--fail-fast"]
    )
    assert result.exit_code != 0


def test_classify_logs_to_configured_log_dir(tmp_path: Path, monkeypatch) -> None:
    dataset = tmp_path / "photos.jsonl"
    _write_jsonl(dataset, [{"id": "a", "folderPath": "BSO-02/Drenagem", "filename": "IMG_1.jpg"}])
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("FOTOBRA_LOG_DIR", str(log_dir))
    reset_settings()

    try:
        result = runner.invoke(
            app, ["classify", "--input", str(dataset), "--output", str(tmp_path / "out.jsonl"), "--log"]
        )
    finally:
        reset_settings()

    assert result.exit_code == 0, result.output
    log_files = list(log_dir.glob("classify-*.jsonl"))
    assert len(log_files) == 1
    events = [json.loads(line)["event"] for line in log_files[0].read_text(encoding="utf-8").splitlines()]
    assert events[0] == "classify.start"


def test_export_path_command() -> None:
    result = runner.invoke(
        app,
        [
            "export-path",
            "--frente",
            "BSO_02",
            "--disciplina",
            "DRENAGEM",
            "--servico",
            "SARJETA_CONCRETO",
            "--date",
            "2024-03-15",
            "--filename",
            "a.jpg",
        ],
    )
    assert result.exit_code == 0
    assert result.stdout.strip() == "BSO_02/DRENAGEM/SARJETA_CONCRETO/2024-03/15/a.jpg"

    result = runner.invoke(app, ["export-path", "--empresa", "CCR", "--date", "2024-03-15"])
    assert result.stdout.strip().startswith("CCR/FRENTE_NAO_INFORMADA/CATEGORIA_NAO_INFORMADA/")


def test_export_plan_command(tmp_path: Path) -> None:
    dataset = tmp_path / "classified.jsonl"
    row = {"frente": "BSO_02", "disciplina": "DRENAGEM", "servico": "SARJETA_CONCRETO", "dateIso": "2024-03-15"}
    _write_jsonl(
        dataset,
        [
            {"id": "1", "folderPath": "A", "filename": "IMG_1.jpg", **row},
            {"id": "2", "folderPath": "B", "filename": "IMG_1.jpg", **row},
        ],
    )
    output = tmp_path / "plan.json"

    result = runner.invoke(app, ["export-plan", "--input", str(dataset), "--output", str(output)])

    assert result.exit_code == 0
    plan = json.loads(output.read_text(encoding="utf-8"))
    assert [entry["destination"] for entry in plan] == [
        "BSO_02/DRENAGEM/SARJETA_CONCRETO/2024-03/15/IMG_1.jpg",
        "BSO_02/DRENAGEM/SARJETA_CONCRETO/2024-03/15/IMG_1_2.jpg",
    ]


def test_config_paths_command() -> None:
    result = runner.invoke(app, ["config", "paths", "--refresh"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["paths"]["aliases_path"]["kind"] == "file"
    assert payload["tables"]["alias_rules"] > 0


def test_rules_show_command() -> None:
    result = runner.invoke(app, ["rules", "show", "--text", "BSO-02/Drenagem/Sarjeta"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["frente_pattern"] == "BSO_02"
    assert payload["alias"]["servico"] == "SARJETA_CONCRETO"
