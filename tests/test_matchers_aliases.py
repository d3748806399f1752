import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from fotobra.classification.lexicon import load_alias_rules
from fotobra.classification.matchers.aliases import AliasRuleMatcher, apply_alias_rules, build_haystack
from fotobra.classification.schemas import AliasRule


def _rule(match, priority, **targets) -> AliasRule:
    return AliasRule(match=match, priority=priority, **targets)


def test_rule_requires_every_token() -> None:
    matcher = AliasRuleMatcher([_rule(["SARJETA", "CONCRETO"], 90, servico="SARJETA_CONCRETO")])
    assert matcher.apply("Sarjeta", "IMG.jpg").servico is None
    assert matcher.apply("Sarjeta de concreto", "IMG.jpg").servico == "SARJETA_CONCRETO"


def test_higher_priority_wins_regardless_of_order() -> None:
    matcher = AliasRuleMatcher(
        [
            _rule(["BUEIRO"], 75, servico="BUEIRO_TUBULAR"),
            _rule(["BUEIRO", "CELULAR"], 90, servico="BUEIRO_CELULAR"),
        ]
    )
    result = matcher.apply("Drenagem/Bueiro celular")
    assert result.servico == "BUEIRO_CELULAR"
    assert result.score == 90


def test_equal_priority_resolves_to_first_declared() -> None:
    matcher = AliasRuleMatcher(
        [
            _rule(["PINTURA"], 80, servico="PINTURA_DE_FAIXAS"),
            _rule(["FAIXA"], 80, servico="SINALIZACAO_HORIZONTAL"),
        ]
    )
    assert matcher.apply("pintura faixa").servico == "PINTURA_DE_FAIXAS"


def test_winners_are_chosen_per_field() -> None:
    matcher = AliasRuleMatcher(
        [
            _rule(["BSO", "02"], 100, frente="BSO_02"),
            _rule(["SARJETA"], 80, disciplina="DRENAGEM", servico="SARJETA_CONCRETO"),
        ]
    )
    result = matcher.apply("BSO-02/Sarjeta")
    assert (result.frente, result.disciplina, result.servico) == ("BSO_02", "DRENAGEM", "SARJETA_CONCRETO")
    assert result.field_scores == {"frente": 100, "disciplina": 80, "servico": 80}
    assert result.score == 100


def test_no_rule_fires_gives_zero_score() -> None:
    result = AliasRuleMatcher([_rule(["BUEIRO"], 75, servico="BUEIRO_TUBULAR")]).apply("", "foto.jpg", None)
    assert result.score == 0
    assert result.servico is None and result.disciplina is None and result.frente is None


def test_bundled_table_resolves_sarjeta_folder() -> None:
    result = apply_alias_rules("BSO-02/Drenagem/Sarjeta", "IMG_001.jpg", "")
    assert result.disciplina == "DRENAGEM"
    assert result.servico == "SARJETA_CONCRETO"
    assert result.score > 0


def test_build_haystack_skips_empty_sources() -> None:
    assert build_haystack("Obra/Drenagem", None, "", "açude") == "OBRA DRENAGEM ACUDE"


def test_rule_validation() -> None:
    with pytest.raises(ValidationError):
        AliasRule(match=[], priority=10, servico="X")
    with pytest.raises(ValidationError):
        AliasRule(match=["A"], priority=101, servico="X")
    with pytest.raises(ValidationError):
        AliasRule(match=["---"], priority=10, servico="X")
    assert AliasRule(match=["meio-fio"], priority=10).match == ("MEIO FIO",)


def test_invalid_table_reports_rule_index(tmp_path: Path) -> None:
    path = tmp_path / "aliases.json"
    path.write_text(
        json.dumps({"rules": [{"match": ["OK"], "priority": 10}, {"match": ["BAD"], "priority": 500}]}),
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="#1"):
        load_alias_rules(path)


def test_bundled_table_is_loaded_in_declaration_order() -> None:
    rules = load_alias_rules()
    assert len(rules) > 100
    assert all(0 <= rule.priority <= 100 for rule in rules)
    assert rules is load_alias_rules()
