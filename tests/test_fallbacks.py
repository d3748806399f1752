import pytest

from fotobra.classification.fallbacks import (
    ClassificationTriple,
    apply_fallbacks,
    infer_disciplina_from_path,
    infer_disciplina_from_servico,
)
from fotobra.classification.schemas import is_unknown


@pytest.mark.parametrize(
    "field, value",
    [
        ("disciplina", None),
        ("disciplina", "  "),
        ("disciplina", "DISCIPLINA_NAO_IDENTIFICADA"),
        ("servico", "SERVICO_NAO_INFORMADO"),
        ("frente", "frente_nao_informada"),
        ("servico", "X_NAO_IDENTIFICADO_Y"),
    ],
)
def test_is_unknown_accepts_alternate_spellings(field: str, value) -> None:
    assert is_unknown(field, value) is True


def test_is_unknown_rejects_real_values() -> None:
    assert is_unknown("servico", "SARJETA_CONCRETO") is False


def test_infer_disciplina_from_path_keyword_groups() -> None:
    assert infer_disciplina_from_path("Obra/Bueiro 3") == "DRENAGEM"
    assert infer_disciplina_from_path("Pavimento/Recape") == "PAVIMENTACAO"
    assert infer_disciplina_from_path("KM 12/fotos") is None
    assert infer_disciplina_from_path(None) is None


def test_infer_disciplina_from_servico() -> None:
    assert infer_disciplina_from_servico("Fresagem asfalto") == "PAVIMENTACAO"
    assert infer_disciplina_from_servico("FRESAGEM_ASFALTO_PISTA_2") == "PAVIMENTACAO"
    assert infer_disciplina_from_servico("BUEIRO") == "DRENAGEM"
    assert infer_disciplina_from_servico("SERVICO_NAO_IDENTIFICADO") is None
    assert infer_disciplina_from_servico("XYZ") is None


def test_apply_fallbacks_fills_from_path_then_service() -> None:
    triple = ClassificationTriple(frente=None, disciplina="DISCIPLINA_NAO_IDENTIFICADA", servico="SARJETA_CONCRETO")
    repaired = apply_fallbacks(triple, folder_path="KM 12/fotos", filename="x.jpg")

    assert repaired == ClassificationTriple(frente="KM_012", disciplina="DRENAGEM", servico="SARJETA_CONCRETO")


def test_apply_fallbacks_uses_filename_for_frente() -> None:
    repaired = apply_fallbacks(ClassificationTriple(), folder_path="Fotos", filename="Praca 3 - bueiro.jpg")

    assert repaired.frente == "PRACA_03"
    assert repaired.disciplina == "DRENAGEM"
    assert repaired.servico == "SERVICO_NAO_IDENTIFICADO"


def test_apply_fallbacks_canonicalises_sentinels() -> None:
    repaired = apply_fallbacks(
        ClassificationTriple(frente="", disciplina="DISCIPLINA_NAO_IDENTIFICADA", servico="SERVICO_NAO_INFORMADO"),
        folder_path="",
        filename="foto.jpg",
    )

    assert repaired == ClassificationTriple(
        frente="FRENTE_NAO_INFORMADA",
        disciplina="DISCIPLINA_NAO_INFORMADA",
        servico="SERVICO_NAO_IDENTIFICADO",
    )


def test_apply_fallbacks_keeps_known_values() -> None:
    triple = ClassificationTriple(frente="BSO_02", disciplina="PAVIMENTACAO", servico="FRESAGEM")
    assert apply_fallbacks(triple, folder_path="Drenagem/KM 10") == triple
