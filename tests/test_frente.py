import pytest

from fotobra.classification.matchers.frente import (
    extract_frente_from_ocr,
    extract_frente_from_path,
    match_frente,
)
from fotobra.classification.schemas import FRENTE_NAO_INFORMADA


@pytest.mark.parametrize(
    "folder, filename, expected",
    [
        ("BSO-02/Drenagem/Sarjeta", "IMG_001.jpg", "BSO_02"),
        ("Obra/BSO 3", "a.jpg", "BSO_03"),
        ("Free Flow P3/Fotos", "a.jpg", "FREE_FLOW_P03"),
        ("FREE_FLOW/Portico P12", "a.jpg", "FREE_FLOW_P12"),
        ("Free Flow Norte", "a.jpg", "FREE_FLOW_NORTE"),
        ("Praça de Pedágio", "a.jpg", "PRACA_PEDAGIO_CENTRAL"),
        ("Praca 4", "a.jpg", "PRACA_04"),
        ("Lote B", "a.jpg", "LOTE_B"),
        ("Trecho 7", "a.jpg", "TRECHO_07"),
        ("KM 12 ao 15", "a.jpg", "KM_012_015"),
        ("km 45", "a.jpg", "KM_045"),
        ("Estaca 7", "a.jpg", "ESTACA_007"),
        ("Canteiro de Obras", "a.jpg", "CANTEIRO_OBRAS"),
        ("Viaduto 2", "a.jpg", "VIADUTO_02"),
        ("Pista Sul", "a.jpg", "PISTA_SUL"),
        ("Fotos", "bso02_sarjeta.jpg", "BSO_02"),
        ("Fotos", "IMG_1234.jpg", FRENTE_NAO_INFORMADA),
    ],
)
def test_extract_frente_from_path(folder: str, filename: str, expected: str) -> None:
    assert extract_frente_from_path(folder, filename) == expected


def test_miss_returns_sentinel() -> None:
    assert extract_frente_from_path("", "foto.jpg") == FRENTE_NAO_INFORMADA
    assert extract_frente_from_path(None, None) == FRENTE_NAO_INFORMADA


def test_first_recognizer_wins() -> None:
    code, recognizer = match_frente("BSO 02 KM 10")
    assert code == "BSO_02"
    assert recognizer.name == "bso"


def test_ocr_extraction_returns_none_on_miss() -> None:
    assert extract_frente_from_ocr("") is None
    assert extract_frente_from_ocr("26 de ago. de 2025 10:36") is None
    assert extract_frente_from_ocr("Rodovia SP-270 km 110") == "KM_110"
