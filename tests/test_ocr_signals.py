import pytest

from fotobra.classification.ocr_signals import (
    attach_ocr_result,
    extract_coordinates_from_text,
    extract_date_from_text,
    extract_time_from_text,
)
from fotobra.classification.schemas import OcrResult, PhotoRecord

STAMP = "26 de ago. de 2025 10:36:05\n23.5109591S 47.5655273W\nRodovia SP-270 km 110"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("26 de ago. de 2025", "2025-08-26"),
        ("3 de março de 2024", "2024-03-03"),
        ("27 de Agosto de 2025 08:10", "2025-08-27"),
        ("Data: 05/01/2023 14:22", "2023-01-05"),
        ("gerado em 2022-12-31", "2022-12-31"),
    ],
)
def test_extract_date_formats(text: str, expected: str) -> None:
    signal = extract_date_from_text(text)
    assert signal.date_iso == expected
    assert signal.year_month == expected[:7]


@pytest.mark.parametrize("text", ["", None, "sem data", "45/13/2024", "10 de foo de 2024"])
def test_extract_date_misses(text) -> None:
    assert extract_date_from_text(text).found is False


def test_extract_coordinates_with_hemispheres() -> None:
    coordinates = extract_coordinates_from_text(STAMP)
    assert coordinates.latitude == pytest.approx(-23.5109591)
    assert coordinates.longitude == pytest.approx(-47.5655273)


def test_extract_decimal_coordinates_are_range_checked() -> None:
    assert extract_coordinates_from_text("-23.51, -47.56").latitude == pytest.approx(-23.51)
    assert extract_coordinates_from_text("123.0, 47.0").found is False


def test_hemisphere_coordinates_are_range_checked() -> None:
    assert extract_coordinates_from_text("123.51S 47.56W").found is False
    assert extract_coordinates_from_text("23.51S 247.56W").found is False
    assert extract_coordinates_from_text("23.51N 47.56E").latitude == pytest.approx(23.51)


def test_extract_time() -> None:
    assert extract_time_from_text("26/08/2025 10:36") == "10:36"
    assert extract_time_from_text("99:99") is None
    assert extract_time_from_text(None) is None


def test_attach_ocr_result_sets_date_and_hints() -> None:
    photo = PhotoRecord(id="p1", filename="IMG_1.jpg")
    ocr = OcrResult(text=STAMP, confidence=0.8, local="Praça 2", servico="Sarjeta")
    enriched = attach_ocr_result(photo, ocr)

    assert enriched.ocr_text == STAMP
    assert (enriched.date_iso, enriched.year_month, enriched.day) == ("2025-08-26", "2025-08", "26")
    assert enriched.date_source == "ocr"
    assert enriched.hora == "10:36"
    assert enriched.latitude == pytest.approx(-23.5109591)
    assert (enriched.ocr_local, enriched.ocr_servico) == ("Praça 2", "Sarjeta")
    assert photo.ocr_text == ""


def test_attach_ocr_result_uses_collaborator_date_field() -> None:
    photo = PhotoRecord(id="p1")
    enriched = attach_ocr_result(photo, OcrResult(text="sem carimbo", date="05/01/2023 14:22"))

    assert enriched.date_iso == "2023-01-05"
    assert enriched.hora == "14:22"


def test_attach_ocr_result_keeps_exif_date() -> None:
    photo = PhotoRecord(id="p1", date_iso="2024-03-15", date_source="exif")
    enriched = attach_ocr_result(photo, OcrResult(text=STAMP))

    assert enriched.date_iso == "2024-03-15"
    assert enriched.date_source == "exif"
