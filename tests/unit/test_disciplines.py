import pytest

from app.vision.disciplines import format_drawing_number, infer_discipline


class TestInferDiscipline:
    @pytest.mark.parametrize(
        ("drawing_number", "expected"),
        [
            ("C0.00", "CIVIL"),
            ("a1.01", "ARCHITECTURAL"),
            ("S2.01", "STRUCTURAL"),
            ("M1.00", "MECHANICAL"),
            ("P1.00", "PLUMBING"),
            ("E3.10", "ELECTRICAL"),
            ("L1.00", "LANDSCAPE"),
            ("G0.00", "GENERAL"),
            ("T1.00", "TELECOMMUNICATIONS"),
            ("I1.00", "INSTRUMENTATION"),
        ],
    )
    def test_single_letter_prefixes(self, drawing_number: str, expected: str) -> None:
        assert infer_discipline(drawing_number) == expected

    def test_two_letter_prefix_beats_first_letter(self) -> None:
        assert infer_discipline("FP2.01") == "FIRE_PROTECTION"

    def test_unknown_prefix(self) -> None:
        assert infer_discipline("X1.00") is None

    def test_empty(self) -> None:
        assert infer_discipline(None) is None
        assert infer_discipline("") is None


class TestFormatDrawingNumber:
    def test_pads_minor_number(self) -> None:
        assert format_drawing_number("c0.0") == "C0.00"

    def test_keeps_well_formed_number(self) -> None:
        assert format_drawing_number("A1.01") == "A1.01"

    def test_leaves_unrecognized_formats_uppercased(self) -> None:
        assert format_drawing_number(" sk-1a ") == "SK-1A"

    def test_empty(self) -> None:
        assert format_drawing_number(None) == ""
