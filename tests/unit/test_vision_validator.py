import pytest

from app.vision.models import ExtractedDocumentData
from app.vision.validator import build_extracted_data


class TestBuildExtractedData:
    def test_empty_dict(self) -> None:
        assert build_extracted_data({}) == ExtractedDocumentData()

    def test_unknown_keys_are_dropped(self) -> None:
        data = build_extracted_data({"foo": "bar", "drawingInfo": {"drawingNumber": "A1", "x": 1}})
        assert data.drawing_info is not None
        assert data.drawing_info.drawing_number == "A1"
        assert data.to_dict() == {"drawingInfo": {"drawingNumber": "A1"}}

    def test_blank_strings_become_none(self) -> None:
        data = build_extracted_data({"drawingInfo": {"drawingNumber": "  ", "sheetTitle": ""}})
        assert data.drawing_info is None

    def test_non_dict_sections_are_ignored(self) -> None:
        data = build_extracted_data({"drawingInfo": "A1.01", "locationInfo": ["B"]})
        assert data.drawing_info is None
        assert data.location_info is None

    def test_nested_values_are_not_stringified(self) -> None:
        data = build_extracted_data({"drawingInfo": {"drawingNumber": {"v": 1}, "scale": 0.25}})
        assert data.drawing_info is not None
        assert data.drawing_info.drawing_number is None
        assert data.drawing_info.scale == "0.25"

    def test_confidence_is_clamped(self) -> None:
        high = build_extracted_data({"projectMatch": {"name": "P", "confidence": 7}})
        low = build_extracted_data({"projectMatch": {"name": "P", "confidence": -1}})
        text = build_extracted_data({"projectMatch": {"name": "P", "confidence": "0.4"}})
        junk = build_extracted_data({"projectMatch": {"name": "P", "confidence": "high"}})
        flag = build_extracted_data({"projectMatch": {"name": "P", "confidence": True}})
        assert high.project_match is not None and high.project_match.confidence == 1.0
        assert low.project_match is not None and low.project_match.confidence == 0.0
        assert text.project_match is not None and text.project_match.confidence == 0.4
        assert junk.project_match is not None and junk.project_match.confidence == 0.0
        assert flag.project_match is not None and flag.project_match.confidence == 0.0

    @pytest.mark.parametrize("raw", ["nan", float("nan"), "inf", float("-inf")])
    def test_non_finite_confidence_is_zero(self, raw: object) -> None:
        data = build_extracted_data({"projectMatch": {"name": "P", "confidence": raw}})
        assert data.project_match is not None
        assert data.project_match.confidence == 0.0

    def test_project_match_without_name_is_dropped(self) -> None:
        assert build_extracted_data({"projectMatch": {"confidence": 0.9}}).project_match is None
