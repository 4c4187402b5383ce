import pytest

from app.vision.response_parser import (
    NO_JSON_ERROR,
    PARSE_ERROR,
    find_first_json_object,
    parse_extraction_response,
    parse_json_object,
)


class TestFindFirstJsonObject:
    def test_plain_object(self) -> None:
        assert find_first_json_object('{"a": 1}') == '{"a": 1}'

    def test_ignores_leading_and_trailing_prose(self) -> None:
        text = 'Sure! Here it is: {"a": 1} Let me know if you need more {"b": 2}'
        assert find_first_json_object(text) == '{"a": 1}'

    def test_nested_objects(self) -> None:
        text = 'x {"a": {"b": {"c": 1}}, "d": 2} y'
        assert find_first_json_object(text) == '{"a": {"b": {"c": 1}}, "d": 2}'

    def test_braces_inside_strings_are_ignored(self) -> None:
        text = '{"rawText": "SEE {DETAIL} 3/A5.01 }}", "n": 1} trailing }'
        assert find_first_json_object(text) == '{"rawText": "SEE {DETAIL} 3/A5.01 }}", "n": 1}'

    def test_escaped_quotes_inside_strings(self) -> None:
        text = r'{"rawText": "12\" O.C. {typ}", "n": 1}'
        assert find_first_json_object(text) == text

    def test_no_object(self) -> None:
        assert find_first_json_object("I could not read this drawing.") is None

    def test_unterminated_object_returns_tail(self) -> None:
        assert find_first_json_object('prefix {"a": {"b": 1}') == '{"a": {"b": 1}'


class TestParseJsonObject:
    def test_code_fenced_reply(self) -> None:
        content = '```json\n{"drawingInfo": {"drawingNumber": "A1.01"}}\n```'
        assert parse_json_object(content) == {"drawingInfo": {"drawingNumber": "A1.01"}}

    @pytest.mark.parametrize("content", ["", "no json here", "[1, 2, 3]"])
    def test_missing_json(self, content: str) -> None:
        assert parse_json_object(content) == {"error": NO_JSON_ERROR}

    @pytest.mark.parametrize(
        "content",
        [
            '{"a": 1,}',
            "{'a': 1}",
            '{"a": }',
            '{"a": {"b": 1}',
            "{not json at all}",
        ],
    )
    def test_malformed_json(self, content: str) -> None:
        assert parse_json_object(content) == {"error": PARSE_ERROR}


class TestParseExtractionResponse:
    def test_full_reply(self) -> None:
        content = """Here is what I found:
        {
          "projectMatch": {"name": "Riverside Bridge", "confidence": 0.92},
          "drawingInfo": {"drawingNumber": "S2.01", "sheetTitle": "FRAMING PLAN {ROOF}",
                          "revision": 3, "discipline": "STRUCTURAL"},
          "locationInfo": {"building": "B", "floor": "Roof"},
          "dates": {"documentDate": "2024-03-01"},
          "rawText": "S2.01"
        }
        Hope this helps!"""
        data = parse_extraction_response(content)
        assert data.error is None
        assert data.project_match is not None
        assert data.project_match.name == "Riverside Bridge"
        assert data.project_match.confidence == pytest.approx(0.92)
        assert data.drawing_info is not None
        assert data.drawing_info.sheet_title == "FRAMING PLAN {ROOF}"
        assert data.drawing_info.revision == "3"
        assert data.location_info is not None
        assert data.location_info.floor == "Roof"
        assert data.dates is not None
        assert data.dates.document_date == "2024-03-01"

    def test_model_reported_error_is_a_result(self) -> None:
        data = parse_extraction_response('{"error": "Not a construction document"}')
        assert data.error == "Not a construction document"
        assert data.drawing_info is None

    def test_no_json_becomes_error_field(self) -> None:
        assert parse_extraction_response("Sorry, unreadable.").error == NO_JSON_ERROR

    def test_bad_json_becomes_error_field(self) -> None:
        assert parse_extraction_response('{"drawingInfo": ').error == PARSE_ERROR
