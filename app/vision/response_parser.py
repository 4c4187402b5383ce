"""Best-effort extraction of the JSON object embedded in a model reply."""

import json
from typing import Any

from app.logging.logger import Log
from app.vision.models import ExtractedDocumentData
from app.vision.validator import build_extracted_data

NO_JSON_ERROR = "No JSON found in response"
PARSE_ERROR = "Failed to parse extraction response"


def find_first_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` span in ``text``.

    Braces inside JSON string literals (including escaped quotes) are not
    counted. Returns None when no opening brace exists; returns the
    unterminated tail when the object never closes so the caller can report
    a decode failure.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text[start:]


def parse_json_object(content: str) -> dict[str, Any]:
    """Decode the first JSON object in ``content`` into a dict.

    Failures are reported as ``{"error": ...}``; this never raises.
    """
    candidate = find_first_json_object(content)
    if candidate is None:
        return {"error": NO_JSON_ERROR}
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        Log.warning(f"Failed to parse extraction response: {exc}")
        return {"error": PARSE_ERROR}
    if not isinstance(parsed, dict):
        return {"error": PARSE_ERROR}
    return parsed


def parse_extraction_response(content: str) -> ExtractedDocumentData:
    return build_extracted_data(parse_json_object(content))
