import re

DISCIPLINE_PREFIXES: dict[str, str] = {
    "C": "CIVIL",
    "L": "LANDSCAPE",
    "A": "ARCHITECTURAL",
    "S": "STRUCTURAL",
    "M": "MECHANICAL",
    "P": "PLUMBING",
    "FP": "FIRE_PROTECTION",
    "E": "ELECTRICAL",
    "T": "TELECOMMUNICATIONS",
    "I": "INSTRUMENTATION",
    "G": "GENERAL",
}

_DRAWING_NUMBER_RE = re.compile(r"^([A-Z]{1,2})(\d+)[.\-]?(\d+)?$")


def infer_discipline(drawing_number: str | None) -> str | None:
    """Map a drawing number prefix to its discipline ("FP2.01" -> FIRE_PROTECTION)."""
    if not drawing_number:
        return None
    upper = drawing_number.strip().upper()
    # two-letter prefixes win over their first letter
    for prefix, discipline in DISCIPLINE_PREFIXES.items():
        if len(prefix) == 2 and upper.startswith(prefix):
            return discipline
    return DISCIPLINE_PREFIXES.get(upper[:1])


def format_drawing_number(drawing_number: str | None) -> str:
    """Normalize common drawing number spellings: "c0.0" -> "C0.00"."""
    if not drawing_number:
        return ""
    trimmed = drawing_number.strip().upper()
    match = _DRAWING_NUMBER_RE.match(trimmed)
    if match is None:
        return trimmed
    prefix, major, minor = match.group(1), match.group(2), match.group(3) or "00"
    return f"{prefix}{major}.{minor.ljust(2, '0')}"
