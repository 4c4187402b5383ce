from pathlib import Path

from app.vision.exceptions import VisionError
from app.vision.models import ProjectInfo

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

# Prefix taxonomy taught to the model, in title-block reading order.
PROMPT_DISCIPLINES: list[tuple[str, str, str]] = [
    ("C", "CIVIL", "C0.00, C1.00, C2.00"),
    ("A", "ARCHITECTURAL", "A1.00, A1.01, A2.00"),
    ("S", "STRUCTURAL", "S1.00, S2.00"),
    ("M", "MECHANICAL", "M1.00, M2.00"),
    ("E", "ELECTRICAL", "E1.00, E2.00"),
    ("P", "PLUMBING", "P1.00, P2.00"),
    ("L", "LANDSCAPE", "L1.00"),
    ("G", "GENERAL", "G0.00"),
    ("FP", "FIRE_PROTECTION", "FP1.00"),
]


def load_prompt_template(path: Path | None = None) -> str:
    """Load the extraction prompt template.

    Args:
        path: Template file. Defaults to the bundled extraction_prompt.txt.

    Raises:
        VisionError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "extraction_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise VisionError(f"Failed to load prompt template: {exc}") from exc


def build_extraction_prompt(template: str, projects: list[ProjectInfo]) -> str:
    project_list = "\n".join(
        f"- {p.name} ({p.address})" if p.address else f"- {p.name}" for p in projects
    )
    examples = "\n".join(
        f"     * {sample} = {discipline.replace('_', ' ').title()} drawings"
        for _prefix, discipline, sample in PROMPT_DISCIPLINES
    )
    rules = "\n".join(
        f"     * {prefix} prefix = {discipline}" for prefix, discipline, _sample in PROMPT_DISCIPLINES
    )
    return template.format(
        project_list=project_list or "No projects provided",
        discipline_examples=examples,
        discipline_rules=rules,
    )
