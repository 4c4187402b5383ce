from dataclasses import replace

from app.vision.models import ExtractedDocumentData, ProjectInfo, ProjectMatch

EXACT_MATCH_CONFIDENCE = 1.0
ADDRESS_MATCH_CONFIDENCE = 0.7
CONTAINMENT_CONFIDENCE_CAP = 0.9


def score_project(extracted_name: str, project: ProjectInfo) -> float:
    """Score how well an extracted project name points at ``project``.

    Exact name: 1.0. Name containment either way: between 0.7 and 0.9,
    growing with the length overlap of the two names. Address fragment
    (text before the first comma) found in the name: 0.7. No match: 0.
    """
    name = extracted_name.strip().lower()
    project_name = project.name.strip().lower()
    if not name or not project_name:
        return 0.0
    if name == project_name:
        return EXACT_MATCH_CONFIDENCE

    score = 0.0
    if project_name in name or name in project_name:
        overlap = min(len(name), len(project_name)) / max(len(name), len(project_name))
        span = CONTAINMENT_CONFIDENCE_CAP - ADDRESS_MATCH_CONFIDENCE
        score = min(ADDRESS_MATCH_CONFIDENCE + span * overlap, CONTAINMENT_CONFIDENCE_CAP)

    address_fragment = (project.address or "").split(",")[0].strip().lower()
    if address_fragment and address_fragment in name:
        score = max(score, ADDRESS_MATCH_CONFIDENCE)
    return score


def find_best_project(extracted_name: str, projects: list[ProjectInfo]) -> ProjectMatch | None:
    best: ProjectInfo | None = None
    best_score = 0.0
    for project in projects:
        score = score_project(extracted_name, project)
        if score > best_score:
            best, best_score = project, score
        if best_score == EXACT_MATCH_CONFIDENCE:
            break
    if best is None:
        return None
    return ProjectMatch(id=best.id, name=best.name, confidence=best_score)


def match_project_to_list(
    data: ExtractedDocumentData,
    projects: list[ProjectInfo],
) -> ExtractedDocumentData:
    """Attach a project id when the model named a project but gave no id."""
    match = data.project_match
    if match is None or match.id or not projects:
        return data
    best = find_best_project(match.name, projects)
    if best is None:
        return data
    return replace(data, project_match=best)
