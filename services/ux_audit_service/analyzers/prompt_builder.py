from services.ux_audit_service.crawler.page_snapshot import PageSnapshot
from services.ux_audit_service.schemas.audit import CHECKLIST_STATUSES, SECTION_NAMES

CHECKLIST_CATEGORIES: tuple[str, ...] = (
    "Navigation clarity and consistency",
    "Visual hierarchy and layout alignment",
    "CTA clarity and visibility",
    "Mobile responsiveness",
    "Accessibility",
    "Page performance and speed",
)

_REGION_LABELS = (
    ("header", "HEADER"),
    ("nav", "NAVIGATION"),
    ("main", "MAIN CONTENT"),
    ("footer", "FOOTER"),
)


def _schema_block() -> str:
    section_lines = ",\n".join(
        f'    "{name}": "✅ ...\\n⚠️ ...\\n❌ ...\\n✅ ...\\n⚠️ ..."' for name in SECTION_NAMES
    )
    checklist_lines = ",\n".join(
        f'    {{"category": "{category}", "status": "✅ Pass"}}' for category in CHECKLIST_CATEGORIES
    )
    return (
        "{\n"
        '  "score": <integer 0-100>,\n'
        '  "sections": {\n'
        f"{section_lines}\n"
        "  },\n"
        '  "checklist": [\n'
        f"{checklist_lines}\n"
        "  ]\n"
        "}"
    )


def _snapshot_block(snapshot: PageSnapshot) -> str:
    parts = []
    for field, label in _REGION_LABELS:
        content = getattr(snapshot, field) or ""
        parts.append(f"--- {label} ---\n{content.strip() or '(not present on the page)'}")
    return "\n\n".join(parts)


def build_prompt(page_type: str, rubric: str, snapshot: PageSnapshot) -> str:
    statuses = ", ".join(f'"{s}"' for s in CHECKLIST_STATUSES)
    focus = rubric.strip() if rubric and rubric.strip() else "General UX/UI best practices for this kind of page."

    return (
        "You are a senior UX/UI design expert auditing a live web page.\n"
        "Do NOT repeat, quote or echo any of the HTML markup below in your answer.\n"
        f"The page type is: {page_type}.\n"
        f"Focus points for this page type: {focus}\n\n"
        "Respond with a single JSON object and nothing else, using exactly this schema:\n"
        f"{_schema_block()}\n\n"
        "Rules:\n"
        '- "score" is an integer from 0 to 100 rating the overall UX/UI quality.\n'
        f'- "sections" must contain exactly these keys: {", ".join(SECTION_NAMES)}.\n'
        "- Each section value is a string of exactly five lines separated by \\n; "
        "every line starts with one of ✅, ⚠️ or ❌ followed by a short finding.\n"
        f'- "checklist" is a list of objects with "category" and "status"; status is one of {statuses}.\n'
        "- Use straight double quotes only; no markdown, no code fences, no commentary.\n\n"
        "Page snapshot:\n"
        f"{_snapshot_block(snapshot)}\n"
    )
