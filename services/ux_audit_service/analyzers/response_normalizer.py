"""Turn a raw LLM completion into a validated ``AuditResult``.

Steps run in a fixed order and each one is a hard gate:

    raw -> extract -> repair -> parse -> validate -> AuditResult

Any failure raises a ``NormalizationError`` subclass; nothing is retried and no
partially populated result is ever returned.
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

from services.ux_audit_service.errors import InvalidJson, MalformedResponse, MissingScore
from services.ux_audit_service.schemas.audit import AuditResult, ChecklistEntry

logger = logging.getLogger(__name__)

# A newline followed by one of these starts a new bullet line and is preserved.
BULLET_MARKERS: tuple[str, ...] = ("-", "✅", "⚠", "❌")

_DOUBLE_QUOTES = str.maketrans({"“": '"', "”": '"', "„": '"', "″": '"'})
_SINGLE_QUOTES = str.maketrans({"‘": "'", "’": "'", "‚": "'", "′": "'"})


@dataclass(frozen=True)
class RepairRule:
    name: str
    apply: Callable[[str], str]


def straighten_quotes(text: str) -> str:
    return text.translate(_DOUBLE_QUOTES).translate(_SINGLE_QUOTES)


def strip_nul(text: str) -> str:
    return text.replace("\x00", "")


def strip_carriage_returns(text: str) -> str:
    return text.replace("\r", "")


def join_wrapped_lines(text: str) -> str:
    out = []
    for i, ch in enumerate(text):
        if ch == "\n" and not text.startswith(BULLET_MARKERS, i + 1):
            out.append(" ")
        else:
            out.append(ch)
    return "".join(out)


def escape_bullet_newlines(text: str) -> str:
    return text.replace("\n", "\\n")


def trim(text: str) -> str:
    return text.strip()


REPAIR_RULES: tuple[RepairRule, ...] = (
    RepairRule("straighten_quotes", straighten_quotes),
    RepairRule("strip_nul", strip_nul),
    RepairRule("strip_carriage_returns", strip_carriage_returns),
    RepairRule("join_wrapped_lines", join_wrapped_lines),
    RepairRule("escape_bullet_newlines", escape_bullet_newlines),
    RepairRule("trim", trim),
)


def repair(text: str, rules: tuple[RepairRule, ...] = REPAIR_RULES) -> str:
    for rule in rules:
        text = rule.apply(text)
    return text


def extract_json_object(raw: str | None) -> str:
    """Return the span from the first ``{`` to the last ``}`` inclusive."""
    if not raw:
        raise MalformedResponse("empty model response")
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedResponse("no JSON object delimiters in model response", detail=raw[:200])
    return raw[start : end + 1]


def parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidJson(f"model response is not valid JSON: {e.msg}", detail=str(e)) from e


def validate_score(payload: Any) -> int:
    if not isinstance(payload, dict):
        raise MissingScore(f"expected a JSON object, got {type(payload).__name__}")
    if "score" not in payload:
        raise MissingScore("model response has no score")
    score = payload["score"]
    # bool is an int subclass but never a meaningful score
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise MissingScore(f"score is not numeric: {score!r}")
    if not math.isfinite(score):
        raise MissingScore(f"score is not finite: {score!r}")
    return max(0, min(100, int(round(score))))


def coerce_sections(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Dropping non-object sections", extra={"sections_type": type(value).__name__})
        return {}
    sections = {}
    for name, text in value.items():
        if isinstance(text, str):
            sections[str(name)] = text
        elif isinstance(text, list):
            sections[str(name)] = "\n".join(str(line) for line in text)
        else:
            sections[str(name)] = "" if text is None else str(text)
    return sections


def coerce_checklist(value: Any) -> list[ChecklistEntry]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Dropping non-list checklist", extra={"checklist_type": type(value).__name__})
        return []
    entries = []
    for item in value:
        if not isinstance(item, dict):
            logger.warning("Dropping non-object checklist entry", extra={"entry": repr(item)[:100]})
            continue
        data = dict(item)
        data["category"] = str(data.get("category") or "")
        data["status"] = str(data.get("status") or "")
        entries.append(ChecklistEntry(**data))
    return entries


def normalize_response(raw: str | None) -> AuditResult:
    extracted = extract_json_object(raw)
    repaired = repair(extracted)
    payload = parse_json(repaired)
    score = validate_score(payload)
    return AuditResult(
        score=score,
        sections=coerce_sections(payload.get("sections")),
        checklist=coerce_checklist(payload.get("checklist")),
    )
