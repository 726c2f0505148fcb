import json

import pytest

from services.ux_audit_service.analyzers.response_normalizer import extract_json_object, normalize_response
from services.ux_audit_service.errors import (
    InvalidJson,
    MalformedResponse,
    MissingScore,
    NormalizationError,
)
from services.ux_audit_service.schemas.audit import SECTION_NAMES

BULLETS = "✅ Clear labels\n⚠️ Search is hidden\n❌ No breadcrumbs\n✅ Sticky header\n⚠️ Long mega menu"


def _payload(score=82):
    return {
        "score": score,
        "sections": {name: BULLETS for name in SECTION_NAMES},
        "checklist": [
            {"category": "Navigation clarity and consistency", "status": "✅ Pass"},
            {"category": "Accessibility", "status": "⚠️ Needs Improvement"},
            {"category": "Page performance and speed", "status": "❌ Fail"},
        ],
    }


def test_strips_surrounding_prose():
    payload = _payload()
    raw = f"Sure! Here is the audit you asked for:\n{json.dumps(payload)}\nLet me know if you need more."

    result = normalize_response(raw)

    assert result.score == 82
    assert result.page_speed is None
    assert result.sections == payload["sections"]
    assert [e.model_dump() for e in result.checklist] == payload["checklist"]


def test_typographic_quotes_are_repaired():
    raw = "{“score”: 74, “sections”: {“Recommendations”: “✅ It’s easy to find the cart”}, “checklist”: []}"
    with pytest.raises(json.JSONDecodeError):
        json.loads(raw)

    result = normalize_response(raw)

    assert result.score == 74
    assert result.sections["Recommendations"] == "✅ It's easy to find the cart"
    assert result.checklist == []


def test_curly_quotes_inside_straight_quoted_value_break_the_json():
    # Every typographic double quote is straightened, including ones nested in a value.
    raw = '{"score": 74, "sections": {"Recommendations": "✅ Rename the “Go” button"}}'
    assert json.loads(raw)["score"] == 74

    with pytest.raises(InvalidJson):
        normalize_response(raw)


def test_raw_newlines_before_bullets_are_preserved():
    raw = (
        "{\n"
        '  "score": 65,\n'
        '  "sections": {\n'
        '    "Mobile Experience": "✅ Tap targets are\nlarge enough\n⚠️ Menu hides search\n'
        "❌ Popup blocks content\n✅ Fonts scale well\n⚠️ Carousel is slow\"\n"
        "  },\n"
        '  "checklist": []\n'
        "}"
    )

    result = normalize_response(raw)

    lines = result.sections["Mobile Experience"].split("\n")
    assert len(lines) == 5
    assert lines[0] == "✅ Tap targets are large enough"
    assert lines[2] == "❌ Popup blocks content"
    assert all(line[0] in "✅⚠❌" for line in lines)


def test_crlf_and_nul_characters_are_tolerated():
    raw = '{"score": 70,\r\n"sections": {}\x00,\r\n"checklist": []}'
    assert normalize_response(raw).score == 70


@pytest.mark.parametrize(
    "raw",
    [
        "",
        None,
        "I could not analyse this page.",
        "score: 80 }",
        "{ score: 80",
        "} reversed {",
    ],
)
def test_missing_object_delimiters_is_malformed(raw):
    with pytest.raises(MalformedResponse):
        normalize_response(raw)


def test_extract_takes_first_open_and_last_close_brace():
    assert extract_json_object('x {"a": {"b": 1}} y } z') == '{"a": {"b": 1}} y }'


def test_unparseable_object_is_invalid_json():
    with pytest.raises(InvalidJson) as exc_info:
        normalize_response('Result: {"score": 80, "sections": }')

    assert isinstance(exc_info.value, NormalizationError)
    assert "Expecting value" in str(exc_info.value)


@pytest.mark.parametrize(
    "raw",
    [
        '{"sections": {}, "checklist": []}',
        '{"score": null}',
        '{"score": "82"}',
        '{"score": "high"}',
        '{"score": true}',
        '{"score": [82]}',
        '{"score": NaN}',
        '{"score": Infinity}',
        '{"score": -Infinity}',
        '{"score": 1e400}',
        "{}",
    ],
)
def test_missing_or_non_numeric_score_fails(raw):
    with pytest.raises(MissingScore):
        normalize_response(raw)


@pytest.mark.parametrize("score,expected", [(87.6, 88), (0, 0), (100, 100), (140, 100), (-5, 0)])
def test_numeric_scores_are_rounded_and_clamped(score, expected):
    assert normalize_response(json.dumps({"score": score})).score == expected


def test_optional_structure_defaults_to_empty():
    result = normalize_response('{"score": 55}')
    assert result.sections == {}
    assert result.checklist == []


def test_non_conforming_containers_are_coerced():
    raw = json.dumps(
        {
            "score": 60,
            "sections": ["✅ not a mapping"],
            "checklist": [{"category": "CTA clarity and visibility"}, "✅ Pass", 3],
        }
    )

    result = normalize_response(raw)

    assert result.sections == {}
    assert len(result.checklist) == 1
    assert result.checklist[0].category == "CTA clarity and visibility"
    assert result.checklist[0].status == ""


def test_section_values_are_stringified():
    raw = json.dumps({"score": 60, "sections": {"Recommendations": ["✅ a", "❌ b"], "Branding & Trust": None}})

    result = normalize_response(raw)

    assert result.sections["Recommendations"] == "✅ a\n❌ b"
    assert result.sections["Branding & Trust"] == ""


def test_bullets_are_not_revalidated():
    raw = json.dumps({"score": 90, "sections": {"Recommendations": "only one line, no glyph"}})
    assert normalize_response(raw).sections["Recommendations"] == "only one line, no glyph"
