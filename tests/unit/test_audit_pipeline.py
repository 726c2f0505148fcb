import pytest

from services.ux_audit_service.audit_pipeline import normalize_url
from services.ux_audit_service.errors import (
    GenerationFailure,
    InvalidInput,
    MalformedResponse,
    MissingScore,
    SnapshotFailure,
)
from services.ux_audit_service.schemas.audit import AnalyzeRequest
from tests.unit.fakes import (
    CHECKLIST,
    SECTIONS,
    FakeGenerator,
    FakeScorer,
    FakeSnapshotProvider,
    make_pipeline,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("example.com", "https://example.com"),
        ("  example.com/shop  ", "https://example.com/shop"),
        ("https://x", "https://x"),
        ("http://example.com", "http://example.com"),
        ("HTTPS://Example.com", "HTTPS://Example.com"),
        ("localhost:8080", "https://localhost:8080"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize("raw", ["ftp://x", "", "   ", None, "file:///etc/passwd", "https://"])
def test_normalize_url_rejects(raw):
    with pytest.raises(InvalidInput):
        normalize_url(raw)


@pytest.mark.asyncio
async def test_successful_audit_is_persisted():
    pipeline = make_pipeline()

    record = await pipeline.run(AnalyzeRequest(url="example.com", pageType="PLP"))

    assert record.url == "https://example.com"
    assert record.page_type == "PLP"
    assert record.score == 82
    assert record.page_speed == 91
    assert record.sections == SECTIONS
    assert [e.model_dump() for e in record.checklist] == CHECKLIST
    assert record.created_at.tzinfo is not None
    assert pipeline.store.records == [record]
    assert pipeline.snapshot_provider.urls == ["https://example.com"]


@pytest.mark.asyncio
async def test_prompt_carries_page_type_and_snapshot():
    pipeline = make_pipeline()

    await pipeline.run(AnalyzeRequest(url="https://example.com", pageType="Blog"))

    prompt = pipeline.generator.prompts[0]
    assert "The page type is: Blog." in prompt
    assert "<h1>Shop now</h1>" in prompt
    assert pipeline.generator.temperatures == [0.7]


@pytest.mark.asyncio
async def test_page_type_defaults_to_homepage():
    pipeline = make_pipeline()
    record = await pipeline.run(AnalyzeRequest(url="https://example.com"))
    assert record.page_type == "Homepage"


@pytest.mark.asyncio
async def test_unknown_page_type_still_audits():
    pipeline = make_pipeline()
    record = await pipeline.run(AnalyzeRequest(url="https://example.com", pageType="Checkout"))
    assert record.page_type == "Checkout"
    assert "General UX/UI best practices" in pipeline.generator.prompts[0]


@pytest.mark.asyncio
async def test_snapshot_timeout_fails_without_persisting():
    pipeline = make_pipeline(snapshot_provider=FakeSnapshotProvider(delay=5.0), snapshot_timeout_s=0.05)

    with pytest.raises(SnapshotFailure):
        await pipeline.run(AnalyzeRequest(url="https://slow.example"))

    assert pipeline.store.records == []
    assert pipeline.generator.prompts == []


@pytest.mark.asyncio
async def test_snapshot_error_propagates():
    provider = FakeSnapshotProvider(exc=SnapshotFailure("navigation failed"))
    pipeline = make_pipeline(snapshot_provider=provider)

    with pytest.raises(SnapshotFailure):
        await pipeline.run(AnalyzeRequest(url="https://example.com"))
    assert pipeline.store.records == []


@pytest.mark.asyncio
async def test_generation_failure_propagates():
    pipeline = make_pipeline(generator=FakeGenerator(exc=GenerationFailure("quota exceeded")))

    with pytest.raises(GenerationFailure):
        await pipeline.run(AnalyzeRequest(url="https://example.com"))
    assert pipeline.store.records == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply,error",
    [
        ("I'm sorry, I can't audit this page.", MalformedResponse),
        ('Here you go: {"sections": {}, "checklist": []}', MissingScore),
    ],
)
async def test_normalization_failures_are_never_persisted(reply, error):
    pipeline = make_pipeline(generator=FakeGenerator(reply=reply))

    with pytest.raises(error):
        await pipeline.run(AnalyzeRequest(url="https://example.com"))
    assert pipeline.store.records == []


@pytest.mark.asyncio
async def test_speed_scorer_failure_degrades_to_null():
    pipeline = make_pipeline(speed_scorer=FakeScorer(exc=ConnectionError("network down")))

    record = await pipeline.run(AnalyzeRequest(url="https://example.com"))

    assert record.page_speed is None
    assert record.score == 82
    assert record.sections == SECTIONS
    assert pipeline.store.records[0].page_speed is None


@pytest.mark.asyncio
async def test_speed_scorer_returning_none_is_accepted():
    pipeline = make_pipeline(speed_scorer=FakeScorer(value=None))
    record = await pipeline.run(AnalyzeRequest(url="https://example.com"))
    assert record.page_speed is None


@pytest.mark.asyncio
async def test_invalid_url_stops_before_any_downstream_call():
    pipeline = make_pipeline()

    with pytest.raises(InvalidInput):
        await pipeline.run(AnalyzeRequest(url="ftp://x"))

    assert pipeline.snapshot_provider.urls == []
    assert pipeline.generator.prompts == []
