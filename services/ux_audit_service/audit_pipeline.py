import asyncio
import re
import time
import uuid
from datetime import datetime, timezone
from typing import Protocol
from urllib.parse import urlparse

from config.logging_config import get_logger
from services.ux_audit_service.analyzers.prompt_builder import build_prompt
from services.ux_audit_service.analyzers.response_normalizer import normalize_response
from services.ux_audit_service.analyzers.rubric import select_rubric
from services.ux_audit_service.crawler.page_snapshot import PageSnapshot, SnapshotProvider
from services.ux_audit_service.errors import InvalidInput, SnapshotFailure
from services.ux_audit_service.schemas.audit import AnalyzeRequest, AuditRecord

logger = get_logger(__name__)

_ANY_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)


class TextGenerator(Protocol):
    async def submit(self, prompt: str, temperature: float | None = None) -> str: ...


class SpeedScorer(Protocol):
    async def score(self, url: str) -> int | None: ...


class RecordStore(Protocol):
    async def save(self, record: AuditRecord) -> None: ...


def normalize_url(url: str | None) -> str:
    """Prepend ``https://`` to scheme-less input; reject anything that is not http(s)."""
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidInput("url is required")
    if not _ANY_SCHEME_RE.match(candidate):
        candidate = "https://" + candidate
    parsed = urlparse(candidate)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise InvalidInput(f"invalid url: {url!r}")
    return candidate


class UxAuditPipeline:
    def __init__(
        self,
        snapshot_provider: SnapshotProvider,
        generator: TextGenerator,
        speed_scorer: SpeedScorer,
        store: RecordStore,
        snapshot_timeout_s: float = 60.0,
        temperature: float | None = None,
    ):
        self.snapshot_provider = snapshot_provider
        self.generator = generator
        self.speed_scorer = speed_scorer
        self.store = store
        self.snapshot_timeout_s = snapshot_timeout_s
        self.temperature = temperature

    async def _snapshot(self, url: str) -> PageSnapshot:
        try:
            return await asyncio.wait_for(self.snapshot_provider.fetch(url), timeout=self.snapshot_timeout_s)
        except asyncio.TimeoutError as e:
            raise SnapshotFailure(f"snapshot of {url} exceeded {self.snapshot_timeout_s}s") from e

    async def _page_speed(self, url: str) -> int | None:
        try:
            return await self.speed_scorer.score(url)
        except Exception as e:
            logger.warning("Speed scorer raised; continuing without page speed", extra={"url": url, "error": str(e)})
            return None

    async def run(self, request: AnalyzeRequest) -> AuditRecord:
        url = normalize_url(request.url)
        audit_id = str(uuid.uuid4())
        started = time.time()
        logger.info("Audit started", extra={"audit_id": audit_id, "url": url, "page_type": request.page_type})

        snapshot = await self._snapshot(url)
        if snapshot.is_empty():
            logger.warning("Snapshot has no recognised page regions", extra={"audit_id": audit_id, "url": url})

        prompt = build_prompt(request.page_type, select_rubric(request.page_type), snapshot)
        raw = await self.generator.submit(prompt, self.temperature)
        result = normalize_response(raw)

        page_speed = await self._page_speed(url)

        record = AuditRecord(
            audit_id=audit_id,
            url=url,
            page_type=request.page_type,
            score=result.score,
            page_speed=page_speed,
            sections=result.sections,
            checklist=result.checklist,
            created_at=datetime.now(timezone.utc),
        )
        await self.store.save(record)

        logger.info(
            "Audit completed",
            extra={
                "audit_id": audit_id,
                "url": url,
                "score": record.score,
                "page_speed": record.page_speed,
                "duration_seconds": round(time.time() - started, 2),
            },
        )
        return record
