import time

import httpx

from config.logging_config import get_logger, log_external_api_call
from services.ux_audit_service.errors import EnrichmentFailure

logger = get_logger(__name__)

PSI_API_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"


class PageSpeedScorer:
    """Best-effort PageSpeed Insights performance score; any failure yields ``None``."""

    def __init__(self, api_key: str | None, strategy: str = "mobile", timeout_s: float = 15.0):
        self.api_key = api_key
        self.strategy = strategy
        self.timeout_s = timeout_s

    async def score(self, url: str) -> int | None:
        return await fetch_pagespeed_score(url, api_key=self.api_key, strategy=self.strategy, timeout_s=self.timeout_s)


def _performance_score(j: dict) -> int:
    categories = ((j.get("lighthouseResult") or {}).get("categories")) or {}
    value = (categories.get("performance") or {}).get("score")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EnrichmentFailure("performance score missing from PageSpeed response")
    return max(0, min(100, int(round(value * 100))))


async def _request_pagespeed(url: str, api_key: str | None, strategy: str, timeout_s: float) -> int:
    if not api_key:
        raise EnrichmentFailure("no PageSpeed API key configured")

    params = {"url": url, "strategy": strategy, "category": "performance", "key": api_key}
    started = time.time()
    try:
        async with httpx.AsyncClient(timeout=timeout_s) as client:
            r = await client.get(PSI_API_URL, params=params)
    except httpx.HTTPError as e:
        log_external_api_call(logger, "pagespeed", "runPagespeed", time.time() - started, None, error=e)
        raise EnrichmentFailure(f"PageSpeed request failed: {type(e).__name__}") from e

    if r.status_code >= 400:
        log_external_api_call(
            logger, "pagespeed", "runPagespeed", time.time() - started, r.status_code,
            error=f"HTTP {r.status_code}",
        )
        raise EnrichmentFailure(f"PageSpeed API returned HTTP {r.status_code}")

    try:
        j = r.json()
    except ValueError as e:
        log_external_api_call(logger, "pagespeed", "runPagespeed", time.time() - started, r.status_code, error=e)
        raise EnrichmentFailure("PageSpeed response is not valid JSON") from e

    log_external_api_call(logger, "pagespeed", "runPagespeed", time.time() - started, r.status_code)

    if not isinstance(j, dict):
        raise EnrichmentFailure("PageSpeed response is not an object")
    return _performance_score(j)


async def fetch_pagespeed_score(url: str, api_key: str | None, strategy: str = "mobile", timeout_s: float = 15.0) -> int | None:
    try:
        return await _request_pagespeed(url, api_key, strategy, timeout_s)
    except EnrichmentFailure as e:
        logger.warning(
            "PageSpeed score unavailable",
            extra={"kind": e.kind, "reason": str(e), "url": url},
        )
        return None
