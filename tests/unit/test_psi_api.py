import httpx
import pytest
import respx

from services.ux_audit_service.errors import EnrichmentFailure
from services.ux_audit_service.integrations.psi_api import (
    PSI_API_URL,
    PageSpeedScorer,
    _request_pagespeed,
    fetch_pagespeed_score,
)


@pytest.mark.asyncio
async def test_psi_score_parses_performance_category():
    with respx.mock:
        route = respx.get(PSI_API_URL).respond(
            200,
            json={"lighthouseResult": {"categories": {"performance": {"score": 0.87}}}},
        )

        score = await fetch_pagespeed_score("https://example.com/", api_key="fake")

        assert score == 87
        params = route.calls.last.request.url.params
        assert params["url"] == "https://example.com/"
        assert params["strategy"] == "mobile"
        assert params["key"] == "fake"


@pytest.mark.asyncio
async def test_psi_scorer_uses_configured_strategy():
    with respx.mock:
        route = respx.get(PSI_API_URL).respond(
            200,
            json={"lighthouseResult": {"categories": {"performance": {"score": 1}}}},
        )

        score = await PageSpeedScorer(api_key="fake", strategy="desktop").score("https://example.com/")

        assert score == 100
        assert route.calls.last.request.url.params["strategy"] == "desktop"


@pytest.mark.asyncio
async def test_psi_missing_key_skips_request():
    with respx.mock:
        route = respx.get(PSI_API_URL).respond(200, json={})
        assert await fetch_pagespeed_score("https://example.com/", api_key=None) is None
        assert not route.called


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(429, json={"error": {"message": "Quota exceeded"}}),
        httpx.Response(500, text="oops"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"lighthouseResult": {}}),
        httpx.Response(200, json={"lighthouseResult": {"categories": {"performance": {"score": None}}}}),
        httpx.Response(200, json=[1, 2, 3]),
    ],
)
async def test_psi_failures_degrade_to_none(response):
    with respx.mock:
        respx.get(PSI_API_URL).mock(return_value=response)
        assert await fetch_pagespeed_score("https://example.com/", api_key="fake") is None


@pytest.mark.asyncio
async def test_psi_network_error_degrades_to_none():
    with respx.mock:
        respx.get(PSI_API_URL).mock(side_effect=httpx.ConnectError("boom"))
        assert await fetch_pagespeed_score("https://example.com/", api_key="fake") is None


@pytest.mark.asyncio
async def test_psi_http_error_status_is_reported_directly():
    with respx.mock:
        respx.get(PSI_API_URL).mock(return_value=httpx.Response(403, json={"error": {"message": "forbidden"}}))
        with pytest.raises(EnrichmentFailure) as exc_info:
            await _request_pagespeed("https://example.com/", "fake", "mobile", 5.0)

    assert str(exc_info.value) == "PageSpeed API returned HTTP 403"
    assert exc_info.value.__cause__ is None


@pytest.mark.asyncio
async def test_psi_undecodable_body_chains_parse_error():
    with respx.mock:
        respx.get(PSI_API_URL).mock(return_value=httpx.Response(200, text="<html>not json</html>"))
        with pytest.raises(EnrichmentFailure) as exc_info:
            await _request_pagespeed("https://example.com/", "fake", "mobile", 5.0)

    assert isinstance(exc_info.value.__cause__, ValueError)
