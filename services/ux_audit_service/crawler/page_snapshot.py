import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError, async_playwright

from services.ux_audit_service.config import Settings
from services.ux_audit_service.errors import SnapshotFailure

logger = logging.getLogger(__name__)

_NOISE_TAGS = ["script", "style", "noscript", "svg", "template", "iframe"]

_REGION_SELECTORS = {
    "header": ("header", {"role": "banner"}),
    "nav": ("nav", {"role": "navigation"}),
    "footer": ("footer", {"role": "contentinfo"}),
    "main": ("main", {"role": "main"}),
}


@dataclass
class PageSnapshot:
    header: str = ""
    nav: str = ""
    footer: str = ""
    main: str = ""

    def is_empty(self) -> bool:
        return not (self.header or self.nav or self.footer or self.main)


def extract_regions(html: str | None, max_chars: int = 15000) -> PageSnapshot:
    if not html:
        return PageSnapshot()
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()

    regions = {}
    for field, (tag_name, role_attrs) in _REGION_SELECTORS.items():
        node = soup.find(tag_name) or soup.find(attrs=role_attrs)
        regions[field] = str(node)[:max_chars] if node is not None else ""
    return PageSnapshot(**regions)


class SnapshotProvider(Protocol):
    name: str

    async def start(self) -> None: ...

    async def fetch(self, url: str) -> PageSnapshot: ...

    async def close(self) -> None: ...


class PlaywrightSnapshotProvider:
    """Renders pages in headless Chromium.

    One browser is shared per process; every ``fetch`` gets its own browser
    context, which is closed on every exit path.
    """

    name = "playwright"

    def __init__(self, user_agent: str, timeout_s: float = 60.0, max_chars: int = 15000):
        self.user_agent = user_agent
        self.timeout_ms = int(timeout_s * 1000)
        self.max_chars = max_chars
        self._playwright = None
        self._browser = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        async with self._lock:
            if self._browser is not None:
                return
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=True,
                args=[
                    "--no-sandbox",
                    "--disable-setuid-sandbox",
                    "--disable-dev-shm-usage",
                ],
            )
            logger.info("Playwright browser launched")

    async def fetch(self, url: str) -> PageSnapshot:
        if self._browser is None:
            await self.start()
        try:
            context = await self._browser.new_context(
                user_agent=self.user_agent,
                viewport={"width": 1366, "height": 768},
                locale="en-US",
            )
        except PlaywrightError as e:
            raise SnapshotFailure(f"could not open browser context: {e}") from e

        try:
            page = await context.new_page()
            await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
            html = await page.content()
        except PlaywrightError as e:
            raise SnapshotFailure(f"navigation to {url} failed: {e}") from e
        finally:
            await context.close()

        return extract_regions(html, self.max_chars)

    async def close(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None


class HttpxSnapshotProvider:
    """Fetches static markup without executing JavaScript."""

    name = "httpx"

    def __init__(self, user_agent: str, timeout_s: float = 60.0, max_chars: int = 15000):
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }
        self.timeout_s = timeout_s
        self.max_chars = max_chars

    async def start(self) -> None:
        return None

    async def fetch(self, url: str) -> PageSnapshot:
        try:
            async with httpx.AsyncClient(follow_redirects=True, headers=self.headers, timeout=self.timeout_s) as client:
                r = await client.get(url)
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SnapshotFailure(f"HTTP {e.response.status_code} fetching {url}") from e
        except httpx.HTTPError as e:
            raise SnapshotFailure(f"request to {url} failed: {e}") from e
        return extract_regions(r.text, self.max_chars)

    async def close(self) -> None:
        return None


def build_snapshot_provider(settings: Settings) -> SnapshotProvider:
    kwargs = {
        "user_agent": settings.user_agent,
        "timeout_s": settings.snapshot_timeout_s,
        "max_chars": settings.snapshot_region_max_chars,
    }
    if settings.render_engine == "httpx":
        return HttpxSnapshotProvider(**kwargs)
    return PlaywrightSnapshotProvider(**kwargs)
