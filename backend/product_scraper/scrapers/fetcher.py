"""Playwright page fetcher with per-request browser lifecycle.

Each call to BrowserFetcher.fetch() starts its own Playwright driver and
Chromium instance, loads one URL and tears everything down before
returning. Nothing is shared between concurrent requests.
"""

from contextlib import AsyncExitStack
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional

import structlog
from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Route,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from product_scraper.scrapers.base import FailureKind, FetchFailure, FetchResult, Html

logger = structlog.get_logger(__name__)


LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

# Sub-resources aborted when resource blocking is on. The document itself is never blocked.
BLOCKED_RESOURCE_TYPES: FrozenSet[str] = frozenset({"image", "stylesheet", "font", "media"})

# Navigation deadlines by target-site sluggishness
TIMEOUT_TIERS: Dict[str, int] = {
    "standard": 45_000,
    "slow": 60_000,
    "very_slow": 90_000,
    "extreme": 120_000,
}

_BODY_HTML_JS = "() => document.body ? document.body.outerHTML : ''"


class WaitCondition(str, Enum):
    """When a navigated page is considered loaded enough to read."""

    NETWORK_IDLE = "networkidle"
    DOM_CONTENT_LOADED = "domcontentloaded"


@dataclass(frozen=True)
class FetchOptions:
    """Navigation, wait and filtering policy for one fetch."""

    wait_until: WaitCondition = WaitCondition.NETWORK_IDLE
    timeout_ms: int = TIMEOUT_TIERS["standard"]
    wait_for_selector: Optional[str] = None
    selector_timeout_ms: int = 20_000
    block_resources: bool = False
    body_only: bool = False
    min_content_length: int = 500

    def with_overrides(self, **overrides) -> "FetchOptions":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "wait_until" in changes:
            changes["wait_until"] = WaitCondition(changes["wait_until"])
        return replace(self, **changes)


async def _abort_non_essential(route: Route) -> None:
    """Route handler aborting heavy sub-resources."""
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class BrowserFetcher:
    """Fetches rendered HTML with an isolated headless Chromium per call.

    Lifecycle of one fetch:
    Launching -> NavigationInProgress -> ContentReady | Failed -> Closed
    The browser is closed and the driver stopped on every exit path,
    including unexpected exceptions and task cancellation.
    """

    def __init__(
        self,
        user_agent: str,
        headless: bool = True,
        playwright_factory: Callable = async_playwright,
    ):
        self._user_agent = user_agent
        self._headless = headless
        self._playwright_factory = playwright_factory

    async def fetch(self, url: str, options: Optional[FetchOptions] = None) -> FetchResult:
        """Load a URL and return its rendered HTML.

        Args:
            url: Absolute URL, validated by the caller
            options: Wait and filtering policy (defaults apply when omitted)

        Returns:
            Html on success, FetchFailure otherwise
        """
        options = options or FetchOptions()
        log = logger.bind(url=url)

        async with AsyncExitStack() as stack:
            log.info("browser_launching", headless=self._headless)
            try:
                playwright = await stack.enter_async_context(self._playwright_factory())
                browser = await playwright.chromium.launch(
                    headless=self._headless,
                    args=LAUNCH_ARGS,
                )
            except Exception as e:
                log.error("browser_launch_failed", error=str(e))
                return FetchFailure(FailureKind.LAUNCH_FAILURE, str(e))

            stack.push_async_callback(self._close_browser, browser, log)

            try:
                result = await self._load(browser, url, options, log)
            except PlaywrightError as e:
                log.error("browser_error", error=str(e))
                result = FetchFailure(FailureKind.NAVIGATION_FAILURE, str(e))

            if isinstance(result, Html):
                log.info("content_ready", length=len(result.content))
            else:
                log.warning("fetch_failed", kind=result.kind.value, detail=result.detail)
            return result

    async def _load(
        self,
        browser: Browser,
        url: str,
        options: FetchOptions,
        log,
    ) -> FetchResult:
        """Navigate, wait and read the document from a launched browser."""
        context = await browser.new_context(
            user_agent=self._user_agent,
            viewport={"width": 1920, "height": 1080},
        )

        if options.block_resources:
            await context.route("**/*", _abort_non_essential)

        page = await context.new_page()

        log.info(
            "navigation_started",
            wait_until=options.wait_until.value,
            timeout_ms=options.timeout_ms,
        )
        try:
            await page.goto(url, wait_until=options.wait_until.value, timeout=options.timeout_ms)
        except PlaywrightTimeoutError:
            return FetchFailure(
                FailureKind.NAVIGATION_TIMEOUT,
                f"no {options.wait_until.value} within {options.timeout_ms}ms",
            )
        except PlaywrightError as e:
            return FetchFailure(FailureKind.NAVIGATION_FAILURE, str(e))

        if options.wait_for_selector:
            try:
                await page.wait_for_selector(
                    options.wait_for_selector,
                    timeout=options.selector_timeout_ms,
                )
            except PlaywrightTimeoutError:
                return FetchFailure(FailureKind.SELECTOR_NOT_FOUND, options.wait_for_selector)

        content = await self._read_content(page, options.body_only)
        if not content or len(content.strip()) < options.min_content_length:
            return FetchFailure(
                FailureKind.EMPTY_CONTENT,
                f"{len(content or '')} characters, minimum is {options.min_content_length}",
            )
        return Html(content)

    @staticmethod
    async def _read_content(page: Page, body_only: bool) -> str:
        """Serialize the full document or just the body subtree."""
        if body_only:
            return await page.evaluate(_BODY_HTML_JS)
        return await page.content()

    @staticmethod
    async def _close_browser(browser: Browser, log) -> None:
        """Close the browser; a failing close is logged and never masks the result."""
        try:
            await browser.close()
        except Exception as e:
            log.warning("browser_close_failed", error=str(e))
        else:
            log.info("browser_closed")
