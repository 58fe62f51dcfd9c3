"""Pytest configuration and shared fixtures.

The browser and the text generator are replaced by in-memory fakes so
that no test launches Chromium or reaches the network.
"""

from typing import List, Optional

import pytest

from product_scraper.core.exceptions import GenerationError
from product_scraper.scrapers.site_profiles import SelectorSet
from product_scraper.scrapers.utils.generator import TextGenerator


PRODUCT_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Blue Chair | Shop Test</title>
  <meta name="description" content="A comfortable
      blue chair.">
  <meta property="og:image" content="/img/x.jpg">
</head>
<body>
  <div class="product">
    <h1 class="product-title">  Blue
        Chair </h1>
    <span class="product-price">12,500 FCFA</span>
    <div class="product-description">
      Solid wood frame.
      Blue cotton seat.
    </div>
  </div>
  <p>{filler}</p>
</body>
</html>
""".replace("{filler}", "Lorem ipsum dolor sit amet. " * 30)


# ============================================================================
# FAKE PLAYWRIGHT
# ============================================================================

class FakeRequest:
    def __init__(self, resource_type: str):
        self.resource_type = resource_type


class FakeRoute:
    def __init__(self, resource_type: str):
        self.request = FakeRequest(resource_type)
        self.aborted = False
        self.continued = False

    async def abort(self):
        self.aborted = True

    async def continue_(self):
        self.continued = True


class FakePage:
    def __init__(self, driver: "FakePlaywright"):
        self._driver = driver

    async def goto(self, url: str, wait_until: str, timeout: int):
        self._driver.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self._driver.goto_error:
            raise self._driver.goto_error

    async def wait_for_selector(self, selector: str, timeout: int):
        self._driver.selector_waits.append({"selector": selector, "timeout": timeout})
        if self._driver.selector_error:
            raise self._driver.selector_error

    async def content(self) -> str:
        if self._driver.content_error:
            raise self._driver.content_error
        return self._driver.content

    async def evaluate(self, expression: str) -> str:
        self._driver.evaluated.append(expression)
        return self._driver.body_content


class FakeContext:
    def __init__(self, driver: "FakePlaywright"):
        self._driver = driver

    async def route(self, pattern: str, handler):
        self._driver.routes.append((pattern, handler))

    async def new_page(self) -> FakePage:
        return FakePage(self._driver)


class FakeBrowser:
    def __init__(self, driver: "FakePlaywright"):
        self._driver = driver
        self.close_count = 0

    async def new_context(self, **kwargs) -> FakeContext:
        self._driver.context_kwargs.append(kwargs)
        return FakeContext(self._driver)

    async def close(self):
        self.close_count += 1
        if self._driver.close_error:
            raise self._driver.close_error


class FakeChromium:
    def __init__(self, driver: "FakePlaywright"):
        self._driver = driver

    async def launch(self, **kwargs) -> FakeBrowser:
        self._driver.launch_kwargs.append(kwargs)
        if self._driver.launch_error:
            raise self._driver.launch_error
        browser = FakeBrowser(self._driver)
        self._driver.browsers.append(browser)
        return browser


class FakePlaywright:
    """Stands in for ``async_playwright()``; configure failures via attributes."""

    def __init__(self):
        self.chromium = FakeChromium(self)
        self.content = PRODUCT_HTML
        self.body_content = "<body>" + "x" * 600 + "</body>"
        self.launch_error: Optional[BaseException] = None
        self.goto_error: Optional[BaseException] = None
        self.selector_error: Optional[BaseException] = None
        self.content_error: Optional[BaseException] = None
        self.close_error: Optional[BaseException] = None

        self.launch_kwargs: List[dict] = []
        self.context_kwargs: List[dict] = []
        self.goto_calls: List[dict] = []
        self.selector_waits: List[dict] = []
        self.evaluated: List[str] = []
        self.routes: list = []
        self.browsers: List[FakeBrowser] = []
        self.start_count = 0
        self.stop_count = 0

    def __call__(self) -> "FakePlaywright":
        return self

    async def __aenter__(self) -> "FakePlaywright":
        self.start_count += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.stop_count += 1
        return False

    @property
    def browser_close_count(self) -> int:
        return sum(b.close_count for b in self.browsers)


# ============================================================================
# FAKE GENERATOR
# ============================================================================

class FakeGenerator(TextGenerator):
    """Returns a canned response or raises a GenerationError."""

    provider = "fake"

    def __init__(self, response: str = "", error: Optional[str] = None):
        self.response = response
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise GenerationError(self.provider, self.error)
        return self.response


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def fake_playwright() -> FakePlaywright:
    return FakePlaywright()


@pytest.fixture
def product_html() -> str:
    return PRODUCT_HTML


@pytest.fixture
def selector_set() -> SelectorSet:
    return SelectorSet(
        title="h1.product-title",
        price=".product-price",
        image="img.product-image",
        description=".product-description",
    )


@pytest.fixture
def make_generator():
    """Factory fixture building a FakeGenerator."""
    return FakeGenerator
