"""
Pytest configuration and shared fixtures.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from linkedin_crawler.exceptions import ElementWaitTimeout, PageActionError
from linkedin_crawler.models import CrawlOptions


class FakePage:
    """
    In-memory stand-in for the page capability.

    counts/texts map selectors to values (a value may be a callable, evaluated on
    every query, or an exception instance, raised on every query). Selectors in
    `missing` never appear for wait_for_selector; selectors in `failing` raise on
    click/fill/press. Every call is recorded in `calls`.
    """

    def __init__(self, url: str = "about:blank"):
        self.url = url
        self.counts = {}
        self.texts = {}
        self.missing = set()
        self.failing = set()
        self.html = "<html><body></body></html>"
        self.evaluate_handler = None
        self.on_goto = None
        self.on_click = None
        self.calls = []

    @staticmethod
    def _resolve(value):
        if isinstance(value, Exception):
            raise value
        return value() if callable(value) else value

    def calls_named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    async def goto(self, url: str):
        self.calls.append(("goto", url))
        self.url = url
        if self.on_goto:
            self.on_goto(url)

    async def evaluate(self, expression: str, arg=None):
        self.calls.append(("evaluate", expression, arg))
        if self.evaluate_handler:
            return self.evaluate_handler(expression, arg)
        return None

    async def count(self, selector: str) -> int:
        self.calls.append(("count", selector))
        return self._resolve(self.counts.get(selector, 0))

    async def text_of(self, selector: str) -> str:
        self.calls.append(("text_of", selector))
        return self._resolve(self.texts.get(selector, ""))

    async def wait_for_selector(self, selector: str, timeout_ms=None, state: str = "visible"):
        self.calls.append(("wait_for_selector", selector))
        if selector in self.missing:
            raise ElementWaitTimeout(f"'{selector}' not {state} after {timeout_ms}ms")

    async def click(self, selector: str, timeout_ms=None):
        self.calls.append(("click", selector))
        if selector in self.failing:
            raise PageActionError(f"Clicking '{selector}' failed")
        if self.on_click:
            self.on_click(selector)

    async def fill(self, selector: str, value: str):
        self.calls.append(("fill", selector, value))
        if selector in self.failing:
            raise PageActionError(f"Filling '{selector}' failed")

    async def press(self, selector: str, key: str):
        self.calls.append(("press", selector, key))
        if selector in self.failing:
            raise PageActionError(f"Pressing {key} on '{selector}' failed")

    async def content(self) -> str:
        self.calls.append(("content",))
        return self.html


class FakeClock:
    """Monotonic clock whose async sleep advances time instantly."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_page():
    """A page with no gates, no results and every selector present."""
    return FakePage()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def crawl_options(tmp_path):
    return CrawlOptions(
        email="ana@example.com",
        password="secret",
        query="engenheiro de dados",
        max_pages=2,
        headless=True,
        out_dir=str(tmp_path),
    )


@pytest.fixture
def mock_page():
    """Create a mock Playwright page object."""
    page = AsyncMock()
    page.url = "https://www.linkedin.com/feed/"

    # Mock locator
    locator = AsyncMock()
    locator.first = AsyncMock()
    page.locator = MagicMock(return_value=locator)

    # Mock evaluate
    page.evaluate = AsyncMock()

    return page


@pytest.fixture
def mock_client(mock_page):
    """Create a LinkedInClient wired to the mock page."""
    from linkedin_crawler.linkedin_client import LinkedInClient

    client = LinkedInClient()
    client.page = mock_page
    client.context = AsyncMock()
    client.browser = AsyncMock()
    client.playwright = AsyncMock()
    return client
