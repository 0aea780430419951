"""
LinkedIn Client - Core browser automation functionality.

Owns the Playwright lifecycle and exposes the narrow page capability every
other module works against: url, goto, evaluate, count, text_of,
wait_for_selector, click, fill, press and content. Playwright exceptions are
translated into linkedin_crawler.exceptions here so nothing else imports Playwright.
"""
import logging
from typing import Any, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkedin_crawler import config
from linkedin_crawler.exceptions import (
    BrowserInitFailure,
    ElementWaitTimeout,
    NavigationFailure,
    PageActionError,
)

logger = logging.getLogger(__name__)

# HTTP error messages mapping
HTTP_ERROR_MESSAGES = {
    403: " - Access forbidden (may be rate limited or blocked)",
    429: " - Rate limited (too many requests)",
    500: " - Server error",
    503: " - Service unavailable",
}


class LinkedInClient:
    """Playwright browser session behind the page capability interface."""

    def __init__(self, headless: Optional[bool] = None, executable_path: Optional[str] = None):
        self.headless = config.BROWSER_HEADLESS if headless is None else headless
        self.executable_path = executable_path or config.BROWSER_EXECUTABLE
        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    @property
    def url(self) -> str:
        return self.page.url if self.page else ""

    async def goto(self, url: str, wait_until: str = "domcontentloaded"):
        """Navigate to a URL. Raises NavigationFailure on errors or HTTP >= 400."""
        try:
            response = await self.page.goto(
                url, wait_until=wait_until, timeout=config.NAVIGATION_TIMEOUT
            )
        except PlaywrightError as e:
            raise NavigationFailure(f"Navigation to {url} failed: {e}") from e

        if response and response.status >= 400:
            error_msg = f"HTTP {response.status} error when accessing {url}"
            error_msg += HTTP_ERROR_MESSAGES.get(response.status, "")
            raise NavigationFailure(error_msg)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        try:
            return await self.page.evaluate(expression, arg)
        except PlaywrightError as e:
            raise PageActionError(f"Script evaluation failed: {e}") from e

    async def count(self, selector: str) -> int:
        try:
            return await self.page.locator(selector).count()
        except PlaywrightError as e:
            raise PageActionError(f"Counting '{selector}' failed: {e}") from e

    async def text_of(self, selector: str) -> str:
        """Text content of the first match, or an empty string."""
        try:
            locator = self.page.locator(selector)
            if await locator.count() == 0:
                return ""
            return (await locator.first.text_content()) or ""
        except PlaywrightError as e:
            raise PageActionError(f"Reading text of '{selector}' failed: {e}") from e

    async def wait_for_selector(
        self, selector: str, timeout_ms: Optional[int] = None, state: str = "visible"
    ):
        timeout_ms = config.SELECTOR_TIMEOUT if timeout_ms is None else timeout_ms
        try:
            await self.page.wait_for_selector(selector, state=state, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementWaitTimeout(
                f"'{selector}' not {state} after {timeout_ms}ms"
            ) from e
        except PlaywrightError as e:
            raise PageActionError(f"Waiting for '{selector}' failed: {e}") from e

    async def click(self, selector: str, timeout_ms: Optional[int] = None):
        """Scroll the first match into view and click it."""
        timeout_ms = config.SELECTOR_TIMEOUT if timeout_ms is None else timeout_ms
        element = self.page.locator(selector).first
        try:
            await element.scroll_into_view_if_needed(timeout=timeout_ms)
            await element.click(timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementWaitTimeout(f"'{selector}' not clickable after {timeout_ms}ms") from e
        except PlaywrightError as e:
            raise PageActionError(f"Clicking '{selector}' failed: {e}") from e

    async def fill(self, selector: str, value: str):
        try:
            await self.page.locator(selector).first.fill(value, timeout=config.SELECTOR_TIMEOUT)
        except PlaywrightError as e:
            raise PageActionError(f"Filling '{selector}' failed: {e}") from e

    async def press(self, selector: str, key: str):
        try:
            await self.page.locator(selector).first.press(key, timeout=config.SELECTOR_TIMEOUT)
        except PlaywrightError as e:
            raise PageActionError(f"Pressing {key} on '{selector}' failed: {e}") from e

    async def content(self) -> str:
        try:
            return await self.page.content()
        except PlaywrightError as e:
            raise PageActionError(f"Reading page HTML failed: {e}") from e

    async def _safe_close(self, resource, close_method):
        """Safely close a resource during teardown."""
        if resource and close_method:
            try:
                await close_method()
            except Exception as e:
                logger.debug(f"Error closing {type(resource).__name__}: {e}")

    async def setup_browser(self):
        """Launch Chromium and open a blank page. Raises BrowserInitFailure."""
        if self.browser and self.browser.is_connected():
            return

        try:
            self.playwright = await async_playwright().start()

            self.browser = await self.playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=config.BROWSER_ARGS,
            )

            self.context = await self.browser.new_context(
                viewport={
                    "width": config.BROWSER_VIEWPORT_WIDTH,
                    "height": config.BROWSER_VIEWPORT_HEIGHT,
                },
                user_agent=config.USER_AGENT,
                locale=config.BROWSER_LOCALE,
            )

            self.page = await self.context.new_page()

            await self.page.add_init_script("""
                Object.defineProperty(navigator, 'webdriver', {
                    get: () => undefined
                });
            """)
            await self.page.goto("about:blank")
        except PlaywrightError as e:
            await self.close()
            raise BrowserInitFailure(f"Failed to start browser: {e}") from e

        logger.info(f"Browser launched (headless={self.headless})")

    async def close(self):
        """Close browser and cleanup resources."""
        if self.browser:
            await self._safe_close(self.browser, self.browser.close)
        self.browser = None
        if self.playwright:
            await self._safe_close(self.playwright, self.playwright.stop)
        self.playwright = None
        self.context = None
        self.page = None
