"""
Tests for the Playwright-backed page capability.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from linkedin_crawler import config
from linkedin_crawler.exceptions import (
    BrowserInitFailure,
    ElementWaitTimeout,
    NavigationFailure,
    PageActionError,
)
from linkedin_crawler.linkedin_client import LinkedInClient


@pytest.mark.asyncio
async def test_goto_success(mock_client):
    mock_client.page.goto = AsyncMock(return_value=MagicMock(status=200))

    await mock_client.goto(config.LINKEDIN_FEED_URL)

    mock_client.page.goto.assert_called_once_with(
        config.LINKEDIN_FEED_URL, wait_until="domcontentloaded", timeout=config.NAVIGATION_TIMEOUT
    )


@pytest.mark.asyncio
async def test_goto_http_error(mock_client):
    """Test that an error status becomes NavigationFailure with a hint."""
    mock_client.page.goto = AsyncMock(return_value=MagicMock(status=429))

    with pytest.raises(NavigationFailure, match="HTTP 429.*Rate limited"):
        await mock_client.goto(config.LINKEDIN_FEED_URL)


@pytest.mark.asyncio
async def test_goto_playwright_error(mock_client):
    mock_client.page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_CONNECTION_RESET"))

    with pytest.raises(NavigationFailure, match="ERR_CONNECTION_RESET"):
        await mock_client.goto(config.LINKEDIN_FEED_URL)


@pytest.mark.asyncio
async def test_wait_for_selector_timeout(mock_client):
    """Test that a Playwright timeout becomes ElementWaitTimeout."""
    mock_client.page.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 2000ms exceeded"))

    with pytest.raises(ElementWaitTimeout, match="#username"):
        await mock_client.wait_for_selector("#username", 2000)

    mock_client.page.wait_for_selector.assert_called_once_with("#username", state="visible", timeout=2000)


@pytest.mark.asyncio
async def test_evaluate_error(mock_client):
    mock_client.page.evaluate = AsyncMock(side_effect=PlaywrightError("Execution context was destroyed"))

    with pytest.raises(PageActionError):
        await mock_client.evaluate("() => 1")


@pytest.mark.asyncio
async def test_content_returns_html(mock_client):
    mock_client.page.content = AsyncMock(return_value="<html><body>results</body></html>")

    assert await mock_client.content() == "<html><body>results</body></html>"


@pytest.mark.asyncio
async def test_content_error(mock_client):
    mock_client.page.content = AsyncMock(side_effect=PlaywrightError("Target closed"))

    with pytest.raises(PageActionError, match="Reading page HTML failed"):
        await mock_client.content()


@pytest.mark.asyncio
async def test_evaluate_passes_argument(mock_client):
    mock_client.page.evaluate = AsyncMock(return_value=True)

    assert await mock_client.evaluate("(s) => !!s", "x") is True
    mock_client.page.evaluate.assert_called_once_with("(s) => !!s", "x")


@pytest.mark.asyncio
async def test_count_and_text_of(mock_client):
    locator = mock_client.page.locator.return_value
    locator.count = AsyncMock(return_value=0)

    assert await mock_client.count("iframe") == 0
    assert await mock_client.text_of("h1") == ""

    locator.count = AsyncMock(return_value=1)
    locator.first.text_content = AsyncMock(return_value="Proteger a sua conta")

    assert await mock_client.text_of("h1") == "Proteger a sua conta"


@pytest.mark.asyncio
async def test_click_scrolls_then_clicks(mock_client):
    element = mock_client.page.locator.return_value.first

    await mock_client.click("button.next")

    element.scroll_into_view_if_needed.assert_called_once()
    element.click.assert_called_once()


@pytest.mark.asyncio
async def test_click_timeout(mock_client):
    element = mock_client.page.locator.return_value.first
    element.click = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout"))

    with pytest.raises(ElementWaitTimeout):
        await mock_client.click("button.next")


@pytest.mark.asyncio
async def test_setup_browser_failure_raises_browser_init_failure():
    """Test that a launch error is translated and resources are released."""
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(side_effect=PlaywrightError("Executable doesn't exist"))
    playwright.stop = AsyncMock()
    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)

    client = LinkedInClient(headless=True)
    with patch("linkedin_crawler.linkedin_client.async_playwright", return_value=starter):
        with pytest.raises(BrowserInitFailure, match="Executable doesn't exist"):
            await client.setup_browser()

    playwright.stop.assert_called_once()
    assert client.page is None


@pytest.mark.asyncio
async def test_close_releases_everything(mock_client):
    browser = mock_client.browser
    playwright = mock_client.playwright

    await mock_client.close()

    browser.close.assert_called_once()
    playwright.stop.assert_called_once()
    assert mock_client.page is None
    assert mock_client.url == ""
