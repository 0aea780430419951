"""
Search Navigator - open the people-search results for a keyword query.

LinkedIn serves different markup depending on how the page was reached, so
the desktop URL is tried first and the mobile layout is the fallback.
"""

import asyncio
import logging
from urllib.parse import quote_plus

from linkedin_crawler import config
from linkedin_crawler.exceptions import CrawlerError, NoResultsContainer

logger = logging.getLogger(__name__)

_DOM_COMPLETE_JS = """
() => new Promise((resolve) => {
    if (document.readyState === 'complete') return resolve(true);
    window.addEventListener('load', () => resolve(true), {once: true});
})
"""


def build_search_urls(query: str) -> tuple[str, str]:
    """(desktop, mobile) people-search URLs for a query."""
    keywords = quote_plus(query)
    return (
        config.SEARCH_URL_TEMPLATE.format(keywords=keywords),
        config.MOBILE_SEARCH_URL_TEMPLATE.format(keywords=keywords),
    )


class SearchNavigator:
    """Loads search results and waits for a results container to show up."""

    def __init__(self, page, sleep=asyncio.sleep):
        self.page = page
        self.sleep = sleep

    async def _load(self, url: str, settle_delay: float):
        await self.page.goto(url)
        await self.page.wait_for_selector("body", config.SELECTOR_TIMEOUT, state="attached")
        await self.page.evaluate(_DOM_COMPLETE_JS)
        await self.sleep(settle_delay)
        await self.page.wait_for_selector(config.RESULTS_CONTAINER_SELECTOR, config.RESULTS_TIMEOUT)

    async def open(self, query: str) -> str:
        """Navigate to the results for `query`. Returns the URL that loaded."""
        desktop_url, mobile_url = build_search_urls(query)

        try:
            await self._load(desktop_url, config.SEARCH_SETTLE_DELAY)
            return desktop_url
        except CrawlerError as e:
            logger.info(f"Desktop results did not load ({e}); trying mobile layout")

        try:
            await self._load(mobile_url, config.MOBILE_SEARCH_SETTLE_DELAY)
            return mobile_url
        except CrawlerError as e:
            raise NoResultsContainer(
                f"No results container for query {query!r} in either layout: {e}"
            ) from e
