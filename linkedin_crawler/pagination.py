"""
Paginator - move from one results page to the next.

Running out of pages is a normal way for a crawl to end, so every failure
here comes back as False instead of an exception. The randomized pause
between page turns belongs to the caller.
"""

import logging

from linkedin_crawler import config
from linkedin_crawler.exceptions import CrawlerError

logger = logging.getLogger(__name__)


class Paginator:
    """Clicks the "next page" control of a search results page."""

    def __init__(self, page):
        self.page = page

    async def has_next_page(self) -> bool:
        """Check if a next-page control shows up within NEXT_PAGE_TIMEOUT."""
        try:
            await self.page.wait_for_selector(config.NEXT_PAGE_SELECTOR, config.NEXT_PAGE_TIMEOUT)
            return True
        except CrawlerError as e:
            logger.debug(f"No next-page control: {e}")
            return False

    async def go_to_next_page(self) -> bool:
        """Navigate to the next page by clicking the Next button. Returns True if successful."""
        if not await self.has_next_page():
            logger.info("No more result pages")
            return False

        try:
            await self.page.click(config.NEXT_PAGE_SELECTOR)
            await self.page.wait_for_selector(config.RESULTS_CONTAINER_SELECTOR, config.RESULTS_TIMEOUT)
            return True
        except CrawlerError as e:
            logger.warning(f"Could not turn the page: {e}")
            return False
