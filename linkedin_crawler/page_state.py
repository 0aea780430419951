"""
Page-State Detector - classify what the site is currently showing.

Every predicate is a one-shot query against the live DOM; nothing here
remembers earlier results, so callers that wait for a change must poll.
Query errors read as "not present".
"""

import logging
import re

from linkedin_crawler import config
from linkedin_crawler.constants import Gate
from linkedin_crawler.exceptions import CrawlerError

logger = logging.getLogger(__name__)


def _challenge_pattern() -> re.Pattern:
    return re.compile("|".join(re.escape(p) for p in config.CHALLENGE_PHRASES), re.IGNORECASE)


async def _count(page, selector: str) -> int:
    try:
        return await page.count(selector)
    except CrawlerError as e:
        logger.debug(f"Counting '{selector}' failed: {e}")
        return 0


async def _text(page, selector: str) -> str:
    try:
        return await page.text_of(selector)
    except CrawlerError as e:
        logger.debug(f"Reading '{selector}' failed: {e}")
        return ""


async def is_captcha(page) -> bool:
    """A CAPTCHA iframe is embedded in the page."""
    return await _count(page, config.CAPTCHA_IFRAME_SELECTOR) > 0


async def is_checkpoint_challenge(page) -> bool:
    """The whole page is an identity-verification checkpoint."""
    if config.CHALLENGE_PATH_MARKER in (page.url or ""):
        return True
    if not config.CHALLENGE_PHRASES:
        return False
    texts = [await _text(page, selector) for selector in config.CHALLENGE_TEXT_SELECTORS]
    return bool(_challenge_pattern().search(" ".join(texts)))


async def has_two_factor(page) -> bool:
    """A one-time-code input is waiting for the user."""
    return await _count(page, config.TWO_FACTOR_INPUT_SELECTOR) > 0


async def is_authenticated_view(page) -> bool:
    """The global search box is present or we landed on the feed."""
    if config.FEED_PATH_MARKER in (page.url or ""):
        return True
    return await _count(page, config.SEARCH_INPUT_SELECTOR) > 0


async def has_results_container(page, timeout_ms: int | None = None) -> bool:
    """A search results container became visible within timeout_ms."""
    timeout_ms = config.SHORT_SELECTOR_TIMEOUT if timeout_ms is None else timeout_ms
    try:
        await page.wait_for_selector(config.RESULTS_CONTAINER_SELECTOR, timeout_ms)
        return True
    except CrawlerError:
        return False


async def detect_gates(page) -> list[Gate]:
    """All blocking gates currently present, in the order login handles them."""
    gates = []
    if await is_captcha(page):
        gates.append(Gate.CAPTCHA)
    if await is_checkpoint_challenge(page):
        gates.append(Gate.CHECKPOINT_CHALLENGE)
    if await has_two_factor(page):
        gates.append(Gate.TWO_FACTOR)
    return gates


async def classify_page(page) -> Gate:
    """Single label for the page: the first blocking gate, NORMAL or UNKNOWN."""
    if gates := await detect_gates(page):
        return gates[0]
    if await is_authenticated_view(page) or await has_results_container(page):
        return Gate.NORMAL
    return Gate.UNKNOWN
