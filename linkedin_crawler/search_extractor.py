"""
Search Extractor - Utilities for extracting profiles from LinkedIn search results.

One script evaluation collects the raw text of every result card; the
heuristics that turn that text into a ProfileRecord live here in Python.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from pathlib import Path
from urllib.parse import unquote, urljoin, urlsplit

from linkedin_crawler import config
from linkedin_crawler.exceptions import CrawlerError, NoResultsOnPage
from linkedin_crawler.models import ProfileRecord
from linkedin_crawler.pacing import SCROLL_DELAY, DelayPolicy, Sleep, random_delay

logger = logging.getLogger(__name__)

# Load JavaScript extractor code
_JS_EXTRACTOR_PATH = Path(__file__).parent / "js_extractors" / "search_cards.js"
_SEARCH_CARDS_JS = _JS_EXTRACTOR_PATH.read_text(encoding="utf-8")

_OFFLINE_STATUS_RE = re.compile(config.OFFLINE_STATUS_PATTERN, re.IGNORECASE)
_DEGREE_RE = re.compile(config.CONNECTION_DEGREE_PATTERN, re.IGNORECASE)
_COMPANY_RE = re.compile(config.COMPANY_CLAUSE_PATTERN, re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

PreExtractHook = Callable[[object], Awaitable[None]]


def clean_text(text: str | None) -> str:
    """Collapse whitespace (including non-breaking spaces) and trim."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_profile_url(href: str | None) -> str | None:
    """
    Normalize a LinkedIn profile URL to scheme + host + path.
    Query string, fragment and trailing slash are dropped.
    Returns None if the link does not point at a profile.
    """
    href = clean_text(href)
    if not href or config.PROFILE_PATH_MARKER not in href:
        return None

    parts = urlsplit(urljoin(config.LINKEDIN_BASE_URL + "/", href))
    if not parts.scheme.startswith("http") or not parts.netloc:
        return None

    path = parts.path.rstrip("/")
    marker_at = path.find(config.PROFILE_PATH_MARKER)
    if marker_at < 0 or not path[marker_at + len(config.PROFILE_PATH_MARKER):]:
        return None
    return f"{parts.scheme}://{parts.netloc}{path}"


def clean_profile_name(text: str | None) -> str:
    """
    Clean and extract profile name from text.
    Drops the offline-status prefix screen readers see, and suffixes like "• 2º".
    """
    if not text:
        return ""

    # Take first line, remove extra whitespace
    name = text.split("\n")[0].strip()
    name = _OFFLINE_STATUS_RE.sub("", name).strip()
    # Remove common suffixes like "• 1st"
    if "•" in name:
        name = name.split("•")[0].strip()
    return clean_text(name)


def title_case_name(text: str) -> str:
    """Title-case a name, keeping Portuguese particles lowercase after the first word."""
    words = text.lower().split()
    cased = []
    for i, word in enumerate(words):
        if i > 0 and word in config.NAME_PARTICLES:
            cased.append(word)
        else:
            cased.append(word[0].upper() + word[1:])
    return " ".join(cased)


def guess_name_from_url(url: str | None) -> str:
    """
    Rebuild a display name from the profile slug.
    /in/daniela-mendes-659a2952 -> "Daniela Mendes" (tokens with digits are site IDs).
    """
    if not url:
        return ""
    slug = unquote(urlsplit(url).path)
    if (idx := slug.find(config.PROFILE_PATH_MARKER)) >= 0:
        slug = slug[idx + len(config.PROFILE_PATH_MARKER):]
    slug = slug.split("/")[0]

    tokens = [
        token.strip()
        for token in slug.split("-")
        if token.strip() and not any(ch.isdigit() for ch in token)
    ]
    return title_case_name(" ".join(tokens))


def looks_like_city(text: str, hints: Iterable[str] | None = None) -> bool:
    """A comma, or a whole-word match against the city/region allow-list."""
    if not text:
        return False
    if "," in text:
        return True
    hints = config.CITY_HINTS if hints is None else hints
    return any(
        re.search(rf"\b{re.escape(hint)}\b", text, re.IGNORECASE) for hint in hints if hint
    )


def pick_location(candidates: Iterable[str], hints: Iterable[str] | None = None) -> str:
    """First candidate that looks like a place and is not a connection-degree label."""
    for candidate in candidates:
        text = clean_text(candidate)
        if not text or _DEGREE_RE.search(text):
            continue
        if looks_like_city(text, hints):
            return text
    return ""


def extract_company(summary: str) -> str:
    """Employer from a trailing "em/na/no/da/do <employer>" clause, or ""."""
    if match := _COMPANY_RE.search(summary or ""):
        return clean_text(match.group(1))
    return ""


def apply_cleanup(records: list[ProfileRecord]) -> list[ProfileRecord]:
    """
    Post-extraction pass: fill empty names from the URL slug and drop a
    location that merely repeats the title.
    """
    for record in records:
        record.name = clean_profile_name(record.name)
        if not record.name:
            record.name = guess_name_from_url(record.url)
        if record.title and record.location and record.title.casefold() == record.location.casefold():
            record.location = ""
    return records


async def scroll_to_materialize(page, policy: DelayPolicy = SCROLL_DELAY, sleep: Sleep = asyncio.sleep):
    """Scroll to the bottom and back so lazily rendered cards exist in the DOM."""
    await page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
    await random_delay(policy, sleep=sleep)
    await page.evaluate("() => window.scrollTo(0, document.body.scrollHeight * 0.8)")
    await random_delay(policy, sleep=sleep)


def make_scroll_hook(policy: DelayPolicy = SCROLL_DELAY, sleep: Sleep = asyncio.sleep) -> PreExtractHook:
    """Bind pacing to scroll_to_materialize for use as a pre-extract hook."""

    async def hook(page):
        await scroll_to_materialize(page, policy=policy, sleep=sleep)

    return hook


class SearchExtractor:
    """Handles extraction of profiles from LinkedIn search results."""

    def __init__(self, page, pre_extract: PreExtractHook | None = None):
        """Initialize with a page capability and an optional pre-extraction hook."""
        self.page = page
        self.pre_extract = pre_extract

    @staticmethod
    def _script_options() -> dict:
        return {
            "cardSelector": config.CARD_SELECTOR,
            "cardFallbackSelector": config.CARD_FALLBACK_SELECTOR,
            "linkSelector": config.PROFILE_LINK_SELECTOR,
            "insightSelector": config.INSIGHT_SELECTOR,
            "nameSelector": config.NAME_SELECTOR,
            "titleSelectors": config.TITLE_SELECTORS,
            "locationSelectors": config.LOCATION_SELECTORS,
            "companySelectors": config.COMPANY_SELECTORS,
            "summarySelector": config.SUMMARY_SELECTOR,
        }

    async def extract_profiles_from_page(self, source_query: str) -> list[ProfileRecord]:
        """
        Extract one ProfileRecord per result card on the current page.

        Cards are deduplicated by normalized URL; the first card wins. All
        records share one captured_at timestamp.

        Raises:
            NoResultsOnPage: if no card survives (empty page, changed UI or a block).
        """
        if self.pre_extract:
            try:
                await self.pre_extract(self.page)
            except CrawlerError as e:
                logger.debug(f"Pre-extraction hook failed: {e}")

        try:
            data = await self.page.evaluate(_SEARCH_CARDS_JS, self._script_options())
        except CrawlerError as e:
            raise NoResultsOnPage(f"Extracting results failed: {e}") from e

        rows = data.get("rows", []) if isinstance(data, dict) else []
        card_count = data.get("cardCount", len(rows)) if isinstance(data, dict) else 0
        captured_at = datetime.now()

        records = []
        seen_urls = set()
        for row in rows:
            url = normalize_profile_url(row.get("href"))
            if not url or url in seen_urls:
                continue
            seen_urls.add(url)

            summary = clean_text(row.get("summary"))
            records.append(
                ProfileRecord(
                    name=clean_profile_name(row.get("name")),
                    url=url,
                    title=clean_text(row.get("title")),
                    company=extract_company(summary) or clean_text(row.get("company")),
                    location=pick_location(row.get("locations") or []),
                    role=summary,
                    source_query=source_query,
                    captured_at=captured_at,
                )
            )

        if not records:
            raise NoResultsOnPage(
                f"No results found on page ({card_count} card container(s); UI changed or blocked?)"
            )

        logger.debug(f"Extracted {len(records)} profile(s) from {card_count} card(s)")
        return records
