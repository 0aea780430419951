"""
Crawler - one end-to-end run: log in, search, walk the result pages, optionally
send invites, write the CSV.
"""

import asyncio
import logging
import time
from pathlib import Path

from linkedin_crawler import config
from linkedin_crawler.auth import SessionAuthenticator
from linkedin_crawler.exceptions import CrawlerError, NoResultsOnPage, SinkWriteError
from linkedin_crawler.invite_sender import InviteSender
from linkedin_crawler.models import CrawlOptions, CrawlResult, ProfileRecord
from linkedin_crawler.pacing import INVITE_DELAY, PAGE_TURN_DELAY, DelayPolicy, Sleep, random_delay
from linkedin_crawler.page_state import classify_page
from linkedin_crawler.pagination import Paginator
from linkedin_crawler.search_extractor import (
    PreExtractHook,
    SearchExtractor,
    apply_cleanup,
    make_scroll_hook,
)
from linkedin_crawler.search_navigator import SearchNavigator
from linkedin_crawler.sink import build_csv_path, write_csv
from linkedin_crawler.utils import open_browser_session, with_timeout

logger = logging.getLogger(__name__)


class Crawler:
    """Drives one browser page through a whole crawl."""

    def __init__(
        self,
        page,
        options: CrawlOptions,
        sleep: Sleep = asyncio.sleep,
        clock=time.monotonic,
        page_delay: DelayPolicy = PAGE_TURN_DELAY,
        invite_delay: DelayPolicy = INVITE_DELAY,
        pre_extract: PreExtractHook | None = None,
    ):
        self.page = page
        self.options = options
        self.sleep = sleep
        self.clock = clock
        self.page_delay = page_delay
        self.invite_delay = invite_delay
        self.pre_extract = pre_extract
        self.records: list[ProfileRecord] = []
        self.seen_urls: set[str] = set()

    def _merge(self, page_num: int, page_records: list[ProfileRecord]):
        """Append records whose URL has not been seen earlier in the run."""
        new_count = 0
        duplicate_count = 0
        for record in page_records:
            if record.url in self.seen_urls:
                duplicate_count += 1
                continue
            self.seen_urls.add(record.url)
            self.records.append(record)
            new_count += 1

        logger.info(
            f"📊 Page {page_num}: {len(page_records)} on page, {new_count} new, "
            f"{duplicate_count} duplicate(s) skipped, {len(self.records)} collected so far"
        )

    async def _dump_html(self):
        path = Path(self.options.out_dir) / config.HTML_DUMP_FILENAME
        try:
            html = await self.page.content()
            path.write_text(html or "", encoding="utf-8")
            logger.info(f"📝 Results HTML saved to {path}")
        except (CrawlerError, OSError) as e:
            logger.warning(f"Could not dump results HTML: {e}")

    async def _extract_page(self, extractor: SearchExtractor, page_num: int) -> list[ProfileRecord]:
        try:
            return apply_cleanup(await extractor.extract_profiles_from_page(self.options.query))
        except NoResultsOnPage as e:
            state = await classify_page(self.page)
            logger.warning(f"⚠ Page {page_num}: {e} (page state: {state})")
            return []

    async def run(self) -> CrawlResult:
        """
        Run the crawl on an already open page.

        Raises:
            AuthFailure, NavigationFailure, SinkWriteError: fatal for the run.
        """
        options = self.options

        logger.info("🔐 Logging in...")
        authenticator = SessionAuthenticator(
            self.page, options.headless, sleep=self.sleep, clock=self.clock
        )
        await authenticator.login(options.email, options.password)
        logger.info("✓ Logged in")

        logger.info(f"🔍 Searching for: {options.query}")
        search_url = await SearchNavigator(self.page, sleep=self.sleep).open(options.query)
        logger.info(f"✓ Results loaded: {search_url}")

        if options.dump_html:
            await self._dump_html()

        extractor = SearchExtractor(self.page, pre_extract=self.pre_extract)
        paginator = Paginator(self.page)
        pages_visited = 0

        for page_num in range(1, options.max_pages + 1):
            pages_visited = page_num
            logger.info(f"📄 Page {page_num}/{options.max_pages}")
            self._merge(page_num, await self._extract_page(extractor, page_num))

            if page_num >= options.max_pages:
                logger.info(f"Reached page limit ({options.max_pages})")
                break
            if not await paginator.go_to_next_page():
                break
            await random_delay(self.page_delay, sleep=self.sleep)

        invites_sent = 0
        if options.send_invites:
            logger.info("🤝 Sending invites...")
            invites_sent = await InviteSender(
                self.page, delay=self.invite_delay, sleep=self.sleep
            ).send()

        csv_path = write_csv(build_csv_path(options.out_dir), self.records)
        return CrawlResult(
            records=list(self.records),
            csv_path=str(csv_path),
            pages_visited=pages_visited,
            invites_sent=invites_sent,
        )


async def run_crawl(options: CrawlOptions) -> CrawlResult:
    """
    Validate options, open a browser and crawl within CRAWL_DEADLINE.

    Raises:
        InvalidInput: before any browser is launched.
        DeadlineExceeded: if the whole run takes longer than CRAWL_DEADLINE.
        CrawlerError: any other fatal condition.
    """
    options.validate()
    try:
        Path(options.out_dir).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SinkWriteError(f"Could not create output directory {options.out_dir}: {e}") from e

    async def _session() -> CrawlResult:
        async with open_browser_session(headless=options.headless) as client:
            pre_extract = make_scroll_hook() if config.SCROLL_BEFORE_EXTRACT else None
            return await Crawler(client, options, pre_extract=pre_extract).run()

    return await with_timeout(_session(), config.CRAWL_DEADLINE, "Crawl")
