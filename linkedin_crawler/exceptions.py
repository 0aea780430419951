"""
Exception hierarchy for the crawler.

Everything raised on purpose derives from CrawlerError so the CLI can turn
any fatal condition into a non-zero exit without catching bare Exception.
"""

from linkedin_crawler.constants import Gate


class CrawlerError(Exception):
    """Base exception for all crawler operations."""


class InvalidInput(CrawlerError):
    """Required run configuration is missing or malformed."""


class BrowserInitFailure(CrawlerError):
    """The browser could not be launched."""


# ── Page capability ──────────────────────────────────────────────

class PageActionError(CrawlerError):
    """A click, fill, key press or script evaluation failed."""


class ElementWaitTimeout(PageActionError):
    """An element did not reach the expected state in time."""


# ── Login ────────────────────────────────────────────────────────

class AuthFailure(CrawlerError):
    """Login could not reach an authenticated state."""

    def __init__(self, message: str, gate: Gate | None = None):
        super().__init__(message)
        self.gate = gate


class BlockedNonInteractive(AuthFailure):
    """A gate needs a human but the browser runs headless."""


class AuthTimeout(AuthFailure):
    """A gate was not resolved within its waiting window."""


# ── Search ───────────────────────────────────────────────────────

class NavigationFailure(CrawlerError):
    """Navigation failed or the server answered with an error status."""


class NoResultsContainer(NavigationFailure):
    """Neither search layout produced a results container."""


class NoResultsOnPage(CrawlerError):
    """No result card survived extraction on the current page."""


# ── Output / run ─────────────────────────────────────────────────

class SinkWriteError(CrawlerError):
    """The output CSV could not be written."""


class DeadlineExceeded(CrawlerError):
    """The whole-run time budget ran out."""
