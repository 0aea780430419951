"""
Shared utility functions for the crawler and its scripts.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncGenerator, Awaitable, Optional

from linkedin_crawler.exceptions import DeadlineExceeded

if TYPE_CHECKING:
    from linkedin_crawler.linkedin_client import LinkedInClient

logger = logging.getLogger(__name__)

_QUOTE_REPLACEMENTS = str.maketrans({
    "“": '"', "”": '"', "‟": '"', "〝": '"', "〞": '"',
    "‘": "'", "’": "'", "‛": "'", "‚": "'", "‹": "'", "›": "'",
})


def print_banner(title: str):
    """Print a formatted banner."""
    print(f"\n{'='*80}")
    print(title)
    print(f"{'='*80}\n", flush=True)


def sanitize_quotes(text: str) -> str:
    """Replace typographic quotes with their ASCII equivalents."""
    return text.translate(_QUOTE_REPLACEMENTS)


def mask_args(args: list[str]) -> list[str]:
    """Copy of a command line with the value after --password hidden."""
    masked = list(args)
    for i in range(len(masked) - 1):
        if masked[i] == "--password":
            masked[i + 1] = "********"
    return masked


async def with_timeout(coro: Awaitable[Any], timeout: float, operation_name: str) -> Any:
    """
    Execute a coroutine with a wall-clock budget.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds
        operation_name: Name of operation for error message

    Returns:
        Result of coroutine

    Raises:
        DeadlineExceeded: if the budget runs out; the coroutine is cancelled.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise DeadlineExceeded(f"{operation_name} timeout after {timeout:.0f}s") from e


@asynccontextmanager
async def open_browser_session(headless: Optional[bool] = None) -> AsyncGenerator["LinkedInClient", None]:
    """
    Context manager for setting up and cleaning up a LinkedIn client.

    Launches the browser and always closes it on exit.
    Raises BrowserInitFailure if the browser cannot start.

    Usage:
        async with open_browser_session(headless=True) as client:
            await client.goto(...)
    """
    from linkedin_crawler.linkedin_client import LinkedInClient

    client = LinkedInClient(headless=headless)

    try:
        logger.info("🌐 Setting up browser...")
        await client.setup_browser()
        logger.info("✓ Browser ready")

        yield client

    finally:
        logger.info("🔒 Closing browser...")
        await client.close()
        logger.info("✓ Browser closed")
