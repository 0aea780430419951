"""
Fixed-interval polling for page conditions that a human has to resolve.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


async def poll_until(
    predicate: Callable[[], Awaitable[bool]],
    interval: float,
    timeout: float,
    description: str = "condition",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> bool:
    """
    Check predicate every `interval` seconds until it is true or `timeout` elapses.

    A predicate that raises counts as not satisfied. Returns True when the
    condition was met, False on timeout.
    """
    deadline = clock() + timeout
    checks = 0

    async def check() -> bool:
        nonlocal checks
        checks += 1
        try:
            if await predicate():
                logger.debug(f"{description} met after {checks} check(s)")
                return True
        except Exception as e:
            logger.debug(f"Check {checks} for {description} failed: {e}")
        return False

    while clock() < deadline:
        if await check():
            return True
        await sleep(interval)

    # One last look at the deadline
    if await check():
        return True

    logger.warning(f"Gave up waiting for {description} after {timeout:.0f}s ({checks} checks)")
    return False
