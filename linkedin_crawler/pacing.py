"""Randomized pauses between page turns, scrolls and invites."""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from linkedin_crawler import config

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class DelayPolicy:
    """Uniform random delay between min_sec and max_sec."""

    min_sec: float
    max_sec: float

    def pick(self) -> float:
        return random.uniform(self.min_sec, max(self.min_sec, self.max_sec))


PAGE_TURN_DELAY = DelayPolicy(config.PAGE_DELAY_MIN, config.PAGE_DELAY_MAX)
INVITE_DELAY = DelayPolicy(config.INVITE_DELAY_MIN, config.INVITE_DELAY_MAX)
SCROLL_DELAY = DelayPolicy(config.SCROLL_DELAY_MIN, config.SCROLL_DELAY_MAX)
NO_DELAY = DelayPolicy(0.0, 0.0)


async def random_delay(policy: DelayPolicy = PAGE_TURN_DELAY, sleep: Sleep = asyncio.sleep):
    """Random delay to mimic human behavior."""
    await sleep(policy.pick())
