"""
Invite Sender - click "Connect" on the current results page, up to a cap.

Best effort from top to bottom: a missing button ends the loop and any
page error is logged and swallowed. The caller only ever gets a count.
"""

import asyncio
import logging

from linkedin_crawler import config
from linkedin_crawler.exceptions import CrawlerError
from linkedin_crawler.pacing import INVITE_DELAY, DelayPolicy, Sleep, random_delay

logger = logging.getLogger(__name__)

# Clicks the first enabled button/link whose visible text contains one of the phrases.
_CLICK_CONNECT_JS = """
(phrases) => {
    const wanted = phrases.map((p) => p.toLowerCase());
    const candidates = Array.from(document.querySelectorAll('button, a'));
    const target = candidates.find((el) => {
        if (el.disabled || el.getAttribute('aria-disabled') === 'true') return false;
        const text = (el.innerText || '').trim().toLowerCase();
        return text && wanted.some((p) => text.includes(p));
    });
    if (!target) return false;
    target.scrollIntoView({behavior: 'instant', block: 'center'});
    target.click();
    return true;
}
"""

_CLICK_IF_EXISTS_JS = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    el.click();
    return true;
}
"""


class InviteSender:
    """Sends connection invites from a results page."""

    def __init__(
        self,
        page,
        cap: int | None = None,
        delay: DelayPolicy = INVITE_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        self.page = page
        self.cap = config.INVITE_CAP if cap is None else cap
        self.delay = delay
        self.sleep = sleep

    async def _confirm_without_note(self):
        await self.sleep(config.INVITE_CONFIRM_DELAY)
        try:
            await self.page.evaluate(_CLICK_IF_EXISTS_JS, config.INVITE_CONFIRM_SELECTOR)
        except CrawlerError as e:
            logger.debug(f"No 'send without a note' confirmation: {e}")

    async def send(self) -> int:
        """Send invites until no candidate is left or the cap is reached. Returns the count sent."""
        sent = 0
        while sent < self.cap:
            try:
                clicked = await self.page.evaluate(_CLICK_CONNECT_JS, list(config.INVITE_PHRASES))
            except CrawlerError as e:
                logger.warning(f"Stopped sending invites: {e}")
                break
            if not clicked:
                break

            await self._confirm_without_note()
            sent += 1
            logger.info(f"🤝 Invite {sent}/{self.cap} sent")
            await random_delay(self.delay, sleep=self.sleep)

        logger.info(f"Invites sent: {sent}")
        return sent
