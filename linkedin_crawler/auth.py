"""
Session Authenticator - drive the login form through whatever gates the site shows.

The site may show any subset of CAPTCHA, checkpoint challenge and two-factor
prompts after the credentials are submitted. Each gate is checked once, in
that order, and handled on its own: headless runs fail fast on gates that
need a human, interactive runs poll until the human clears them.
"""

import asyncio
import logging
import time

from linkedin_crawler import config
from linkedin_crawler.constants import AuthState, Gate
from linkedin_crawler.exceptions import (
    AuthFailure,
    AuthTimeout,
    BlockedNonInteractive,
    CrawlerError,
    PageActionError,
)
from linkedin_crawler.page_state import (
    has_two_factor,
    is_authenticated_view,
    is_captcha,
    is_checkpoint_challenge,
)
from linkedin_crawler.polling import poll_until

logger = logging.getLogger(__name__)

_SUBMIT_FORM_JS = """
() => {
    const form = document.querySelector('form');
    if (!form) return false;
    form.submit();
    return true;
}
"""

_CLICK_IF_EXISTS_JS = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    el.scrollIntoView({behavior: 'instant', block: 'center'});
    el.click();
    return true;
}
"""


class SessionAuthenticator:
    """Logs a page into LinkedIn. `history` records every state visited."""

    def __init__(self, page, headless: bool, sleep=asyncio.sleep, clock=time.monotonic):
        self.page = page
        self.headless = headless
        self.sleep = sleep
        self.clock = clock
        self.state = AuthState.INIT
        self.history: list[AuthState] = [AuthState.INIT]

    def _transition(self, state: AuthState):
        logger.debug(f"Login state: {self.state} -> {state}")
        self.state = state
        self.history.append(state)

    async def login(self, email: str, password: str):
        """Run the whole login sequence. Raises AuthFailure (or a subclass)."""
        try:
            await self._submit_credentials(email, password)

            if await is_captcha(self.page):
                await self._wait_out_captcha()
            if await is_checkpoint_challenge(self.page):
                await self._wait_out_challenge()
            if await has_two_factor(self.page):
                await self._wait_out_two_factor()

            await self._confirm_feed()
        except AuthFailure:
            self._transition(AuthState.FAILED)
            raise
        except CrawlerError as e:
            self._transition(AuthState.FAILED)
            raise AuthFailure(f"Login failed: {e}") from e

    async def _submit_credentials(self, email: str, password: str):
        await self.page.goto(config.LOGIN_URL)
        await self.page.wait_for_selector(config.USERNAME_SELECTOR, config.SELECTOR_TIMEOUT)
        await self.page.fill(config.USERNAME_SELECTOR, email)
        await self.page.fill(config.PASSWORD_SELECTOR, password)

        try:
            await self.page.wait_for_selector(config.SUBMIT_SELECTOR, config.SELECTOR_TIMEOUT)
            await self.page.click(config.SUBMIT_SELECTOR)
            await self.sleep(config.SUBMIT_SETTLE_DELAY)
        except CrawlerError as e:
            logger.debug(f"Submit click failed ({e}), falling back")
            await self._submit_fallback()

        self._transition(AuthState.CREDENTIALS_SUBMITTED)

    async def _submit_fallback(self):
        """Submit the form directly, then try Enter on the password field. Best effort."""
        try:
            if await self.page.evaluate(_SUBMIT_FORM_JS):
                return
            logger.debug("No form to submit")
        except CrawlerError as e:
            logger.debug(f"Form submit failed: {e}")

        try:
            await self.page.press(config.PASSWORD_SELECTOR, "Enter")
        except CrawlerError as e:
            logger.debug(f"Enter on password field failed: {e}")

    async def _wait_out_captcha(self):
        self._transition(AuthState.CAPTCHA_BLOCKING)
        if self.headless:
            raise BlockedNonInteractive(
                "CAPTCHA (iframe) detected in headless mode; re-run with --no-headless to solve it manually",
                gate=Gate.CAPTCHA,
            )

        logger.info(f"⏳ CAPTCHA detected. Solve it in the browser. Waiting up to {config.CAPTCHA_WAIT_TIMEOUT:.0f}s...")

        async def captcha_gone() -> bool:
            return not await is_captcha(self.page)

        if not await poll_until(
            captcha_gone,
            config.CAPTCHA_POLL_INTERVAL,
            config.CAPTCHA_WAIT_TIMEOUT,
            description="CAPTCHA to disappear",
            sleep=self.sleep,
            clock=self.clock,
        ):
            raise AuthTimeout("Timed out waiting for the CAPTCHA to be solved", gate=Gate.CAPTCHA)

    async def _wait_out_challenge(self):
        self._transition(AuthState.CHALLENGE_BLOCKING)
        if self.headless:
            raise BlockedNonInteractive(
                "Checkpoint challenge detected in headless mode; re-run with --no-headless to solve it manually",
                gate=Gate.CHECKPOINT_CHALLENGE,
            )

        logger.info(
            f"⏳ Checkpoint challenge detected. Trying to start it; solve it in the browser "
            f"(up to {config.CHALLENGE_WAIT_TIMEOUT:.0f}s)..."
        )
        try:
            await self.page.evaluate(_CLICK_IF_EXISTS_JS, config.CHALLENGE_START_SELECTOR)
        except PageActionError as e:
            logger.debug(f"Could not click the challenge start control: {e}")
        await self.sleep(config.CHALLENGE_START_SETTLE_DELAY)

        async def challenge_cleared() -> bool:
            if not await is_checkpoint_challenge(self.page):
                return True
            return await is_authenticated_view(self.page)

        if not await poll_until(
            challenge_cleared,
            config.CHALLENGE_POLL_INTERVAL,
            config.CHALLENGE_WAIT_TIMEOUT,
            description="checkpoint challenge to clear",
            sleep=self.sleep,
            clock=self.clock,
        ):
            raise AuthTimeout(
                "Timed out waiting for the checkpoint challenge to be resolved",
                gate=Gate.CHECKPOINT_CHALLENGE,
            )

    async def _wait_out_two_factor(self):
        self._transition(AuthState.TWO_FACTOR_BLOCKING)
        logger.info(f"⏳ Two-factor prompt detected. Enter the code. Waiting up to {config.TWO_FACTOR_WAIT_TIMEOUT:.0f}s...")

        async def code_accepted() -> bool:
            return not await has_two_factor(self.page)

        if not await poll_until(
            code_accepted,
            config.TWO_FACTOR_POLL_INTERVAL,
            config.TWO_FACTOR_WAIT_TIMEOUT,
            description="two-factor prompt to disappear",
            sleep=self.sleep,
            clock=self.clock,
        ):
            raise AuthTimeout("Timed out waiting for the two-factor code", gate=Gate.TWO_FACTOR)

    async def _confirm_feed(self):
        await self.page.goto(config.LINKEDIN_FEED_URL)
        await self.page.wait_for_selector("body", config.SELECTOR_TIMEOUT, state="attached")
        self._transition(AuthState.AUTHENTICATED)
