"""
Tests for the login sequence and its gates.
"""

from unittest.mock import AsyncMock, patch

import pytest

from linkedin_crawler import config
from linkedin_crawler.auth import SessionAuthenticator
from linkedin_crawler.constants import AuthState, Gate
from linkedin_crawler.exceptions import AuthFailure, AuthTimeout, BlockedNonInteractive


def _authenticator(page, clock, headless=True):
    return SessionAuthenticator(page, headless=headless, sleep=clock.sleep, clock=clock)


@pytest.mark.asyncio
async def test_login_normal_page_goes_straight_to_authenticated(fake_page, fake_clock):
    """Test that a page without gates reaches Authenticated without entering any poll loop."""
    auth = _authenticator(fake_page, fake_clock)

    with patch("linkedin_crawler.auth.poll_until", new_callable=AsyncMock) as mock_poll:
        await auth.login("ana@example.com", "secret")

    mock_poll.assert_not_called()
    assert auth.state == AuthState.AUTHENTICATED
    assert auth.history == [
        AuthState.INIT,
        AuthState.CREDENTIALS_SUBMITTED,
        AuthState.AUTHENTICATED,
    ]
    assert [call[1] for call in fake_page.calls_named("goto")] == [
        config.LOGIN_URL,
        config.LINKEDIN_FEED_URL,
    ]
    assert ("fill", config.USERNAME_SELECTOR, "ana@example.com") in fake_page.calls
    assert ("fill", config.PASSWORD_SELECTOR, "secret") in fake_page.calls
    assert ("click", config.SUBMIT_SELECTOR) in fake_page.calls


@pytest.mark.asyncio
async def test_headless_captcha_fails_fast(fake_page, fake_clock):
    """Test that a CAPTCHA in headless mode fails immediately without polling."""
    fake_page.counts[config.CAPTCHA_IFRAME_SELECTOR] = 1
    auth = _authenticator(fake_page, fake_clock, headless=True)

    with patch("linkedin_crawler.auth.poll_until", new_callable=AsyncMock) as mock_poll:
        with pytest.raises(BlockedNonInteractive) as exc_info:
            await auth.login("ana@example.com", "secret")

    mock_poll.assert_not_called()
    assert exc_info.value.gate == Gate.CAPTCHA
    assert auth.history[-2:] == [AuthState.CAPTCHA_BLOCKING, AuthState.FAILED]
    assert config.CAPTCHA_POLL_INTERVAL not in fake_clock.sleeps
    assert ("goto", config.LINKEDIN_FEED_URL) not in fake_page.calls


@pytest.mark.asyncio
async def test_interactive_captcha_waits_until_solved(fake_page, fake_clock):
    """Test that an interactive run polls until the CAPTCHA iframe disappears."""
    fake_page.counts[config.CAPTCHA_IFRAME_SELECTOR] = lambda: 1 if fake_clock.now < 5 else 0
    auth = _authenticator(fake_page, fake_clock, headless=False)

    await auth.login("ana@example.com", "secret")

    assert AuthState.CAPTCHA_BLOCKING in auth.history
    assert auth.state == AuthState.AUTHENTICATED
    assert fake_clock.sleeps.count(config.CAPTCHA_POLL_INTERVAL) == 3


@pytest.mark.asyncio
async def test_interactive_captcha_times_out(fake_page, fake_clock):
    """Test that an unsolved CAPTCHA fails with a timeout after the waiting window."""
    fake_page.counts[config.CAPTCHA_IFRAME_SELECTOR] = 1
    auth = _authenticator(fake_page, fake_clock, headless=False)

    with pytest.raises(AuthTimeout) as exc_info:
        await auth.login("ana@example.com", "secret")

    assert exc_info.value.gate == Gate.CAPTCHA
    assert fake_clock.now >= config.CAPTCHA_WAIT_TIMEOUT
    assert auth.state == AuthState.FAILED


@pytest.mark.asyncio
async def test_headless_challenge_fails_fast(fake_page, fake_clock):
    """Test that a checkpoint challenge in headless mode fails immediately."""
    fake_page.texts[config.CHALLENGE_TEXT_SELECTORS[0]] = "Proteger a sua conta"
    auth = _authenticator(fake_page, fake_clock, headless=True)

    with pytest.raises(BlockedNonInteractive) as exc_info:
        await auth.login("ana@example.com", "secret")

    assert exc_info.value.gate == Gate.CHECKPOINT_CHALLENGE
    assert AuthState.CHALLENGE_BLOCKING in auth.history


@pytest.mark.asyncio
async def test_interactive_challenge_clears_on_authenticated_view(fake_page, fake_clock):
    """Test that the challenge wait ends once the authenticated view appears."""
    fake_page.texts[config.CHALLENGE_TEXT_SELECTORS[0]] = "Proteger a sua conta"
    fake_page.counts[config.SEARCH_INPUT_SELECTOR] = lambda: 1 if fake_clock.now > 3 else 0
    auth = _authenticator(fake_page, fake_clock, headless=False)

    await auth.login("ana@example.com", "secret")

    assert auth.state == AuthState.AUTHENTICATED
    assert AuthState.CHALLENGE_BLOCKING in auth.history
    start_clicks = [
        call for call in fake_page.calls_named("evaluate") if call[2] == config.CHALLENGE_START_SELECTOR
    ]
    assert len(start_clicks) == 1
    assert config.CHALLENGE_START_SETTLE_DELAY in fake_clock.sleeps


@pytest.mark.asyncio
async def test_interactive_challenge_clears_when_heuristic_stops_matching(fake_page, fake_clock):
    """Test that the challenge wait ends once the challenge text is gone, with no search input yet."""
    fake_page.texts[config.CHALLENGE_TEXT_SELECTORS[0]] = lambda: "Proteger a sua conta" if fake_clock.now < 4 else ""
    auth = _authenticator(fake_page, fake_clock, headless=False)

    await auth.login("ana@example.com", "secret")

    assert auth.state == AuthState.AUTHENTICATED
    assert AuthState.CHALLENGE_BLOCKING in auth.history
    assert config.SEARCH_INPUT_SELECTOR not in fake_page.counts
    # checks at 1.6s and 3.1s still see the challenge, 4.6s does not
    assert fake_clock.sleeps.count(config.CHALLENGE_POLL_INTERVAL) == 2


@pytest.mark.asyncio
async def test_interactive_challenge_times_out(fake_page, fake_clock):
    """Test that an unsolved checkpoint challenge fails with a timeout after the waiting window."""
    fake_page.texts[config.CHALLENGE_TEXT_SELECTORS[0]] = "Proteger a sua conta"
    auth = _authenticator(fake_page, fake_clock, headless=False)

    with pytest.raises(AuthTimeout) as exc_info:
        await auth.login("ana@example.com", "secret")

    assert exc_info.value.gate == Gate.CHECKPOINT_CHALLENGE
    assert fake_clock.now >= config.CHALLENGE_WAIT_TIMEOUT
    poll_sleeps = fake_clock.sleeps[2:]
    assert poll_sleeps and set(poll_sleeps) == {config.CHALLENGE_POLL_INTERVAL}
    assert auth.state == AuthState.FAILED


@pytest.mark.asyncio
async def test_two_factor_is_polled_even_headless(fake_page, fake_clock):
    """Test that a one-time-code prompt is waited out in headless mode too."""
    fake_page.counts[config.TWO_FACTOR_INPUT_SELECTOR] = lambda: 1 if fake_clock.now < 3 else 0
    auth = _authenticator(fake_page, fake_clock, headless=True)

    await auth.login("ana@example.com", "secret")

    assert AuthState.TWO_FACTOR_BLOCKING in auth.history
    assert auth.state == AuthState.AUTHENTICATED


@pytest.mark.asyncio
async def test_two_factor_times_out(fake_page, fake_clock):
    """Test that an unanswered two-factor prompt fails with a timeout."""
    fake_page.counts[config.TWO_FACTOR_INPUT_SELECTOR] = 1
    auth = _authenticator(fake_page, fake_clock)

    with pytest.raises(AuthTimeout) as exc_info:
        await auth.login("ana@example.com", "secret")

    assert exc_info.value.gate == Gate.TWO_FACTOR


@pytest.mark.asyncio
async def test_submit_falls_back_to_enter_when_no_form(fake_page, fake_clock):
    """Test the submit fallback chain: click fails, no form, then Enter on the password field."""
    fake_page.failing.add(config.SUBMIT_SELECTOR)
    fake_page.evaluate_handler = lambda expression, arg: False
    auth = _authenticator(fake_page, fake_clock)

    await auth.login("ana@example.com", "secret")

    assert ("press", config.PASSWORD_SELECTOR, "Enter") in fake_page.calls
    assert auth.state == AuthState.AUTHENTICATED


@pytest.mark.asyncio
async def test_submit_uses_form_before_enter(fake_page, fake_clock):
    """Test that a successful form submit skips the Enter keypress."""
    fake_page.failing.add(config.SUBMIT_SELECTOR)
    fake_page.evaluate_handler = lambda expression, arg: True
    auth = _authenticator(fake_page, fake_clock)

    await auth.login("ana@example.com", "secret")

    assert fake_page.calls_named("press") == []


@pytest.mark.asyncio
async def test_fill_failure_aborts_login(fake_page, fake_clock):
    """Test that a failure outside the gates propagates as AuthFailure."""
    fake_page.failing.add(config.USERNAME_SELECTOR)
    auth = _authenticator(fake_page, fake_clock)

    with pytest.raises(AuthFailure, match="Login failed"):
        await auth.login("ana@example.com", "secret")

    assert auth.history == [AuthState.INIT, AuthState.FAILED]
