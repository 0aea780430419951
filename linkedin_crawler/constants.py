"""
Constants for the LinkedIn people-search crawler.
Centralized enums for page states, login progress and stream events.
"""

from enum import StrEnum


class Gate(StrEnum):
    """Page states the site can put between us and the search results."""

    NORMAL = "normal"
    CAPTCHA = "captcha"
    CHECKPOINT_CHALLENGE = "checkpoint_challenge"
    TWO_FACTOR = "two_factor"
    UNKNOWN = "unknown"


class AuthState(StrEnum):
    """Steps of the login sequence."""

    INIT = "init"
    CREDENTIALS_SUBMITTED = "credentials_submitted"
    CAPTCHA_BLOCKING = "captcha_blocking"
    CHALLENGE_BLOCKING = "challenge_blocking"
    TWO_FACTOR_BLOCKING = "two_factor_blocking"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class EventType(StrEnum):
    """Event kinds streamed by the web trigger."""

    LOG = "log"
    DONE = "done"
