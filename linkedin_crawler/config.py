"""
Configuration constants for the LinkedIn people-search crawler.
Centralized configuration for all modules.
Supports environment variable overrides.
"""

import os


def _get_env_float(key: str, default: float, min_value: float = 0.0) -> float:
    """Get float from environment variable with validation."""
    if (value := os.getenv(key)) is None:
        return default
    try:
        float_value = float(value)
        if float_value < min_value:
            raise ValueError(f"{key} must be >= {min_value}")
        return float_value
    except ValueError as e:
        raise ValueError(f"Invalid value for {key}: {e}") from e


def _get_env_int(key: str, default: int, min_value: int = 0) -> int:
    """Get int from environment variable with validation."""
    if (value := os.getenv(key)) is None:
        return default
    try:
        int_value = int(value)
        if int_value < min_value:
            raise ValueError(f"{key} must be >= {min_value}")
        return int_value
    except ValueError as e:
        raise ValueError(f"Invalid value for {key}: {e}") from e


def _get_env_bool(key: str, default: bool) -> bool:
    """Get bool from environment variable."""
    if (value := os.getenv(key)) is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _get_env_list(key: str, default: tuple[str, ...], sep: str = ";") -> tuple[str, ...]:
    """Get a separator-delimited list from environment variable."""
    if (value := os.getenv(key)) is None:
        return default
    return tuple(item.strip() for item in value.split(sep) if item.strip())


# Output
DEFAULT_OUT_DIR = os.getenv("LINKEDIN_OUT_DIR", "data")
CSV_FILENAME_TEMPLATE = "linkedin_{timestamp}.csv"
CSV_FILENAME_TIMESTAMP = "%Y%m%d_%H%M%S"
CSV_GLOB = "linkedin_*.csv"
CAPTURED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"
HTML_DUMP_FILENAME = "results_page_1.html"
PREVIEW_ROWS = _get_env_int("LINKEDIN_PREVIEW_ROWS", 200, min_value=0)

# URLs
LINKEDIN_BASE_URL = "https://www.linkedin.com"
LOGIN_URL = f"{LINKEDIN_BASE_URL}/checkpoint/lg/sign-in-another-account"
LINKEDIN_FEED_URL = f"{LINKEDIN_BASE_URL}/feed/"
SEARCH_URL_TEMPLATE = f"{LINKEDIN_BASE_URL}/search/results/people/?keywords={{keywords}}"
MOBILE_SEARCH_URL_TEMPLATE = f"{LINKEDIN_BASE_URL}/m/search/results/people/?keywords={{keywords}}"
PROFILE_PATH_MARKER = "/in/"
FEED_PATH_MARKER = "/feed/"
CHALLENGE_PATH_MARKER = "/checkpoint/challenge/"

# Timing delays - Pagination and invites (can be overridden via environment variables)
PAGE_DELAY_MIN = _get_env_float("LINKEDIN_PAGE_DELAY_MIN", 1.5, min_value=0.0)
PAGE_DELAY_MAX = _get_env_float("LINKEDIN_PAGE_DELAY_MAX", 3.0, min_value=0.0)
INVITE_DELAY_MIN = _get_env_float("LINKEDIN_INVITE_DELAY_MIN", 0.9, min_value=0.0)
INVITE_DELAY_MAX = _get_env_float("LINKEDIN_INVITE_DELAY_MAX", 1.8, min_value=0.0)
SCROLL_DELAY_MIN = _get_env_float("LINKEDIN_SCROLL_DELAY_MIN", 0.5, min_value=0.0)
SCROLL_DELAY_MAX = _get_env_float("LINKEDIN_SCROLL_DELAY_MAX", 1.2, min_value=0.0)

# Fixed settle pauses (seconds)
SUBMIT_SETTLE_DELAY = 0.4
CHALLENGE_START_SETTLE_DELAY = 1.2
SEARCH_SETTLE_DELAY = 0.5
MOBILE_SEARCH_SETTLE_DELAY = 0.7
INVITE_CONFIRM_DELAY = 0.4

# Login gates - poll interval / give-up time (seconds)
CAPTCHA_POLL_INTERVAL = 2.0
CAPTCHA_WAIT_TIMEOUT = _get_env_float("LINKEDIN_CAPTCHA_WAIT_TIMEOUT", 180.0, min_value=1.0)
CHALLENGE_POLL_INTERVAL = 1.5
CHALLENGE_WAIT_TIMEOUT = _get_env_float("LINKEDIN_CHALLENGE_WAIT_TIMEOUT", 300.0, min_value=1.0)
TWO_FACTOR_POLL_INTERVAL = 2.0
TWO_FACTOR_WAIT_TIMEOUT = _get_env_float("LINKEDIN_TWO_FACTOR_WAIT_TIMEOUT", 180.0, min_value=1.0)

# Whole-run budget covering login and all pages (seconds)
CRAWL_DEADLINE = _get_env_float("LINKEDIN_CRAWL_DEADLINE", 900.0, min_value=1.0)

# Browser settings (can be overridden via environment variables)
BROWSER_HEADLESS = _get_env_bool("LINKEDIN_BROWSER_HEADLESS", True)
BROWSER_EXECUTABLE = os.getenv("CHROME_PATH") or None
BROWSER_VIEWPORT_WIDTH = _get_env_int("LINKEDIN_BROWSER_VIEWPORT_WIDTH", 1366, min_value=1)
BROWSER_VIEWPORT_HEIGHT = _get_env_int("LINKEDIN_BROWSER_VIEWPORT_HEIGHT", 900, min_value=1)
USER_AGENT = os.getenv(
    "LINKEDIN_USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/125.0 Safari/537.36",
)
BROWSER_LOCALE = os.getenv("LINKEDIN_BROWSER_LOCALE", "pt-BR")
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]

# Timeouts (can be overridden via environment variables, in milliseconds)
NAVIGATION_TIMEOUT = _get_env_int("LINKEDIN_NAVIGATION_TIMEOUT", 60000, min_value=1000)
SELECTOR_TIMEOUT = _get_env_int("LINKEDIN_SELECTOR_TIMEOUT", 15000, min_value=1000)
RESULTS_TIMEOUT = _get_env_int("LINKEDIN_RESULTS_TIMEOUT", 20000, min_value=1000)
NEXT_PAGE_TIMEOUT = _get_env_int("LINKEDIN_NEXT_PAGE_TIMEOUT", 5000, min_value=500)
SHORT_SELECTOR_TIMEOUT = _get_env_int("LINKEDIN_SHORT_SELECTOR_TIMEOUT", 2000, min_value=500)

# Selectors - Login
USERNAME_SELECTOR = "#username"
PASSWORD_SELECTOR = '#password, input[name="session_password"]'
SUBMIT_SELECTOR = 'button[data-litms-control-urn="login-submit"], button[type="submit"]'

# Selectors - Login gates
CAPTCHA_IFRAME_SELECTOR = 'iframe[src*="captcha"], iframe[src*="challenge"]'
TWO_FACTOR_INPUT_SELECTOR = 'input[autocomplete="one-time-code"], input[name*="pin"]'
CHALLENGE_TEXT_SELECTORS = [
    '[data-theme="home.title"], h2.sc-1io4bok-0',
    '[data-theme="home.verifyButton"]',
]
CHALLENGE_PHRASES = _get_env_list(
    "LINKEDIN_CHALLENGE_PHRASES", ("Proteger a sua conta", "Iniciar desafio")
)
CHALLENGE_START_SELECTOR = '[data-theme="home.verifyButton"], button.sc-nkuzb1-0'
SEARCH_INPUT_SELECTOR = 'input[placeholder*="Pesquisar"], input[placeholder*="Search"]'

# Selectors - Search results
RESULTS_CONTAINER_SELECTORS = [
    "main .search-results-container",
    "main ul.reusable-search__entity-result-list",
    "main .reusable-search__entity-result-list",
    'main [data-view-name="search-entity-result-universal-template"]',
    "main [data-chameleon-result-urn]",
]
RESULTS_CONTAINER_SELECTOR = ", ".join(RESULTS_CONTAINER_SELECTORS)
CARD_SELECTOR = "main ul.reusable-search__entity-result-list > li"
CARD_FALLBACK_SELECTOR = (
    'main [data-view-name="search-entity-result-universal-template"], main [data-chameleon-result-urn]'
)
PROFILE_LINK_SELECTOR = 'a[data-test-app-aware-link][href*="/in/"], a[href*="/in/"]'
INSIGHT_SELECTOR = (
    ".entity-result__insights, .reusable-search-simple-insight, "
    ".reusable-search-simple-insight__text-container"
)
NAME_SELECTOR = 'span[aria-hidden="true"]'
# Priority order matters: first non-empty match wins
TITLE_SELECTORS = [
    ".entity-result__primary-subtitle",
    ".artdeco-entity-lockup__subtitle",
    '.linked-area div[dir="ltr"]:nth-of-type(2)',
    ".t-14.t-black.t-normal",
]
LOCATION_SELECTORS = [
    "div.t-14.t-normal",
    ".reusable-search-secondary-subtitle",
    ".entity-result__secondary-subtitle",
]
COMPANY_SELECTORS = [
    ".entity-result__secondary-subtitle",
    ".artdeco-entity-lockup__caption",
]
SUMMARY_SELECTOR = "p.entity-result__summary--2-lines"

# Selectors - Pagination
NEXT_PAGE_LABELS = _get_env_list("LINKEDIN_NEXT_PAGE_LABELS", ("Avançar",))
NEXT_PAGE_SELECTOR = ", ".join(
    f'{tag}[aria-label="{label}"]' for label in NEXT_PAGE_LABELS for tag in ("button", "a")
)

# Selectors - Invites
INVITE_PHRASES = _get_env_list("LINKEDIN_INVITE_PHRASES", ("conectar", "connect"))
INVITE_CONFIRM_SELECTOR = (
    'button[aria-label*="Enviar sem nota"], button[aria-label*="Send without a note"]'
)
INVITE_CAP = _get_env_int("LINKEDIN_INVITE_CAP", 20, min_value=0)

# Extraction heuristics
CITY_HINTS = _get_env_list(
    "LINKEDIN_CITY_HINTS",
    (
        "são paulo",
        "sp",
        "rio de janeiro",
        "rj",
        "lisboa",
        "porto",
        "belo horizonte",
        "curitiba",
        "brasil",
        "brazil",
        "london",
        "new york",
    ),
)
CONNECTION_DEGREE_PATTERN = r"conex[ãa]o.*grau"
OFFLINE_STATUS_PATTERN = r"^O status está off-line"
COMPANY_CLAUSE_PATTERN = r"\b(?:em|do|da|no|na)\s+([^|–-]+)$"
NAME_PARTICLES = ("de", "da", "do", "dos", "das", "e")
SCROLL_BEFORE_EXTRACT = _get_env_bool("LINKEDIN_SCROLL_BEFORE_EXTRACT", True)

# Safety limits (can be overridden via environment variables)
DEFAULT_MAX_PAGES = _get_env_int("LINKEDIN_MAX_PAGES", 1, min_value=1)

# Web trigger
WEB_HOST = os.getenv("LINKEDIN_WEB_HOST", "127.0.0.1")
WEB_PORT = _get_env_int("LINKEDIN_WEB_PORT", 8080, min_value=1)
CRAWLER_BIN = os.getenv("CRAWLER_BIN", "")

# Validate that min delays are <= max delays
if PAGE_DELAY_MIN > PAGE_DELAY_MAX:
    raise ValueError("PAGE_DELAY_MIN must be <= PAGE_DELAY_MAX")
if INVITE_DELAY_MIN > INVITE_DELAY_MAX:
    raise ValueError("INVITE_DELAY_MIN must be <= INVITE_DELAY_MAX")
if SCROLL_DELAY_MIN > SCROLL_DELAY_MAX:
    raise ValueError("SCROLL_DELAY_MIN must be <= SCROLL_DELAY_MAX")
