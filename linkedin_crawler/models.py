"""
Data model for the crawler: run options, extracted profile records and run results.
"""

from dataclasses import dataclass, field
from datetime import datetime

from linkedin_crawler import config
from linkedin_crawler.exceptions import InvalidInput
from linkedin_crawler.utils import sanitize_quotes

CSV_COLUMNS = [
    "name",
    "title",
    "company",
    "location",
    "role",
    "url",
    "source_query",
    "captured_at",
]


@dataclass
class ProfileRecord:
    """One search result card flattened into a row."""

    name: str
    url: str
    title: str = ""
    company: str = ""
    location: str = ""
    role: str = ""
    source_query: str = ""
    captured_at: datetime = field(default_factory=datetime.now)

    def to_row(self) -> dict[str, str]:
        """Row for the CSV sink and the web preview, in CSV_COLUMNS order."""
        return {
            "name": self.name,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "role": self.role,
            "url": self.url,
            "source_query": self.source_query,
            "captured_at": self.captured_at.strftime(config.CAPTURED_AT_FORMAT),
        }


@dataclass
class CrawlOptions:
    """Scalar configuration for a single crawl run."""

    email: str
    password: str
    query: str
    max_pages: int = 1
    headless: bool = True
    send_invites: bool = False
    out_dir: str = config.DEFAULT_OUT_DIR
    dump_html: bool = False

    def __post_init__(self):
        self.email = (self.email or "").strip()
        self.query = sanitize_quotes((self.query or "").strip())
        self.max_pages = max(1, int(self.max_pages or 1))
        self.out_dir = self.out_dir or config.DEFAULT_OUT_DIR

    def validate(self):
        """Raise InvalidInput if any required field is empty."""
        missing = [
            name for name in ("email", "password", "query") if not getattr(self, name)
        ]
        if missing:
            raise InvalidInput(f"Missing required option(s): {', '.join(missing)}")


@dataclass
class CrawlResult:
    """What a finished run produced."""

    records: list[ProfileRecord]
    csv_path: str
    pages_visited: int = 0
    invites_sent: int = 0
