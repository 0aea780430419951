"""
Result sink - one CSV per run, plus the helpers the web trigger uses to find and preview it.
"""

import logging
from datetime import datetime
from pathlib import Path

import pandas as pd

from linkedin_crawler import config
from linkedin_crawler.exceptions import SinkWriteError
from linkedin_crawler.models import CSV_COLUMNS, ProfileRecord

logger = logging.getLogger(__name__)

CSV_ENCODING = "utf-8-sig"


def build_csv_path(out_dir: str | Path, now: datetime | None = None) -> Path:
    """<out_dir>/linkedin_YYYYMMDD_HHMMSS.csv"""
    timestamp = (now or datetime.now()).strftime(config.CSV_FILENAME_TIMESTAMP)
    return Path(out_dir) / config.CSV_FILENAME_TEMPLATE.format(timestamp=timestamp)


def write_csv(path: str | Path, records: list[ProfileRecord]) -> Path:
    """
    Write records as UTF-8 with BOM, header first, one row per record.

    Raises:
        SinkWriteError: if the file cannot be written.
    """
    path = Path(path)
    df = pd.DataFrame([record.to_row() for record in records], columns=CSV_COLUMNS)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False, encoding=CSV_ENCODING, lineterminator="\n")
    except OSError as e:
        raise SinkWriteError(f"Could not write CSV to {path}: {e}") from e

    logger.info(f"💾 Saved {len(records)} profile(s) to {path}")
    return path


def find_latest_csv(out_dir: str | Path) -> Path | None:
    """Newest linkedin_*.csv in out_dir; the timestamped names sort chronologically."""
    out_dir = Path(out_dir)
    if not out_dir.is_dir():
        return None
    matches = sorted(out_dir.glob(config.CSV_GLOB))
    return matches[-1] if matches else None


def read_csv_preview(path: str | Path, limit: int | None = None) -> list[dict[str, str]]:
    """First `limit` rows of a CSV as dicts, every value a string."""
    limit = config.PREVIEW_ROWS if limit is None else limit
    if limit <= 0:
        return []
    df = pd.read_csv(
        path,
        dtype=str,
        keep_default_na=False,
        encoding=CSV_ENCODING,
        nrows=limit,
    )
    return df.to_dict(orient="records")
