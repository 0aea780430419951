"""
LinkedIn People Search Crawler
Logs in, runs a people search, collects the result cards from each page and saves them to CSV.
"""
import argparse
import asyncio
import logging
import os
import sys

from linkedin_crawler import config
from linkedin_crawler.crawler import run_crawl
from linkedin_crawler.exceptions import CrawlerError
from linkedin_crawler.logging_config import setup_logging
from linkedin_crawler.models import CrawlOptions
from linkedin_crawler.utils import print_banner


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="LinkedIn People Search Crawler - Extract profiles from people-search results"
    )
    parser.add_argument(
        "--email",
        type=str,
        default=os.getenv("LINKEDIN_EMAIL", ""),
        help="Account email (default: $LINKEDIN_EMAIL)"
    )
    parser.add_argument(
        "--password",
        type=str,
        default=os.getenv("LINKEDIN_PASSWORD", ""),
        help="Account password (default: $LINKEDIN_PASSWORD)"
    )
    parser.add_argument(
        "--query",
        type=str,
        default="",
        help="Search keywords"
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=config.DEFAULT_MAX_PAGES,
        help=f"Maximum number of result pages to visit, at least 1 (default: {config.DEFAULT_MAX_PAGES})"
    )
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=config.BROWSER_HEADLESS,
        help="Run the browser without a window; use --no-headless to solve CAPTCHAs or challenges by hand"
    )
    parser.add_argument(
        "--send-invites",
        action="store_true",
        help=f"Click 'Connect' on the last visited page (up to {config.INVITE_CAP} invites)"
    )
    parser.add_argument(
        "--out-dir",
        type=str,
        default=config.DEFAULT_OUT_DIR,
        help=f"Output directory for the CSV (default: {config.DEFAULT_OUT_DIR})"
    )
    parser.add_argument(
        "--dump-html",
        action="store_true",
        help=f"Save the first results page HTML to <out-dir>/{config.HTML_DUMP_FILENAME}"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging"
    )
    return parser


async def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    options = CrawlOptions(
        email=args.email,
        password=args.password,
        query=args.query,
        max_pages=args.max_pages,
        headless=args.headless,
        send_invites=args.send_invites,
        out_dir=args.out_dir,
        dump_html=args.dump_html,
    )

    print_banner("LINKEDIN PEOPLE SEARCH CRAWLER")
    print(f"🔎 Query: {options.query}")
    print(f"📄 Max pages: {options.max_pages}")
    print(f"🖥️  Headless: {options.headless}")
    print(f"💾 Output dir: {options.out_dir}", flush=True)

    try:
        result = await run_crawl(options)
    except CrawlerError as e:
        print(f"\n❌ {e}", flush=True)
        return 1

    print_banner("CRAWL COMPLETE!")
    print(f"✅ Profiles collected: {len(result.records)}")
    print(f"📄 Pages visited: {result.pages_visited}")
    if options.send_invites:
        print(f"🤝 Invites sent: {result.invites_sent}")
    print(f"📁 CSV saved to: {result.csv_path}", flush=True)
    return 0


def run():
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
