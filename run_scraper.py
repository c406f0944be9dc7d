#!/usr/bin/env python3
"""
CLI script to fetch site content through the cached service.

Prints each requested category as JSON (camelCase keys, as stored in the
cache). Reads VIDYAPITH_CACHE_DIR and VIDYAPITH_LOG_LEVEL from the
environment or a .env file.

Usage:
    python run_scraper.py                       # every category
    python run_scraper.py events donate         # selected categories
    python run_scraper.py contact --force-refresh
    python run_scraper.py --daily-refresh contact
    python run_scraper.py --state               # cache state per category
    python run_scraper.py calendar -o calendar.json
"""

import argparse
import json
import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from vidyapith_content.config import CATEGORIES
from vidyapith_content.content_service import ContentService
from vidyapith_content.daily_refresh import DailyRefresh
from vidyapith_content.exceptions import ContentLoadError
from vidyapith_content.logger import setup_logger
from vidyapith_content.storage import FileStore


def main():
    parser = argparse.ArgumentParser(description="Fetch vidyapith.org content as JSON")
    parser.add_argument(
        "categories",
        nargs="*",
        help=f"Categories to fetch (default: all). One of: {', '.join(CATEGORIES)}"
    )
    parser.add_argument("--force-refresh", "-f", action="store_true", help="Ignore fresh cache entries")
    parser.add_argument("--daily-refresh", "-d", action="store_true",
                        help="Refresh only categories not refreshed in the last 24 hours")
    parser.add_argument("--state", "-s", action="store_true", help="Print cache state, fetch nothing")
    parser.add_argument("--output", "-o", help="Output JSON file")
    args = parser.parse_args()

    unknown = [c for c in args.categories if c not in CATEGORIES]
    if unknown:
        parser.error(f"unknown categories: {', '.join(unknown)}")

    setup_logger(level=os.environ.get("VIDYAPITH_LOG_LEVEL", "INFO"))

    store = FileStore(os.environ.get("VIDYAPITH_CACHE_DIR") or None)
    service = ContentService(store=store)
    categories = args.categories or list(CATEGORIES)

    if args.state:
        for category in categories:
            print(f"{category:20} {service.cache_state(category).value}")
        return

    results = {}
    refresher = DailyRefresh(service)

    try:
        for category in categories:
            print(f"Fetching: {category}")

            if args.daily_refresh:
                refreshed = refresher.refresh_if_due(category)
                print(f"  {'✓ refreshed' if refreshed else '- not refreshed'}")
                continue

            try:
                record = service.get_content(category, force_refresh=args.force_refresh)
            except ContentLoadError as e:
                results[category] = e.to_response()
                print(f"  ✗ Error: {e.message}")
                continue

            results[category] = json.loads(record.to_json())
            print(f"  ✓ fetched at {record.fetched_at.isoformat()}")
    finally:
        service.close()

    if not results:
        return

    # ensure_ascii=False keeps names like "Shivañanda" readable
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}")
    else:
        print("\n" + output)


if __name__ == "__main__":
    main()
