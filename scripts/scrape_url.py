"""Manual scrape runner for testing site profiles and strategies.

Runs the same pipeline as POST /scrape for one URL and prints the JSON
envelope the API would return.

Usage:
    python scripts/scrape_url.py https://shop.test/item/42
    python scripts/scrape_url.py https://shop.test/item/42 --mode html
    python scripts/scrape_url.py https://shop.test/item/42 --block-resources
"""

import argparse
import asyncio
import json
import os
import sys

# Add backend to path so we can import product_scraper modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from product_scraper.config import settings
from product_scraper.scrapers.base import Failure, Html
from product_scraper.scrapers.factory import build_strategy_factory
from product_scraper.scrapers.fetcher import BrowserFetcher
from product_scraper.scrapers.pipeline import ScrapePipeline


async def run_scrape(url: str, mode: str, block_resources: bool) -> int:
    """Scrape one URL and print the result envelope.

    Args:
        url: Absolute product page URL
        mode: "product" or "html"
        block_resources: Abort image/stylesheet/font/media requests

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    factory = build_strategy_factory(settings)
    pipeline = ScrapePipeline(
        BrowserFetcher(user_agent=settings.USER_AGENT, headless=settings.BROWSER_HEADLESS)
    )

    print(f"\n{'='*70}")
    print(f"  Scraping {url}")
    print(f"  Mode: {mode}")
    print(f"{'='*70}\n")

    if mode == "html":
        options = factory.fetch_options_for(url)
        if block_resources:
            options = options.with_overrides(block_resources=True)
        result = await pipeline.fetch_html(url, options)
    else:
        resolved = factory.resolve(url)
        if isinstance(resolved, Failure):
            result = resolved
        else:
            print(f"🧭 Strategy: {resolved.strategy.name} (host: {resolved.host})\n")
            options = resolved.fetch_options
            if block_resources:
                options = options.with_overrides(block_resources=True)
            result = await pipeline.run(url, resolved.strategy, options)

    if isinstance(result, Failure):
        print(f"❌ {result.kind.value}: {result.message}\n")
        print(json.dumps({"success": False, "message": result.message}, ensure_ascii=False, indent=2))
        return 1

    if isinstance(result, Html):
        print(f"✅ Fetched {len(result.content):,} characters of HTML\n")
        print(result.content[:2000])
        return 0

    print("✅ Product extracted\n")
    print(json.dumps({"success": True, "data": result.to_dict()}, ensure_ascii=False, indent=2))
    return 0


def main():
    """Parse arguments and run the scrape."""
    parser = argparse.ArgumentParser(
        description="Scrape one product page with the configured site profiles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/scrape_url.py https://shop.test/item/42
  python scripts/scrape_url.py https://shop.test/item/42 --mode html
        """,
    )

    parser.add_argument("url", help="Absolute URL of the product page")

    parser.add_argument(
        "--mode",
        choices=["product", "html"],
        default=settings.DEFAULT_MODE,
        help=f"Extract a product record or return raw HTML (default: {settings.DEFAULT_MODE})",
    )

    parser.add_argument(
        "--block-resources",
        action="store_true",
        help="Abort image, stylesheet, font and media requests",
    )

    args = parser.parse_args()

    sys.exit(asyncio.run(run_scrape(args.url, args.mode, args.block_resources)))


if __name__ == "__main__":
    main()
