"""Manual price fetcher for testing and debugging site profiles.

Runs one fetch through the full orchestrator (resolution, acquisition,
strategy chain, provider fallback) and prints the result.

Usage:
    python scripts/fetch_price.py --url https://www.trendyol.com/x/y-p-123
    python scripts/fetch_price.py --url https://example.com/p/1 --currency USD
    python scripts/fetch_price.py --url https://www.n11.com/urun/abc-1 --analyze
    python scripts/fetch_price.py --url https://example.com/p/1 --no-render
"""

import argparse
import asyncio
import sys
from decimal import Decimal

from pricefetch.config import settings
from pricefetch.core.exceptions import AllProvidersExhaustedError, InvalidInputError
from pricefetch.fetchers.acquirer import MarkupAcquirer
from pricefetch.fetchers.base import FetchRequest
from pricefetch.fetchers.orchestrator import ECOMMERCE_PRODUCT, FetchOrchestrator
from pricefetch.fetchers.register_profiles import register_all_profiles
from pricefetch.fetchers.registry import ProviderRegistry
from pricefetch.fetchers.utils.render_pool import RenderPool


def _print_analysis(orchestrator: FetchOrchestrator, url: str) -> None:
    analysis = orchestrator.analyze(url)
    print(f"\n{'='*70}")
    print("  Routing")
    print(f"{'='*70}")
    print(f"  Domain:        {analysis.domain or '(unparseable)'}")
    print(f"  Best provider: {analysis.best_provider}")
    print(f"  Fetch method:  {analysis.fetch_method}")
    print(f"  Claimed by:    {', '.join(analysis.claiming_providers) or '-'}")
    print(f"  Supported:     {analysis.supported}")
    print(f"{'='*70}\n")


async def fetch_price(url: str, currency: str = None, analyze_only: bool = False, render: bool = True) -> int:
    """Fetch one price and print it.

    Args:
        url: Product page URL
        currency: Optional currency override (e.g., "USD")
        analyze_only: Print routing only, do not fetch
        render: Allow the headless browser for JS-dependent sites

    Returns:
        Process exit code
    """
    registry = register_all_profiles(ProviderRegistry())
    render_pool = None
    if render:
        render_pool = RenderPool(
            size=1,
            settle_ms=settings.RENDER_SETTLE_MS,
            headless=settings.RENDER_HEADLESS,
        )
    acquirer = MarkupAcquirer(render_pool=render_pool)
    orchestrator = FetchOrchestrator(registry, acquirer)

    _print_analysis(orchestrator, url)
    if analyze_only:
        return 0

    params = {"url": url}
    if currency:
        params["currency"] = currency

    try:
        print("🔍 Fetching price...\n")
        sample = await orchestrator.fetch(FetchRequest(source_type=ECOMMERCE_PRODUCT, params=params))
        print(f"✅ Price: {_format_price(sample.value, sample.unit)}")
        print(f"   Observed at: {sample.observed_at.isoformat()}\n")
        return 0
    except InvalidInputError as e:
        print(f"\n❌ Invalid input: {e.message}\n")
        return 2
    except AllProvidersExhaustedError as e:
        print(f"\n❌ {e.message}")
        for attempt in e.attempts:
            print(f"   - {attempt.provider}: {attempt.kind} ({attempt.error.message})")
        print()
        return 1
    finally:
        await acquirer.aclose()
        if render_pool is not None:
            await render_pool.stop()


def _format_price(price: Decimal, currency: str) -> str:
    if currency == "USD":
        return f"${price:,.2f}"
    elif currency == "TRY":
        return f"{price:,.2f} TL"
    else:
        return f"{price:,.2f} {currency}"


def main():
    """Parse arguments and run the fetch."""
    parser = argparse.ArgumentParser(
        description="Fetch a product price through the PriceFetch engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/fetch_price.py --url https://www.trendyol.com/marka/urun-p-123456
  python scripts/fetch_price.py --url https://example.com/p/123 --currency USD
  python scripts/fetch_price.py --url https://www.hepsiburada.com/urun-p-HB0001 --analyze
        """,
    )
    parser.add_argument("--url", required=True, help="Product page URL")
    parser.add_argument("--currency", help="Currency override (default: the site's currency)")
    parser.add_argument("--analyze", action="store_true", help="Only show provider routing")
    parser.add_argument(
        "--no-render",
        action="store_true",
        help="Disable the headless browser (JS-dependent sites fall back to generic)",
    )

    args = parser.parse_args()
    sys.exit(asyncio.run(fetch_price(args.url, args.currency, args.analyze, not args.no_render)))


if __name__ == "__main__":
    main()
