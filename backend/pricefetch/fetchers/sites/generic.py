"""Generic e-commerce profile: claims every domain and is always tried last."""

from decimal import Decimal
from urllib.parse import urlsplit

from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies import (
    CONFIGURED_SELECTORS,
    FREE_TEXT,
    META_TAGS,
    MICRODATA,
    STRUCTURED_DATA,
    by_priority,
)

GENERIC_CONFIG = SiteConfiguration(
    price_selectors=(
        ".price",
        ".product-price",
        ".current-price",
        ".sale-price",
        ".regular-price",
        ".final-price",
        ".price-current",
        ".price-now",
        ".price-value",
        "[data-price]",
        "[data-testid*='price']",
        "[data-test-id*='price']",
        "[class*='price']:not([class*='old']):not([class*='was']):not([class*='original'])",
        "[id*='price']:not([id*='old']):not([id*='was'])",
        ".notranslate",
    ),
    fallback_selectors=(
        "[class*='cost']",
        "[class*='amount']",
        "[class*='value']",
        "[id*='cost']",
        "[id*='amount']",
        ".money",
        ".currency",
        ".total",
    ),
    price_patterns=(
        r"(?<![\d.,])(\d{1,3}(?:[.,]\d{3})*[.,]\d{2})(?![\d.,])",
        r"(?<![\d.,])(\d+[.,]\d{2})(?![\d.,])",
        r"(?<![\d.,])(\d{1,3}(?:[.,]\d{3})+)(?![\d.,])",
    ),
    headers={
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Upgrade-Insecure-Requests": "1",
    },
    timeout_ms=10000,
    requires_js=False,
    use_renderer=False,
    wait_after_load_ms=1000,
    default_currency="USD",
    min_price=Decimal("0.01"),
    max_price=Decimal("1000000"),
)


def is_valid_url(url: str) -> bool:
    """Any absolute URL with a scheme and a host."""
    parts = urlsplit(url.strip())
    return bool(parts.scheme and parts.hostname)


PROFILE = SiteProfile(
    name="Generic E-commerce",
    domains=("*",),
    config=GENERIC_CONFIG,
    strategies=by_priority(
        (STRUCTURED_DATA, META_TAGS, CONFIGURED_SELECTORS, MICRODATA, FREE_TEXT)
    ),
    url_validator=is_valid_url,
    priority=1000,
    is_generic=True,
    description="Structured data, meta tags, common selectors, microdata and free text",
)
