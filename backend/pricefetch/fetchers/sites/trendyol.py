"""Trendyol profile."""

import re

from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies import (
    CONFIGURED_SELECTORS,
    INLINE_SCRIPT,
    META_TAGS,
    PRIMARY_SELECTORS,
    STRUCTURED_DATA,
)
from pricefetch.fetchers.utils.user_agents import DESKTOP_CHROME_USER_AGENT

TRENDYOL_CONFIG = SiteConfiguration(
    price_selectors=(
        ".prc-dsc",
        ".product-price-container .prc-dsc",
        "[data-test-id='price-current-price']",
        ".product-detail-price .prc-dsc",
        ".pr-in-w .prc-dsc",
        ".prc-org",
    ),
    fallback_selectors=(
        ".price",
        ".product-price",
        ".current-price",
        "[data-price]",
    ),
    price_patterns=(
        r"(?<![\d.,])(\d{1,3}(?:\.\d{3})*,\d{2})\s*(?:TL|₺)",
        r"(?<![\d.,])(\d{1,3}(?:\.\d{3})+)\s*(?:TL|₺)",
    ),
    headers={
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "tr-TR,tr;q=0.9,en;q=0.8",
    },
    timeout_ms=15000,
    user_agent=DESKTOP_CHROME_USER_AGENT,
    requires_js=True,
    use_renderer=True,
    wait_after_load_ms=3000,
    default_currency="TRY",
)

_TRENDYOL_NUMBERED = re.compile(r"trendyol\.com.*\d")


def is_product_url(url: str) -> bool:
    return "/p/" in url or "/product/" in url or bool(_TRENDYOL_NUMBERED.search(url))


PROFILE = SiteProfile(
    name="Trendyol",
    domains=("trendyol.com",),
    config=TRENDYOL_CONFIG,
    strategies=(
        STRUCTURED_DATA,
        PRIMARY_SELECTORS,
        INLINE_SCRIPT,
        META_TAGS,
        CONFIGURED_SELECTORS,
    ),
    url_validator=is_product_url,
    priority=10,
    description="JSON-LD, Trendyol price selectors and inline page state",
)
