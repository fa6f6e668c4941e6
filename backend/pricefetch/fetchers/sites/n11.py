"""N11 profile."""

import re
from decimal import Decimal
from typing import Optional

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies import (
    CONFIGURED_SELECTORS,
    FREE_TEXT,
    META_TAGS,
    STRUCTURED_DATA,
    Strategy,
)
from pricefetch.fetchers.utils.markup import own_text
from pricefetch.fetchers.utils.normalizer import PriceNormalizer
from pricefetch.fetchers.utils.user_agents import DESKTOP_CHROME_USER_AGENT

N11_CONFIG = SiteConfiguration(
    price_selectors=(
        ".newPrice ins",
        ".priceContainer .newPrice",
        ".urunPriceClass",
        ".currentPrice",
        "[data-price]",
        ".price",
        ".productPrice",
        ".salePrice",
    ),
    fallback_selectors=(
        ".price-container",
        ".product-price",
        ".sale-price",
        ".current-price",
        "[class*='price']",
        "[class*='fiyat']",
    ),
    price_patterns=(
        r"(?<![\d.,])(\d{1,3}(?:\.\d{3})*,\d{2})",
        r"(?<![\d.,])(\d{1,3}(?:\.\d{3})+)(?=\s*TL)",
        r"(?<![\d.,])(\d+)(?=\s*TL)",
    ),
    headers={
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "tr-TR,tr;q=0.9,en-US;q=0.8,en;q=0.7",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
    },
    timeout_ms=15000,
    user_agent=DESKTOP_CHROME_USER_AGENT,
    requires_js=True,
    use_renderer=True,
    wait_after_load_ms=3000,
    default_currency="TRY",
)


def new_price_block(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """N11 ``.newPrice`` block: ``ins[content]``, then ``ins`` text, then the block's own text."""
    for block in context.document.select(".newPrice"):
        ins = block.select_one("ins")
        candidates = []
        if ins is not None:
            candidates.extend([ins.get("content"), own_text(ins)])
        candidates.append(own_text(block))

        for raw in candidates:
            value = PriceNormalizer.try_normalize(raw, config.price_patterns)
            if config.accepts(value):
                return value
    return None


NEW_PRICE_BLOCK = Strategy("n11_new_price", new_price_block, priority=25)

_N11_NUMBERED = re.compile(r"n11\.com.*\d")


def is_product_url(url: str) -> bool:
    return "n11.com" in url and ("/urun/" in url or bool(_N11_NUMBERED.search(url)))


PROFILE = SiteProfile(
    name="N11",
    domains=("n11.com",),
    config=N11_CONFIG,
    strategies=(
        NEW_PRICE_BLOCK,
        CONFIGURED_SELECTORS,
        STRUCTURED_DATA,
        META_TAGS,
        FREE_TEXT,
    ),
    url_validator=is_product_url,
    priority=15,
    description="N11 new-price block, selectors, JSON-LD and TL-suffixed text",
)
