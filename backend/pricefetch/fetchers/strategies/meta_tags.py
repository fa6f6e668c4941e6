"""Meta-tag and microdata strategies."""

from decimal import Decimal
from typing import Optional

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.utils.normalizer import PriceNormalizer

META_SELECTORS = (
    "meta[property='product:price:amount']",
    "meta[property='og:price:amount']",
    "meta[property='product:price']",
    "meta[property='og:price']",
    "meta[name='price']",
    "meta[name='product:price']",
    "meta[property='price']",
    "meta[property='cost']",
    "meta[name='twitter:label1'][content*='price' i] + meta[name='twitter:data1']",
    "meta[name='twitter:data1']",
)

MICRODATA_SELECTORS = (
    "[itemprop='price']",
    "[itemprop='lowPrice']",
    "[itemprop='highPrice']",
    "[itemprop='amount']",
    "[itemprop='value']",
    "[itemtype*='Product'] [itemprop='offers'] [itemprop='price']",
    "[itemtype*='Offer'] [itemprop='price']",
)


def meta_tags(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Price from Open Graph / product / Twitter card meta tags."""
    if not config.enable_meta_tags:
        return None

    for selector in META_SELECTORS:
        element = context.document.select_one(selector)
        if element is None:
            continue
        value = PriceNormalizer.try_normalize(element.get("content"), config.price_patterns)
        if config.accepts(value):
            return value
    return None


def microdata(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Price from ``itemprop`` attributes; ``content`` wins over element text."""
    for selector in MICRODATA_SELECTORS:
        for element in context.document.select(selector):
            for raw in (element.get("content"), element.get_text(" ", strip=True)):
                value = PriceNormalizer.try_normalize(raw, config.price_patterns)
                if config.accepts(value):
                    return value
    return None
