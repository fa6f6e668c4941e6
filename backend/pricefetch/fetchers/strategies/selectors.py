"""CSS selector strategies driven by the site configuration."""

from decimal import Decimal
from typing import Iterable, Optional

import structlog
from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.utils.normalizer import PriceNormalizer

logger = structlog.get_logger(__name__)

PRICE_ATTRIBUTES = ("data-price", "content", "data-value")


def price_from_element(element: Tag, config: SiteConfiguration) -> Optional[Decimal]:
    """Element text first, then a ``data-price``-style attribute."""
    candidates = [element.get_text(" ", strip=True)]
    candidates.extend(element.get(attr) for attr in PRICE_ATTRIBUTES)
    for raw in candidates:
        value = PriceNormalizer.try_normalize(raw, config.price_patterns)
        if config.accepts(value):
            return value
    return None


def select_price(
    document: BeautifulSoup,
    selectors: Iterable[str],
    config: SiteConfiguration,
) -> Optional[Decimal]:
    """First sane price under ``selectors``, tried in order."""
    for selector in selectors:
        try:
            elements = document.select(selector)
        except SelectorSyntaxError as e:
            logger.debug("selector_invalid", selector=selector, error=str(e))
            continue
        for element in elements:
            value = price_from_element(element, config)
            if value is not None:
                return value
    return None


def primary_selectors(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    return select_price(context.document, config.price_selectors, config)


def configured_selectors(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Primary selectors, then fallback selectors."""
    return select_price(
        context.document,
        tuple(config.price_selectors) + tuple(config.fallback_selectors),
        config,
    )
