"""Structured-data strategies: JSON-LD blocks and inline script assignments."""

import json
import re
from decimal import Decimal
from typing import Any, Iterator, List, Optional

import structlog

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.utils.normalizer import PriceNormalizer

logger = structlog.get_logger(__name__)

JSON_LD_SELECTOR = "script[type='application/ld+json']"
INLINE_SCRIPT_SELECTOR = "script:not([src])"

# First populated field wins.
PRICE_FIELDS = ("price", "priceValue", "amount", "value", "cost", "lowPrice", "highPrice")
PRICED_TYPES = frozenset(["product", "offer", "aggregateoffer", "productgroup"])

_TYPE_HINT = re.compile(r'"@type"\s*:\s*"?[^"]*(?:Product|Offer)', re.IGNORECASE)

INLINE_PRICE_PATTERNS = (
    re.compile(r'"price"\s*:\s*"?(\d+(?:[.,]\d{1,2})?)(?![\d.,])'),
    re.compile(r'"currentPrice"\s*:\s*"?(\d+(?:[.,]\d{1,2})?)(?![\d.,])'),
    re.compile(r'(?<![\w"])price\s*:\s*"?(\d+(?:[.,]\d{1,2})?)(?![\d.,])'),
    re.compile(r'(?<![\w"])currentPrice\s*:\s*"?(\d+(?:[.,]\d{1,2})?)(?![\d.,])'),
)


def _node_types(node: dict) -> List[str]:
    declared = node.get("@type")
    if isinstance(declared, str):
        declared = [declared]
    if not isinstance(declared, list):
        return []
    return [str(t).rsplit("/", 1)[-1].lower() for t in declared]


def _walk(data: Any) -> Iterator[dict]:
    """Yield every JSON object in document order, depth first."""
    if isinstance(data, dict):
        yield data
        for value in data.values():
            yield from _walk(value)
    elif isinstance(data, list):
        for item in data:
            yield from _walk(item)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _to_decimal(value: Any, config: SiteConfiguration) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        value = Decimal(value)
        return value if value.is_finite() else None
    if isinstance(value, float):
        # json.loads passes NaN and Infinity through as floats
        value = Decimal(str(value))
        return value if value.is_finite() else None
    if isinstance(value, str):
        return PriceNormalizer.try_normalize(value, config.price_patterns)
    if isinstance(value, dict):
        # {"@type": "MonetaryAmount", "value": ...}
        return _to_decimal(value.get("value"), config)
    return None


def _field_price(node: dict, config: SiteConfiguration) -> Optional[Decimal]:
    for field in PRICE_FIELDS:
        raw = node.get(field)
        if raw in (None, "", []):
            continue
        value = _to_decimal(raw, config)
        if config.accepts(value):
            return value
    return None


def _price_from_node(node: dict, config: SiteConfiguration) -> Optional[Decimal]:
    """Price of a Product/Offer node: own fields, then offers, then price specs."""
    value = _field_price(node, config)
    if value is not None:
        return value

    for offer in _as_list(node.get("offers")):
        if not isinstance(offer, dict):
            continue
        value = _price_from_node(offer, config)
        if value is not None:
            return value

    for spec in _as_list(node.get("priceSpecification")):
        if isinstance(spec, dict):
            value = _field_price(spec, config)
            if value is not None:
                return value
    return None


def price_from_json_ld(payload: Any, config: SiteConfiguration) -> Optional[Decimal]:
    """First sane price held by a Product/Offer-typed object in ``payload``."""
    for node in _walk(payload):
        if not PRICED_TYPES.intersection(_node_types(node)):
            continue
        value = _price_from_node(node, config)
        if value is not None:
            return value
    return None


def _scan_malformed(raw: str, config: SiteConfiguration) -> Optional[Decimal]:
    """Field-by-field regex scan for blocks that are not valid JSON."""
    if not _TYPE_HINT.search(raw):
        return None
    for field in PRICE_FIELDS:
        pattern = re.compile(r'"%s"\s*:\s*"?(\d[\d.,]*)"?' % re.escape(field))
        for match in pattern.finditer(raw):
            value = PriceNormalizer.try_normalize(match.group(1))
            if config.accepts(value):
                return value
    return None


def structured_data(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Price from embedded JSON-LD Product/Offer blocks."""
    if not config.enable_structured_data:
        return None

    for script in context.document.select(JSON_LD_SELECTOR):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            payload = json.loads(raw, parse_float=Decimal)
        except ValueError as e:
            logger.debug("json_ld_malformed", url=context.url, error=str(e))
            value = _scan_malformed(raw, config)
        else:
            value = price_from_json_ld(payload, config)
        if value is not None:
            return value
    return None


def inline_script(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Price assigned in inline ``<script>`` state, e.g. ``"currentPrice": 1299.9``."""
    for script in context.document.select(INLINE_SCRIPT_SELECTOR):
        if (script.get("type") or "").lower() == "application/ld+json":
            continue
        body = script.string or script.get_text()
        if not body:
            continue
        for pattern in INLINE_PRICE_PATTERNS:
            for match in pattern.finditer(body):
                value = PriceNormalizer.try_normalize(match.group(1))
                if config.accepts(value):
                    return value
    return None
