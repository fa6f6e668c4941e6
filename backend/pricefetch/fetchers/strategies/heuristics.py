"""Heuristic strategies for pages that hide their price behind obfuscated markup.

Class names on such pages are often hashed, so these strategies look at what
is left: tag weight, keyword fragments in class/id, nearby phrases such as
"sepete özel" and currency-bearing text. Ranking goes through ``ScoreBoard``.
"""

import re
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import structlog
from bs4 import Tag
from soupsieve import SelectorSyntaxError

from pricefetch.fetchers.base import ExtractionContext
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies.scoring import MAX, SUM, ScoreBoard, keyword_score
from pricefetch.fetchers.utils.markup import (
    is_visible,
    iter_visible_elements,
    looks_like_price,
    own_text,
    visible_text,
)
from pricefetch.fetchers.utils.normalizer import PriceNormalizer

logger = structlog.get_logger(__name__)

# Turkish grouped amount with decimal comma: 1.299,00
_TR_AMOUNT = r"(\d{1,3}(?:\.\d{3})*,\d{2})"
_TR_PLAIN = r"(\d+,\d{2})"

DEFAULT_CONTEXT_PHRASES = ("sepete özel", "özel fiyat", "indirimli", "kazancınız", "tasarruf")
DEFAULT_CURRENCY_MARKERS = ("₺", "TL", "tl")

# ============================================================================
# Weight tables
# ============================================================================

TAG_WEIGHTS: Dict[str, int] = {
    "h1": 15,
    "h2": 12,
    "h3": 10,
    "strong": 8,
    "b": 8,
    "span": 5,
    "div": 3,
}

CLASS_WEIGHTS: Dict[Tuple[str, ...], int] = {
    ("price", "cost", "amount", "value", "fiyat"): 10,
    ("special", "discount", "sale", "offer", "indirim"): 8,
    ("current", "main", "primary"): 6,
}

ANCESTOR_PHRASE_WEIGHTS: Dict[Tuple[str, ...], int] = {
    ("sepete özel", "özel fiyat", "special price"): 20,
    ("indirimli", "kampanya", "discounted"): 15,
    ("kazancınız", "tasarruf", "you save"): 10,
}

STRUCTURAL_SELECTORS = (
    "[class*='price']:not([class*='old']):not([class*='original'])",
    "[class*='amount']:not([class*='was'])",
    "[class*='cost']:not([class*='prev'])",
    "[class*='special']",
    "[class*='discount']",
    "[class*='offer']",
    "[data-price]",
    "[data-amount]",
    "[data-cost]",
    "[data-value]",
    "main *",
    "[role='main'] *",
    ".container *",
    "#content *",
    "h1 + * *",
    "h2 + * *",
    "h3 + * *",
)

SELECTOR_WEIGHTS: Dict[Tuple[str, ...], int] = {
    ("special", "discount", "offer"): 15,
    ("price", "amount", "cost"): 12,
    ("data-",): 10,
    ("main", "content"): 8,
    ("h1", "h2"): 6,
}

# Ordered most to least trustworthy; rank score is len(patterns) - index.
PROXIMITY_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"sepete\s+özel[^0-9]*" + _TR_AMOUNT + r"\s*TL",
        r"özel\s+fiyat[^0-9]*" + _TR_AMOUNT + r"\s*TL",
        r"special\s+price[^0-9]*" + _TR_AMOUNT,
        r"₺\s*" + _TR_AMOUNT,
        _TR_AMOUNT + r"\s*₺",
        _TR_AMOUNT + r"\s*TL",
        _TR_PLAIN + r"\s*TL",
        r"fiyat[ı:]?\s*" + _TR_AMOUNT,
        r"tutar[ı:]?\s*" + _TR_AMOUNT,
        r"price:?\s*" + _TR_AMOUNT,
        _TR_AMOUNT + r"(?=\s*$)",
        _TR_PLAIN + r"(?=\s*TL\s*$)",
    )
)


def _parse(text: str, config: SiteConfiguration) -> Optional[Decimal]:
    value = PriceNormalizer.try_normalize(text, config.price_patterns)
    return value if config.accepts(value) else None


# ============================================================================
# Style scoring
# ============================================================================


def style_score(element: Tag) -> int:
    """Score an element by tag, class/id keywords and parent-context phrases."""
    score = TAG_WEIGHTS.get(element.name, 0)

    markers = " ".join(element.get("class", [])) + " " + (element.get("id") or "")
    score += keyword_score(markers, CLASS_WEIGHTS)

    parent = element.parent
    if isinstance(parent, Tag):
        score += keyword_score(visible_text(parent), ANCESTOR_PHRASE_WEIGHTS)
    return score


def heuristic_style(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Best-scoring currency-bearing element; each price keeps its highest score."""
    board = ScoreBoard(MAX)
    for element in iter_visible_elements(context.document):
        text = own_text(element)
        if not looks_like_price(text):
            continue
        value = _parse(text, config)
        if value is not None:
            board.add(value, style_score(element))
    return board.best()


# ============================================================================
# Structural patterns
# ============================================================================


def structural_pattern(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Sum selector scores per price across every structural selector that hits it."""
    board = ScoreBoard(SUM)
    for selector in STRUCTURAL_SELECTORS:
        weight = keyword_score(selector, SELECTOR_WEIGHTS)
        try:
            elements = context.document.select(selector)
        except SelectorSyntaxError as e:
            logger.debug("selector_invalid", selector=selector, error=str(e))
            continue
        for element in elements:
            if not is_visible(element):
                continue
            text = own_text(element)
            if not looks_like_price(text):
                continue
            value = _parse(text, config)
            if value is not None:
                board.add(value, weight)
    return board.best()


# ============================================================================
# Text proximity
# ============================================================================


def text_proximity(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Rank prices in visible text by which contextual patterns find them."""
    text = visible_text(context.document)
    board = ScoreBoard(SUM)
    total = len(PROXIMITY_PATTERNS)
    for index, pattern in enumerate(PROXIMITY_PATTERNS):
        for match in pattern.finditer(text):
            value = _parse(match.group(1), config)
            if value is not None:
                board.add(value, total - index)
    return board.best()


# ============================================================================
# Context anchors
# ============================================================================


def _elements_with_own_text(context: ExtractionContext, needle: str) -> Iterator[Tag]:
    needle = needle.lower()
    for element in iter_visible_elements(context.document):
        if needle in own_text(element).lower():
            yield element


def related_elements(anchor: Tag) -> List[Tag]:
    """Parent subtree, grandparent subtree, then following siblings, deduplicated."""
    related: List[Tag] = []
    seen = set()

    def _add(element: Tag) -> None:
        if id(element) not in seen:
            seen.add(id(element))
            related.append(element)

    parent = anchor.parent if isinstance(anchor.parent, Tag) else None
    grandparent = parent.parent if parent is not None and isinstance(parent.parent, Tag) else None
    for container in (parent, grandparent):
        if container is None or container.name == "[document]":
            continue
        _add(container)
        for element in container.find_all(True):
            _add(element)
    for sibling in anchor.find_next_siblings(True):
        _add(sibling)
    return related


def price_near_phrase(
    context: ExtractionContext,
    phrase: str,
    config: SiteConfiguration,
) -> Optional[Decimal]:
    for anchor in _elements_with_own_text(context, phrase):
        for element in related_elements(anchor):
            if not is_visible(element):
                continue
            text = own_text(element)
            if not looks_like_price(text):
                continue
            value = _parse(text, config)
            if value is not None:
                logger.debug("price_near_phrase", phrase=phrase, price=str(value), url=context.url)
                return value
    return None


def _currency_patterns(marker: str) -> Sequence[re.Pattern]:
    token = re.escape(marker)
    return tuple(
        re.compile(p)
        for p in (
            _TR_AMOUNT + r"\s*(?:" + token + ")",
            _TR_PLAIN + r"\s*(?:" + token + ")",
            r"(?:" + token + r")\s*" + _TR_AMOUNT,
            r"(?:" + token + r")\s*" + _TR_PLAIN,
        )
    )


def price_near_currency(
    context: ExtractionContext,
    markers: Sequence[str],
    config: SiteConfiguration,
) -> Optional[Decimal]:
    for marker in markers:
        patterns = _currency_patterns(marker)
        for element in iter_visible_elements(context.document):
            if marker not in own_text(element):
                continue
            full_text = visible_text(element)
            for pattern in patterns:
                match = pattern.search(full_text)
                if match:
                    value = _parse(match.group(1), config)
                    if value is not None:
                        return value
    return None


def context_anchor(context: ExtractionContext, config: SiteConfiguration) -> Optional[Decimal]:
    """Price next to a keyword phrase, else next to a currency marker."""
    for phrase in config.context_phrases or DEFAULT_CONTEXT_PHRASES:
        value = price_near_phrase(context, phrase, config)
        if value is not None:
            return value
    return price_near_currency(context, config.currency_markers or DEFAULT_CURRENCY_MARKERS, config)
