"""Read-only helpers over parsed markup.

Nothing here modifies the tree: every strategy shares one parsed
document per extraction context.
"""

import re
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

NON_VISIBLE_TAGS = frozenset(["script", "style", "noscript", "template", "head", "title"])

_WHITESPACE = re.compile(r"\s+")

# A currency token next to a number, either side.
CURRENCY_AMOUNT = re.compile(
    r"(?:[₺$€£₹¥₩]|\b(?:TL|TRY|USD|EUR|GBP)\b)\s*\d"
    r"|\d[\d.,]*\s*(?:[₺$€£₹¥₩원]|(?<![A-Za-z])(?:TL|TRY|USD|EUR|GBP)(?![A-Za-z]))",
    re.IGNORECASE,
)

# A number carrying decimals ("12,99", "1.234,56", "12.99")
_DECIMAL_AMOUNT = re.compile(r"\d[.,]\d{2}(?!\d)")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def own_text(element: Tag) -> str:
    """Text of the element's direct string children only."""
    parts = [
        str(child)
        for child in element.children
        if isinstance(child, NavigableString) and not isinstance(child, PreformattedString)
    ]
    return collapse_whitespace(" ".join(parts))


def is_visible(element: Tag) -> bool:
    """False for elements inside script/style/noscript and similar."""
    node: Optional[Tag] = element
    while node is not None:
        if node.name in NON_VISIBLE_TAGS:
            return False
        node = node.parent
    return True


def iter_visible_elements(document: BeautifulSoup) -> Iterator[Tag]:
    """All elements outside non-visible containers, in document order."""
    for element in document.find_all(True):
        if is_visible(element):
            yield element


def visible_text(node) -> str:
    """Visible text of a document or element, whitespace collapsed."""
    parts: List[str] = []
    for string in node.find_all(string=True):
        if isinstance(string, PreformattedString):
            continue
        parent = string.parent
        if parent is not None and not is_visible(parent):
            continue
        parts.append(str(string))
    return collapse_whitespace(" ".join(parts))


def looks_like_price(text: str) -> bool:
    """True if the text carries a number with a currency or decimals."""
    if not text or not any(c.isdigit() for c in text):
        return False
    return bool(CURRENCY_AMOUNT.search(text) or _DECIMAL_AMOUNT.search(text))
