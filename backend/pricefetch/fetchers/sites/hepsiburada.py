"""HepsiBurada profile.

HepsiBurada serves hashed class names, so selector lists are useless here;
the chain leans on context phrases, scoring heuristics and text proximity.
"""

import re
from decimal import Decimal

from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies import (
    CONTEXT_ANCHOR,
    HEURISTIC_STYLE,
    STRUCTURAL_PATTERN,
    STRUCTURED_DATA,
    TEXT_PROXIMITY,
)
from pricefetch.fetchers.utils.user_agents import DESKTOP_CHROME_USER_AGENT

HEPSIBURADA_CONFIG = SiteConfiguration(
    headers={"Accept-Language": "tr-TR,tr;q=0.9,en;q=0.8"},
    timeout_ms=20000,
    user_agent=DESKTOP_CHROME_USER_AGENT,
    requires_js=True,
    use_renderer=True,
    wait_after_load_ms=5000,
    default_currency="TRY",
    min_price=Decimal("1"),
    max_price=Decimal("100000"),
    context_phrases=("sepete özel", "özel fiyat", "indirimli", "kazancınız", "tasarruf"),
    currency_markers=("₺", "TL", "tl"),
)

_HAS_DIGIT = re.compile(r"\d")


def is_product_url(url: str) -> bool:
    return "-p-" in url or "/product/" in url or bool(_HAS_DIGIT.search(url))


PROFILE = SiteProfile(
    name="HepsiBurada",
    domains=("hepsiburada.com",),
    config=HEPSIBURADA_CONFIG,
    strategies=(
        CONTEXT_ANCHOR,
        HEURISTIC_STYLE,
        STRUCTURAL_PATTERN,
        TEXT_PROXIMITY,
        STRUCTURED_DATA,
    ),
    url_validator=is_product_url,
    priority=10,
    description="Context phrases, style/structure scoring and text proximity",
)
