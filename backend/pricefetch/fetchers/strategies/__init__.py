"""Strategy catalog.

Each entry wraps a pure ``(context, config) -> Optional[Decimal]`` function
with its catalog priority. Site profiles pick and order the ones they need.
"""

from pricefetch.fetchers.strategies.base import (
    ExtractionOutcome,
    Strategy,
    by_priority,
    run_chain,
)
from pricefetch.fetchers.strategies.heuristics import (
    context_anchor,
    heuristic_style,
    structural_pattern,
    text_proximity,
)
from pricefetch.fetchers.strategies.meta_tags import meta_tags, microdata
from pricefetch.fetchers.strategies.selectors import configured_selectors, primary_selectors
from pricefetch.fetchers.strategies.structured_data import inline_script, structured_data
from pricefetch.fetchers.strategies.text import free_text

STRUCTURED_DATA = Strategy("structured_data", structured_data, priority=10)
META_TAGS = Strategy("meta_tags", meta_tags, priority=20)
PRIMARY_SELECTORS = Strategy("primary_selectors", primary_selectors, priority=30)
CONFIGURED_SELECTORS = Strategy("configured_selectors", configured_selectors, priority=30)
MICRODATA = Strategy("microdata", microdata, priority=40)
INLINE_SCRIPT = Strategy("inline_script", inline_script, priority=45)
CONTEXT_ANCHOR = Strategy("context_anchor", context_anchor, priority=50)
HEURISTIC_STYLE = Strategy("heuristic_style", heuristic_style, priority=60)
STRUCTURAL_PATTERN = Strategy("structural_pattern", structural_pattern, priority=70)
TEXT_PROXIMITY = Strategy("text_proximity", text_proximity, priority=80)
FREE_TEXT = Strategy("free_text", free_text, priority=90)

__all__ = [
    "CONFIGURED_SELECTORS",
    "CONTEXT_ANCHOR",
    "ExtractionOutcome",
    "FREE_TEXT",
    "HEURISTIC_STYLE",
    "INLINE_SCRIPT",
    "META_TAGS",
    "MICRODATA",
    "PRIMARY_SELECTORS",
    "STRUCTURAL_PATTERN",
    "STRUCTURED_DATA",
    "Strategy",
    "TEXT_PROXIMITY",
    "by_priority",
    "run_chain",
]
