"""Fetch utilities: price normalization, markup helpers and browser rendering."""

from .normalizer import PriceNormalizer, resolve_separators
from .user_agents import DESKTOP_CHROME_USER_AGENT, get_random_user_agent

__all__ = [
    "DESKTOP_CHROME_USER_AGENT",
    "PriceNormalizer",
    "get_random_user_agent",
    "resolve_separators",
]
