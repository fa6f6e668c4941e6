"""Declarative per-site configuration consumed by the acquirer and strategies."""

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

DEFAULT_TIMEOUT_MS = 10000
DEFAULT_WAIT_AFTER_LOAD_MS = 1000
DEFAULT_CURRENCY = "TRY"


@dataclass(frozen=True)
class SanityBounds:
    """Inclusive ``[minimum, maximum]`` band a price must fall in."""

    minimum: Decimal = Decimal("1")
    maximum: Decimal = Decimal("100000")

    def __post_init__(self):
        if self.minimum > self.maximum:
            raise ValueError("minimum must not exceed maximum")

    def __contains__(self, value) -> bool:
        if value is None or not value.is_finite():
            return False
        return self.minimum <= value <= self.maximum


@dataclass(frozen=True)
class SiteConfiguration:
    """Immutable bundle of selectors, patterns and fetch settings for one site.

    Sequences are stored as tuples and mappings as read-only proxies, so one
    instance can be shared by every request to the site.
    """

    price_selectors: Tuple[str, ...] = ()
    fallback_selectors: Tuple[str, ...] = ()
    price_patterns: Tuple[str, ...] = ()  # each with one capture group
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    user_agent: Optional[str] = None
    requires_js: bool = False
    use_renderer: bool = False
    wait_after_load_ms: int = DEFAULT_WAIT_AFTER_LOAD_MS
    default_currency: str = DEFAULT_CURRENCY
    enable_structured_data: bool = True
    enable_meta_tags: bool = True
    min_price: Decimal = Decimal("1")
    max_price: Decimal = Decimal("100000")
    context_phrases: Tuple[str, ...] = ()
    currency_markers: Tuple[str, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Freeze collections and validate limits."""
        for name in (
            "price_selectors",
            "fallback_selectors",
            "price_patterns",
            "context_phrases",
            "currency_markers",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra or {})))
        object.__setattr__(self, "min_price", Decimal(str(self.min_price)))
        object.__setattr__(self, "max_price", Decimal(str(self.max_price)))

        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if self.wait_after_load_ms < 0:
            raise ValueError("wait_after_load_ms must not be negative")
        if self.min_price <= 0:
            raise ValueError("min_price must be positive")
        if self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")

    @property
    def requires_rendering(self) -> bool:
        return self.requires_js or self.use_renderer

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def bounds(self) -> SanityBounds:
        return SanityBounds(self.min_price, self.max_price)

    def accepts(self, value: Optional[Decimal]) -> bool:
        """Sanity check applied to every candidate price."""
        return value in self.bounds
