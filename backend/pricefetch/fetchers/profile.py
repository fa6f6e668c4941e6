"""Site profile: one provider entry of the registry table."""

from dataclasses import dataclass
from typing import Callable, Tuple

from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies.base import Strategy

UrlValidator = Callable[[str], bool]


@dataclass(frozen=True, eq=False)
class SiteProfile:
    """A provider: which domains it claims, how it fetches and how it extracts.

    Adding support for a site means building one of these and registering
    it; nothing in the orchestrator changes.
    """

    name: str
    domains: Tuple[str, ...]
    config: SiteConfiguration
    strategies: Tuple[Strategy, ...]
    url_validator: UrlValidator
    priority: int = 100  # lower = preferred
    is_generic: bool = False
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("name is required")
        object.__setattr__(self, "domains", tuple(d.lower() for d in self.domains))
        object.__setattr__(self, "strategies", tuple(self.strategies))
        if not self.strategies:
            raise ValueError(f"profile '{self.name}' declares no strategies")

    @property
    def requires_rendering(self) -> bool:
        return self.config.requires_rendering

    @property
    def fetch_method(self) -> str:
        return "Rendered browser" if self.requires_rendering else "Direct HTTP"

    def claims(self, domain: str) -> bool:
        """True if ``domain`` falls under one of this profile's domain claims."""
        if self.is_generic:
            return True
        domain = (domain or "").lower()
        if not domain:
            return False
        return any(claim in domain for claim in self.domains)

    def accepts_url(self, url: str) -> bool:
        """URL-shape check; a raising validator counts as rejection."""
        if not url:
            return False
        try:
            return bool(self.url_validator(url))
        except (TypeError, ValueError):
            return False

    def handles(self, domain: str, url: str) -> bool:
        return self.claims(domain) and self.accepts_url(url)
