"""Domain extraction and provider resolution."""

from typing import List, Optional
from urllib.parse import urlsplit

from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.registry import ProviderRegistry


def extract_domain(url: str) -> str:
    """Lower-cased host without a leading ``www.``; empty string on parse failure."""
    try:
        host = urlsplit((url or "").strip()).hostname
    except ValueError:
        return ""
    if not host:
        return ""
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def normalize_domain(domain: str) -> str:
    domain = (domain or "").strip().lower()
    return domain[4:] if domain.startswith("www.") else domain


class SiteResolver:
    """Maps a domain and URL to the ordered providers that should try it."""

    def __init__(self, registry: ProviderRegistry):
        self._registry = registry

    def resolve(self, domain: str, url: str) -> List[SiteProfile]:
        """Providers for ``(domain, url)``, best first.

        Site-specific providers that claim the domain and accept the URL
        shape come first, ascending by priority (registration order on
        ties). The generic provider is always last.
        """
        domain = normalize_domain(domain)
        specific = [p for p in self._registry.specific() if p.handles(domain, url)]
        # sorted() is stable: equal priorities keep registration order
        resolved = sorted(specific, key=lambda p: p.priority)

        generic = self._registry.generic
        if generic is not None:
            resolved.append(generic)
        return resolved

    def best(self, domain: str, url: str) -> Optional[SiteProfile]:
        resolved = self.resolve(domain, url)
        return resolved[0] if resolved else None

    def claimants(self, domain: str) -> List[SiteProfile]:
        """Every provider claiming ``domain`` regardless of URL shape."""
        domain = normalize_domain(domain)
        return [p for p in self._registry.all() if p.claims(domain)]
