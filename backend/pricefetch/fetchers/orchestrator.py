"""Fetch orchestration with provider fallback.

    resolve providers -> run best -> on failure, run the rest in priority
    order (generic last) -> first success wins

This is a linear fallback chain: no voting or reconciliation between
providers takes place.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import structlog

from pricefetch.core.exceptions import (
    AllProvidersExhaustedError,
    InvalidInputError,
    UnsupportedSourceError,
)
from pricefetch.fetchers.base import FetchRequest, MetricSample, ProviderAttempt
from pricefetch.fetchers.pipeline import Acquirer, run_provider
from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.registry import ProviderRegistry
from pricefetch.fetchers.resolver import SiteResolver, extract_domain

logger = structlog.get_logger(__name__)

ECOMMERCE_PRODUCT = "ECOMMERCE_PRODUCT"


@dataclass(frozen=True)
class ProviderInfo:
    name: str
    domains: Tuple[str, ...]
    priority: int
    requires_rendering: bool
    default_currency: str
    fetch_method: str
    description: str = ""


@dataclass(frozen=True)
class ProviderAnalysis:
    url: str
    domain: str
    best_provider: Optional[str]
    claiming_providers: Tuple[str, ...]
    fetch_method: Optional[str]
    supported: bool


@dataclass(frozen=True)
class ProviderStats:
    total_providers: int
    rendered_providers: int
    direct_providers: int
    supported_domains: int


class FetchOrchestrator:
    """Entry point of the engine: turns a ``FetchRequest`` into a ``MetricSample``.

    Holds no per-request state, so one instance may serve concurrent callers.
    """

    SOURCE_TYPE = ECOMMERCE_PRODUCT

    def __init__(self, registry: ProviderRegistry, acquirer: Acquirer):
        self.registry = registry
        self.resolver = SiteResolver(registry)
        self.acquirer = acquirer

    def supports(self, source_type: str) -> bool:
        return source_type == self.SOURCE_TYPE

    def _validate(self, request: FetchRequest) -> str:
        if not self.supports(request.source_type):
            raise UnsupportedSourceError(request.source_type)
        url = request.url
        if not url:
            raise InvalidInputError("URL parameter is required")
        return url

    @staticmethod
    def retry_order(resolved: List[SiteProfile], tried: List[str]) -> List[SiteProfile]:
        """Untried providers by priority, generic always last."""
        remaining = [p for p in resolved if p.name not in tried]
        specific = sorted((p for p in remaining if not p.is_generic), key=lambda p: p.priority)
        generic = [p for p in remaining if p.is_generic]
        return specific + generic

    async def fetch(self, request: FetchRequest) -> MetricSample:
        """Fetch a price for ``request.params["url"]``.

        Raises:
            UnsupportedSourceError: Source type is not ECOMMERCE_PRODUCT
            InvalidInputError: URL missing or blank
            AllProvidersExhaustedError: Every eligible provider failed
        """
        url = self._validate(request)
        domain = extract_domain(url)
        resolved = self.resolver.resolve(domain, url)
        log = logger.bind(url=url, domain=domain)

        if not resolved:
            log.error("no_provider_available")
            raise AllProvidersExhaustedError(url, [])

        best = resolved[0]
        log.info("provider_selected", provider=best.name, priority=best.priority)

        attempts: List[ProviderAttempt] = []
        attempt = await run_provider(best, request, self.acquirer)
        attempts.append(attempt)
        if attempt.ok:
            return attempt.sample

        for profile in self.retry_order(resolved, [a.provider for a in attempts]):
            log.info(
                "provider_fallback",
                provider=profile.name,
                previous=attempts[-1].provider,
                reason=attempts[-1].kind,
            )
            attempt = await run_provider(profile, request, self.acquirer)
            attempts.append(attempt)
            if attempt.ok:
                return attempt.sample

        error = AllProvidersExhaustedError(url, attempts)
        log.error(
            "all_providers_exhausted",
            attempts=[(a.provider, a.kind) for a in attempts],
            last_error=str(error.last_error),
        )
        raise error from error.last_error

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def available_providers(self) -> List[ProviderInfo]:
        """All registered providers sorted by priority."""
        profiles = sorted(self.registry.all(), key=lambda p: p.priority)
        return [
            ProviderInfo(
                name=p.name,
                domains=p.domains,
                priority=p.priority,
                requires_rendering=p.requires_rendering,
                default_currency=p.config.default_currency,
                fetch_method=p.fetch_method,
                description=p.description,
            )
            for p in profiles
        ]

    def best_provider_name(self, url: str) -> Optional[str]:
        best = self.resolver.best(extract_domain(url), url)
        return best.name if best else None

    def is_url_supported(self, url: str) -> bool:
        """True if some provider both claims the domain and accepts the URL."""
        domain = extract_domain(url)
        return any(p.handles(domain, url) for p in self.registry.all())

    def analyze(self, url: str) -> ProviderAnalysis:
        domain = extract_domain(url)
        best = self.resolver.best(domain, url)
        return ProviderAnalysis(
            url=url,
            domain=domain,
            best_provider=best.name if best else None,
            claiming_providers=tuple(p.name for p in self.resolver.claimants(domain)),
            fetch_method=best.fetch_method if best else None,
            supported=self.is_url_supported(url),
        )

    def system_stats(self) -> ProviderStats:
        profiles = self.registry.all()
        rendered = sum(1 for p in profiles if p.requires_rendering)
        domains = {d for p in profiles if not p.is_generic for d in p.domains}
        return ProviderStats(
            total_providers=len(profiles),
            rendered_providers=rendered,
            direct_providers=len(profiles) - rendered,
            supported_domains=len(domains),
        )
