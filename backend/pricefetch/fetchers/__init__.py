"""Price fetch engine: site profiles, strategies and orchestration."""

from pricefetch.fetchers.base import (
    ExtractionContext,
    FetchRequest,
    MetricSample,
    ProviderAttempt,
)
from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.site_config import SanityBounds, SiteConfiguration

__all__ = [
    "ExtractionContext",
    "FetchRequest",
    "MetricSample",
    "ProviderAttempt",
    "SanityBounds",
    "SiteConfiguration",
    "SiteProfile",
]
