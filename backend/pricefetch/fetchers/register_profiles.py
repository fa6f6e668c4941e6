"""Register all site profiles with the provider registry.

This module should be imported and called once at application startup.
A new site is supported by adding its module to ``PROFILES``.
"""

from typing import Optional

import structlog

from pricefetch.fetchers.registry import ProviderRegistry, get_provider_registry
from pricefetch.fetchers.sites import generic, hepsiburada, n11, trendyol

logger = structlog.get_logger(__name__)

# Registration order breaks priority ties.
PROFILES = (
    trendyol.PROFILE,
    hepsiburada.PROFILE,
    n11.PROFILE,
    generic.PROFILE,
)


def register_all_profiles(registry: Optional[ProviderRegistry] = None) -> ProviderRegistry:
    """Register every known site profile.

    Args:
        registry: Target registry; the global one when omitted

    Returns:
        The registry the profiles were added to
    """
    if registry is None:
        registry = get_provider_registry()
    for profile in PROFILES:
        registry.register(profile)

    logger.info(
        "profile_registration_complete",
        total=len(registry),
        providers=[p.name for p in registry.all()],
    )
    return registry
