"""Registry of site profiles (providers)."""

from typing import Dict, List, Optional

import structlog

from pricefetch.fetchers.profile import SiteProfile

logger = structlog.get_logger(__name__)


class ProviderRegistry:
    """Ordered table of site profiles.

    Registration order is kept and used as the tie-break between providers
    of equal priority. Exactly one generic profile may be registered.
    """

    def __init__(self):
        self._profiles: Dict[str, SiteProfile] = {}

    def register(self, profile: SiteProfile) -> None:
        """Register a profile; re-registering a name replaces it in place.

        Raises:
            ValueError: If a second, differently named generic profile is added
        """
        if not isinstance(profile, SiteProfile):
            raise ValueError(f"Provider must be a SiteProfile: {profile!r}")

        generic = self.generic
        if profile.is_generic and generic is not None and generic.name != profile.name:
            raise ValueError(
                f"Generic provider already registered: '{generic.name}'"
            )

        self._profiles[profile.name] = profile
        logger.info(
            "provider_registered",
            provider=profile.name,
            priority=profile.priority,
            domains=list(profile.domains),
            rendered=profile.requires_rendering,
        )

    def unregister(self, name: str) -> Optional[SiteProfile]:
        return self._profiles.pop(name, None)

    def get(self, name: str) -> Optional[SiteProfile]:
        return self._profiles.get(name)

    def all(self) -> List[SiteProfile]:
        """Profiles in registration order."""
        return list(self._profiles.values())

    @property
    def generic(self) -> Optional[SiteProfile]:
        for profile in self._profiles.values():
            if profile.is_generic:
                return profile
        return None

    def specific(self) -> List[SiteProfile]:
        """Site-specific profiles in registration order."""
        return [p for p in self._profiles.values() if not p.is_generic]

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, name: str) -> bool:
        return name in self._profiles


# Global registry instance
provider_registry = ProviderRegistry()


def get_provider_registry() -> ProviderRegistry:
    """Get the global provider registry instance.

    Returns:
        ProviderRegistry instance
    """
    return provider_registry
