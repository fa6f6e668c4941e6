"""Tests for domain extraction, the provider registry and resolution."""

from decimal import Decimal

import pytest

from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.registry import ProviderRegistry
from pricefetch.fetchers.resolver import SiteResolver, extract_domain
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies import Strategy


def _nothing(context, config):
    return None


def make_profile(name, domains=("shop.test",), priority=100, is_generic=False, validator=None):
    return SiteProfile(
        name=name,
        domains=domains,
        config=SiteConfiguration(),
        strategies=(Strategy("nothing", _nothing),),
        url_validator=validator or (lambda url: True),
        priority=priority,
        is_generic=is_generic,
    )


# ============================================================================
# TESTS: DOMAIN EXTRACTION
# ============================================================================


class TestExtractDomain:
    """Test extract_domain."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://www.Trendyol.com/x-p-1", "trendyol.com"),
            ("http://n11.com/urun/a", "n11.com"),
            ("https://shop.example.com:8443/p/1", "shop.example.com"),
            ("not a url", ""),
            ("", ""),
            ("http://[::1", ""),
        ],
    )
    def test_extract(self, url, expected):
        """Test host is lower-cased and www. stripped; garbage gives ''."""
        assert extract_domain(url) == expected


# ============================================================================
# TESTS: REGISTRY
# ============================================================================


class TestProviderRegistry:
    """Test ProviderRegistry."""

    def test_register_keeps_order(self):
        """Test profiles come back in registration order."""
        registry = ProviderRegistry()
        registry.register(make_profile("A"))
        registry.register(make_profile("B"))

        assert [p.name for p in registry.all()] == ["A", "B"]
        assert "A" in registry
        assert len(registry) == 2

    def test_reregister_replaces_in_place(self):
        """Test registering an existing name replaces it without moving it."""
        registry = ProviderRegistry()
        registry.register(make_profile("A", priority=5))
        registry.register(make_profile("B"))
        registry.register(make_profile("A", priority=50))

        assert [p.name for p in registry.all()] == ["A", "B"]
        assert registry.get("A").priority == 50

    def test_unregister(self):
        """Test a removed profile is no longer resolved."""
        registry = ProviderRegistry()
        registry.register(make_profile("A"))

        removed = registry.unregister("A")

        assert removed.name == "A"
        assert "A" not in registry
        assert registry.unregister("A") is None
        assert SiteResolver(registry).resolve("shop.test", "https://shop.test/p/1") == []

    def test_single_generic(self):
        """Test a second, differently named generic profile is rejected."""
        registry = ProviderRegistry()
        registry.register(make_profile("G1", domains=("*",), is_generic=True))

        with pytest.raises(ValueError, match="Generic provider already registered"):
            registry.register(make_profile("G2", domains=("*",), is_generic=True))

    def test_rejects_non_profile(self):
        """Test registering something that is not a SiteProfile."""
        with pytest.raises(ValueError):
            ProviderRegistry().register("Trendyol")

    def test_profile_requires_strategies(self):
        """Test a profile without strategies cannot be built."""
        with pytest.raises(ValueError, match="no strategies"):
            SiteProfile(
                name="Empty",
                domains=("x.test",),
                config=SiteConfiguration(),
                strategies=(),
                url_validator=lambda url: True,
            )

    def test_built_in_profiles(self, registry):
        """Test the built-in registry holds three sites plus the generic."""
        assert [p.name for p in registry.specific()] == ["Trendyol", "HepsiBurada", "N11"]
        assert registry.generic.name == "Generic E-commerce"


# ============================================================================
# TESTS: RESOLUTION
# ============================================================================


class TestSiteResolver:
    """Test SiteResolver.resolve."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://www.trendyol.com/apple/iphone-15-p-123456", ["Trendyol", "Generic E-commerce"]),
            (
                "https://www.hepsiburada.com/apple-iphone-15-p-HBC00004X9SVY",
                ["HepsiBurada", "Generic E-commerce"],
            ),
            ("https://www.n11.com/urun/samsung-galaxy-s24-123456", ["N11", "Generic E-commerce"]),
            ("https://shop.example.com/p/123", ["Generic E-commerce"]),
        ],
    )
    def test_built_in_resolution(self, registry, url, expected):
        """Test each site resolves to its provider, then the generic."""
        resolver = SiteResolver(registry)
        assert [p.name for p in resolver.resolve(extract_domain(url), url)] == expected

    def test_url_shape_rejected(self, registry):
        """Test a claimed domain with a non-product URL falls to the generic."""
        resolver = SiteResolver(registry)
        url = "https://www.trendyol.com/"

        assert [p.name for p in resolver.resolve(extract_domain(url), url)] == ["Generic E-commerce"]
        assert [p.name for p in resolver.claimants("trendyol.com")] == ["Trendyol", "Generic E-commerce"]

    def test_priority_order(self):
        """Test lower priority wins regardless of registration order."""
        registry = ProviderRegistry()
        registry.register(make_profile("Late", priority=20))
        registry.register(make_profile("Early", priority=5))
        resolver = SiteResolver(registry)

        assert [p.name for p in resolver.resolve("shop.test", "https://shop.test/p/1")] == ["Early", "Late"]

    def test_equal_priority_keeps_registration_order(self):
        """Test ties are broken by registration order."""
        registry = ProviderRegistry()
        registry.register(make_profile("First", priority=10))
        registry.register(make_profile("Second", priority=10))
        resolver = SiteResolver(registry)

        assert resolver.best("shop.test", "https://shop.test/p/1").name == "First"

    def test_generic_always_last(self):
        """Test the generic profile is appended last even with a lower priority number."""
        registry = ProviderRegistry()
        registry.register(make_profile("Fallback", domains=("*",), priority=1, is_generic=True))
        registry.register(make_profile("Site", priority=100))
        resolver = SiteResolver(registry)

        resolved = resolver.resolve("www.shop.test", "https://www.shop.test/p/1")

        assert [p.name for p in resolved] == ["Site", "Fallback"]

    def test_raising_validator_counts_as_rejection(self):
        """Test a validator that raises does not break resolution."""

        def broken(url):
            raise ValueError("bad url")

        registry = ProviderRegistry()
        registry.register(make_profile("Broken", validator=broken))
        resolver = SiteResolver(registry)

        assert resolver.resolve("shop.test", "https://shop.test/p/1") == []

    def test_site_configuration_validation(self):
        """Test SiteConfiguration rejects inverted bounds and normalizes prices."""
        with pytest.raises(ValueError, match="min_price"):
            SiteConfiguration(min_price=10, max_price=5)

        config = SiteConfiguration(min_price="0.5", max_price=20)
        assert config.accepts(Decimal("0.5"))
        assert not config.accepts(Decimal("20.01"))
        assert not config.accepts(None)
        assert not config.accepts(Decimal("NaN"))
        assert not config.accepts(Decimal("Infinity"))

    @pytest.mark.parametrize("min_price", [0, "-1", Decimal("0.00")])
    def test_site_configuration_rejects_non_positive_minimum(self, min_price):
        """Test a zero or negative minimum price is rejected."""
        with pytest.raises(ValueError, match="min_price must be positive"):
            SiteConfiguration(min_price=min_price)

    def test_site_configuration_is_frozen(self):
        """Test sequences become tuples and mappings read-only."""
        config = SiteConfiguration(price_selectors=[".price"], headers={"A": "1"}, extra={"k": "v"})

        assert config.price_selectors == (".price",)
        with pytest.raises(TypeError):
            config.headers["A"] = "2"
        with pytest.raises(TypeError):
            config.extra["k"] = "w"
