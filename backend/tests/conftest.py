"""Pytest configuration and shared fixtures."""

from typing import List, Optional, Union

import pytest

from pricefetch.core.exceptions import AcquisitionFailedError
from pricefetch.fetchers.orchestrator import FetchOrchestrator
from pricefetch.fetchers.register_profiles import register_all_profiles
from pricefetch.fetchers.registry import ProviderRegistry
from pricefetch.fetchers.site_config import SiteConfiguration


META_PRICE_HTML = """
<html>
<head>
  <title>Widget</title>
  <meta property="product:price:amount" content="49.99">
  <meta property="product:price:currency" content="USD">
</head>
<body><h1>Widget</h1></body>
</html>
"""

FREE_TEXT_HTML = """
<html>
<body>
  <h1>Widget</h1>
  <p>Now only $1,299.99 while stocks last</p>
</body>
</html>
"""

JSON_LD_HTML = """
<html>
<head>
  <script type="application/ld+json">
  {"@context": "https://schema.org", "@type": "Product", "name": "Phone",
   "offers": {"@type": "Offer", "price": 1200, "priceCurrency": "TRY"}}
  </script>
</head>
<body><h1>Phone</h1></body>
</html>
"""


class FakeAcquirer:
    """Acquirer double keyed on fetch mode.

    ``direct`` and ``rendered`` hold the markup to return, an exception to
    raise, or None for a timeout-style ``AcquisitionFailedError``.
    """

    def __init__(
        self,
        direct: Optional[Union[str, Exception]] = None,
        rendered: Optional[Union[str, Exception]] = None,
    ):
        self.direct = direct
        self.rendered = rendered
        self.calls: List[str] = []

    async def acquire(self, url: str, config: SiteConfiguration) -> str:
        mode = "rendered" if config.requires_rendering else "direct"
        self.calls.append(mode)
        outcome = getattr(self, mode)
        if outcome is None:
            raise AcquisitionFailedError(url, f"{mode} fetch timed out")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def registry() -> ProviderRegistry:
    """Fresh registry holding every built-in profile."""
    return register_all_profiles(ProviderRegistry())


@pytest.fixture
def make_acquirer():
    return FakeAcquirer


@pytest.fixture
def make_orchestrator(registry):
    """Build an orchestrator over the built-in profiles and a fake acquirer."""

    def _make(direct=None, rendered=None):
        acquirer = FakeAcquirer(direct=direct, rendered=rendered)
        return FetchOrchestrator(registry, acquirer), acquirer

    return _make


@pytest.fixture
def meta_price_html() -> str:
    return META_PRICE_HTML


@pytest.fixture
def free_text_html() -> str:
    return FREE_TEXT_HTML


@pytest.fixture
def json_ld_html() -> str:
    return JSON_LD_HTML
