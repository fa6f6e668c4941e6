"""Markup acquisition: direct HTTP or rendered through the headless browser."""

from typing import Dict, Optional

import httpx
import structlog

from pricefetch.config import settings
from pricefetch.core.exceptions import AcquisitionFailedError
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.utils.render_pool import RenderPool

logger = structlog.get_logger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


class MarkupAcquirer:
    """Fetches page markup the way a site configuration asks for.

    Direct requests go through one shared ``httpx.AsyncClient``; rendered
    requests check a slot out of the ``RenderPool``. Neither path retries;
    every failure surfaces as ``AcquisitionFailedError``.

    Args:
        http_client: Client for direct requests; created lazily when omitted
        render_pool: Pool for rendered requests; rendering fails without one
        baseline_wait_ms: Settle time the renderer already waits; defaults
            to the pool's settle time
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        render_pool: Optional[RenderPool] = None,
        baseline_wait_ms: Optional[int] = None,
    ):
        self._client = http_client
        self._owns_client = http_client is None
        self._render_pool = render_pool
        if baseline_wait_ms is None:
            baseline_wait_ms = render_pool.settle_ms if render_pool else settings.RENDER_SETTLE_MS
        self._baseline_wait_ms = baseline_wait_ms

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_connections=settings.HTTP_MAX_CONNECTIONS),
                follow_redirects=True,
            )
        return self._client

    @staticmethod
    def build_headers(config: SiteConfiguration) -> Dict[str, str]:
        """Default headers, then site headers, then the site user agent."""
        headers = dict(DEFAULT_HEADERS)
        headers.update(config.headers)
        headers["User-Agent"] = config.user_agent or settings.DEFAULT_USER_AGENT
        return headers

    def extra_wait_ms(self, config: SiteConfiguration) -> int:
        """Wait beyond the renderer's own settle time."""
        return max(0, config.wait_after_load_ms - self._baseline_wait_ms)

    async def acquire(self, url: str, config: SiteConfiguration) -> str:
        """Return the page markup for ``url``.

        Raises:
            AcquisitionFailedError: Non-2xx status, network error, timeout or
                renderer failure
        """
        if config.requires_rendering:
            return await self._render(url, config)
        return await self._fetch_direct(url, config)

    async def _fetch_direct(self, url: str, config: SiteConfiguration) -> str:
        client = self._get_client()
        try:
            response = await client.get(
                url,
                headers=self.build_headers(config),
                timeout=config.timeout_seconds,
                follow_redirects=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("direct_fetch_failed", url=url, error=str(e), error_type=type(e).__name__)
            raise AcquisitionFailedError(url, f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            logger.warning("direct_fetch_bad_status", url=url, status_code=response.status_code)
            raise AcquisitionFailedError(url, f"HTTP {response.status_code}")

        logger.debug("direct_fetch_ok", url=url, size=len(response.text))
        return response.text

    async def _render(self, url: str, config: SiteConfiguration) -> str:
        if self._render_pool is None:
            raise AcquisitionFailedError(url, "rendering is not available")

        try:
            async with self._render_pool.checkout() as renderer:
                html = await renderer.render(
                    url,
                    timeout_ms=config.timeout_ms,
                    extra_wait_ms=self.extra_wait_ms(config),
                    headers=self.build_headers(config),
                )
        except Exception as e:
            logger.warning("render_failed", url=url, error=str(e), error_type=type(e).__name__)
            raise AcquisitionFailedError(url, f"{type(e).__name__}: {e}") from e

        logger.debug("render_ok", url=url, size=len(html))
        return html

    async def aclose(self) -> None:
        """Close the HTTP client if this acquirer created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
