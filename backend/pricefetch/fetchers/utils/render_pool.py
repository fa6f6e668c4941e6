"""Bounded pool of Playwright renderers.

The browser is the one expensive shared resource of the engine. It is
launched once, split into ``size`` renderer slots (one browser context
each) and handed out through ``checkout()``, which always puts the slot
back, so a slot never serves two navigations at once.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, List, Mapping, Optional

import structlog
from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from pricefetch.config import settings
from pricefetch.core.exceptions import RenderPoolError
from pricefetch.fetchers.utils.retry import browser_launch_retry
from pricefetch.fetchers.utils.user_agents import get_random_user_agent

logger = structlog.get_logger(__name__)


class PageRenderer:
    """One renderer slot: renders a URL and returns the final DOM as HTML."""

    def __init__(self, context: BrowserContext, settle_ms: int):
        self._context = context
        self._settle_ms = settle_ms

    async def render(
        self,
        url: str,
        timeout_ms: int,
        extra_wait_ms: int = 0,
        headers: Optional[Mapping[str, str]] = None,
    ) -> str:
        """Navigate, wait the settle time plus ``extra_wait_ms``, serialize the DOM."""
        page = await self._context.new_page()
        try:
            if headers:
                await page.set_extra_http_headers(dict(headers))
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            await page.wait_for_timeout(self._settle_ms + max(0, extra_wait_ms))
            return await page.content()
        finally:
            await page.close()

    async def close(self) -> None:
        await self._context.close()


RendererFactory = Callable[[], Awaitable[PageRenderer]]


class RenderPool:
    """Owns the browser and a fixed number of renderer slots.

    Args:
        size: Number of slots (concurrent renders), at least 1
        settle_ms: Baseline wait after every navigation
        headless: Run the browser headless
        checkout_timeout_s: Max wait for a free slot
        renderer_factory: Coroutine function creating a slot; when given,
            no browser is launched by the pool itself
    """

    def __init__(
        self,
        size: int = 1,
        settle_ms: int = 1000,
        headless: bool = True,
        checkout_timeout_s: float = 60.0,
        renderer_factory: Optional[RendererFactory] = None,
    ):
        if size < 1:
            raise ValueError("render pool size must be at least 1")
        self._size = size
        self._settle_ms = settle_ms
        self._headless = headless
        self._checkout_timeout_s = checkout_timeout_s
        self._renderer_factory = renderer_factory
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._slots: List[PageRenderer] = []
        self._idle: Optional[asyncio.Queue] = None
        self._lock = asyncio.Lock()

    @property
    def size(self) -> int:
        return self._size

    @property
    def settle_ms(self) -> int:
        return self._settle_ms

    @property
    def is_running(self) -> bool:
        return self._idle is not None

    @property
    def available(self) -> int:
        """Slots not currently checked out."""
        return self._idle.qsize() if self._idle is not None else 0

    async def start(self) -> None:
        """Launch the browser and create the slots. Safe to call twice."""
        async with self._lock:
            if self._idle is not None:
                return

            if self._renderer_factory is None:
                await self._launch_browser()
                factory = self._new_browser_renderer
            else:
                factory = self._renderer_factory

            idle: asyncio.Queue = asyncio.Queue()
            try:
                for _ in range(self._size):
                    renderer = await factory()
                    self._slots.append(renderer)
                    idle.put_nowait(renderer)
            except Exception:
                await self._teardown()
                raise

            self._idle = idle
            logger.info("render_pool_started", size=self._size, headless=self._headless)

    async def stop(self) -> None:
        """Close every slot, the browser and Playwright."""
        async with self._lock:
            if self._idle is None and self._browser is None and not self._slots:
                return
            await self._teardown()
            logger.info("render_pool_stopped")

    @asynccontextmanager
    async def checkout(self, timeout_s: Optional[float] = None) -> AsyncIterator[PageRenderer]:
        """Borrow a slot for the duration of the ``async with`` block.

        Starts the pool on first use. The slot is returned on every exit
        path, including exceptions raised inside the block.

        Raises:
            RenderPoolError: If no slot frees up within the timeout
        """
        if self._idle is None:
            await self.start()
        idle = self._idle
        if idle is None:
            raise RenderPoolError("Render pool is not running")

        wait_s = self._checkout_timeout_s if timeout_s is None else timeout_s
        try:
            renderer = await asyncio.wait_for(idle.get(), timeout=wait_s)
        except asyncio.TimeoutError:
            raise RenderPoolError(f"No renderer became free within {wait_s}s")

        try:
            yield renderer
        finally:
            idle.put_nowait(renderer)

    @browser_launch_retry
    async def _launch_browser(self) -> None:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self._headless,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--disable-dev-shm-usage",
                    "--no-sandbox",
                ],
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info("browser_started", headless=self._headless)

    async def _new_browser_renderer(self) -> PageRenderer:
        context = await self._browser.new_context(
            user_agent=get_random_user_agent(),
            viewport={"width": 1920, "height": 1080},
            locale="tr-TR",
            java_script_enabled=True,
        )
        # Images and fonts never carry the price
        await context.route(
            "**/*.{png,jpg,jpeg,gif,svg,webp,woff,woff2,ttf,eot}",
            lambda route: route.abort(),
        )
        return PageRenderer(context, self._settle_ms)

    async def _teardown(self) -> None:
        for renderer in self._slots:
            try:
                await renderer.close()
            except Exception as e:
                logger.warning("renderer_close_failed", error=str(e))
        self._slots.clear()
        self._idle = None

        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


# Singleton instance
_render_pool: Optional[RenderPool] = None


def get_render_pool() -> RenderPool:
    """Get the global RenderPool singleton built from settings."""
    global _render_pool
    if _render_pool is None:
        _render_pool = RenderPool(
            size=settings.get_render_pool_size(),
            settle_ms=settings.RENDER_SETTLE_MS,
            headless=settings.RENDER_HEADLESS,
            checkout_timeout_s=settings.RENDER_CHECKOUT_TIMEOUT_S,
        )
    return _render_pool
