"""PriceFetch -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pricefetch import __version__
from pricefetch.api.v1.router import api_v1_router
from pricefetch.config import settings
from pricefetch.fetchers.acquirer import MarkupAcquirer
from pricefetch.fetchers.orchestrator import FetchOrchestrator
from pricefetch.fetchers.register_profiles import register_all_profiles
from pricefetch.fetchers.utils.render_pool import get_render_pool

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    # Startup
    logger.info("Starting PriceFetch API server...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    logger.info("Registering site profiles...")
    registry = register_all_profiles()

    render_pool = get_render_pool() if settings.RENDER_ENABLED else None
    acquirer = MarkupAcquirer(render_pool=render_pool)
    app.state.orchestrator = FetchOrchestrator(registry, acquirer)

    # Launch the browser up front (skipped in tests; the pool also starts lazily)
    if render_pool is not None and settings.ENVIRONMENT != "test":
        try:
            await render_pool.start()
            logger.info(f"Render pool started with {render_pool.size} slot(s)")
        except Exception as e:
            logger.warning(f"Render pool failed to start (will retry on first render): {e}")
    elif render_pool is None:
        logger.info("Rendering disabled; JS-dependent sites will fall back to the generic provider")

    yield

    # Shutdown
    logger.info("Shutting down PriceFetch API server...")

    await acquirer.aclose()

    if render_pool is not None:
        try:
            await render_pool.stop()
            logger.info("Render pool stopped")
        except Exception as e:
            logger.warning(f"Error stopping render pool: {e}")


app = FastAPI(
    title="PriceFetch API",
    description="Multi-strategy e-commerce price extraction",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Register API v1 router
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "PriceFetch API",
        "version": __version__,
        "docs": "/docs" if settings.DEBUG else None,
        "fetch": "/api/v1/fetch",
    }
