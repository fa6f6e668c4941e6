"""Retry policy for starting the headless browser.

Fetches themselves are never retried here; a failed fetch falls through to
the next provider instead.
"""

import logging

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pricefetch.config import settings

logger = structlog.get_logger(__name__)


# Browser launch can fail transiently (cold container, missing shm).
browser_launch_retry = retry(
    stop=stop_after_attempt(settings.RENDER_LAUNCH_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((PlaywrightError, PlaywrightTimeoutError, OSError)),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
