"""One provider run: acquire the page, run the strategy chain, build the sample."""

from typing import Protocol

import structlog

from pricefetch.core.exceptions import AcquisitionFailedError, NoCandidateFoundError
from pricefetch.fetchers.base import ExtractionContext, FetchRequest, MetricSample, ProviderAttempt
from pricefetch.fetchers.profile import SiteProfile
from pricefetch.fetchers.site_config import SiteConfiguration
from pricefetch.fetchers.strategies.base import run_chain

logger = structlog.get_logger(__name__)


class Acquirer(Protocol):
    async def acquire(self, url: str, config: SiteConfiguration) -> str: ...


async def run_provider(
    profile: SiteProfile,
    request: FetchRequest,
    acquirer: Acquirer,
) -> ProviderAttempt:
    """Run ``profile`` against the request URL.

    Acquisition failures and empty strategy chains come back as a failed
    ``ProviderAttempt`` so the caller can decide whether to fall back.
    """
    url = request.url
    log = logger.bind(provider=profile.name, url=url)
    log.info("provider_started", method=profile.fetch_method)

    try:
        html = await acquirer.acquire(url, profile.config)
    except AcquisitionFailedError as e:
        log.warning("provider_acquisition_failed", error=e.message)
        return ProviderAttempt(provider=profile.name, error=e)

    context = ExtractionContext(url=url, html=html, params=request.params)
    outcome = run_chain(profile.strategies, context, profile.config, provider=profile.name)

    if not outcome.found:
        error = NoCandidateFoundError(profile.name, url, outcome.attempted)
        log.warning("provider_no_candidate", attempted=list(outcome.attempted))
        return ProviderAttempt(provider=profile.name, error=error)

    sample = MetricSample(
        value=outcome.price,
        unit=request.currency or profile.config.default_currency,
    )
    log.info(
        "provider_succeeded",
        strategy=outcome.strategy,
        price=str(sample.value),
        unit=sample.unit,
    )
    return ProviderAttempt(provider=profile.name, sample=sample)
