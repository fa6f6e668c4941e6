"""Fetch endpoints: run a price fetch and inspect provider routing."""

from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from pricefetch.core.exceptions import AllProvidersExhaustedError, InvalidInputError
from pricefetch.dependencies import get_orchestrator
from pricefetch.fetchers.base import FetchRequest
from pricefetch.fetchers.orchestrator import FetchOrchestrator
from pricefetch.schemas.common import ErrorDetail
from pricefetch.schemas.fetch import (
    AnalysisResponse,
    BestProviderResponse,
    FetchRequestBody,
    MetricSampleResponse,
    ProviderAttemptDetail,
    ProviderInfoResponse,
    ProviderStatsResponse,
    ValidateRequest,
    ValidateResponse,
)

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post("", response_model=MetricSampleResponse)
async def fetch_price(
    body: FetchRequestBody,
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
) -> MetricSampleResponse:
    """Fetch the current price of a product page.

    Returns 400 for an unsupported source type or a missing URL and 502
    when every provider failed; the 502 body lists each provider attempt.
    """
    request = FetchRequest(source_type=body.source_type, params=body.params)
    try:
        sample = await orchestrator.fetch(request)
    except InvalidInputError as e:
        logger.info("fetch_rejected", source_type=body.source_type, reason=e.message)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorDetail(code="invalid_input", message=e.message).model_dump(),
        )
    except AllProvidersExhaustedError as e:
        attempts = [ProviderAttemptDetail.from_attempt(a).model_dump(by_alias=True) for a in e.attempts]
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=ErrorDetail(code="fetch_failed", message=e.message, attempts=attempts).model_dump(),
        )
    return MetricSampleResponse.from_sample(sample)


@router.get("/supported-sources", response_model=List[str])
async def supported_sources(
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
) -> List[str]:
    return [orchestrator.SOURCE_TYPE]


@router.get("/providers", response_model=List[ProviderInfoResponse])
async def list_providers(
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
) -> List[ProviderInfoResponse]:
    """Registered providers, best priority first."""
    return [ProviderInfoResponse.from_info(info) for info in orchestrator.available_providers()]


@router.get("/best-provider", response_model=BestProviderResponse)
async def best_provider(
    url: str = Query(..., min_length=1),
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
) -> BestProviderResponse:
    return BestProviderResponse(
        url=url,
        best_provider=orchestrator.best_provider_name(url),
        supported=orchestrator.is_url_supported(url),
    )


@router.get("/analyze", response_model=AnalysisResponse)
async def analyze_url(
    url: str = Query(..., min_length=1),
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
) -> AnalysisResponse:
    """Show how a URL would be routed without fetching it."""
    return AnalysisResponse.from_analysis(orchestrator.analyze(url))


@router.post("/validate", response_model=ValidateResponse, response_model_exclude_none=True)
async def validate_url(
    body: ValidateRequest,
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
):
    """Check whether a URL can be handled and by which provider."""
    if not body.url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ValidateResponse(valid=False, reason="URL is required").model_dump(
                by_alias=True, exclude_none=True
            ),
        )
    return ValidateResponse(
        valid=True,
        url=body.url,
        best_provider=orchestrator.best_provider_name(body.url),
        supported=orchestrator.is_url_supported(body.url),
    )


@router.get("/stats", response_model=ProviderStatsResponse)
async def provider_stats(
    orchestrator: FetchOrchestrator = Depends(get_orchestrator),
) -> ProviderStatsResponse:
    return ProviderStatsResponse.from_stats(orchestrator.system_stats())
