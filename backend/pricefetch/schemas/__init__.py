"""Pydantic schemas for the PriceFetch API."""

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

__all__ = [
    "AnalysisResponse",
    "BestProviderResponse",
    "ErrorDetail",
    "FetchRequestBody",
    "MetricSampleResponse",
    "ProviderAttemptDetail",
    "ProviderInfoResponse",
    "ProviderStatsResponse",
    "ValidateRequest",
    "ValidateResponse",
]
