"""Pydantic schemas for the fetch endpoints.

Wire names are camelCase (``sourceType``, ``observedAt``); Python names stay
snake_case and either form is accepted on input.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from pricefetch.fetchers.base import MetricSample, ProviderAttempt
from pricefetch.fetchers.orchestrator import ProviderAnalysis, ProviderInfo, ProviderStats


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class FetchRequestBody(CamelModel):
    """Inbound fetch request."""

    source_type: str = Field(
        ...,
        description="Kind of source to fetch; only ECOMMERCE_PRODUCT is handled",
        examples=["ECOMMERCE_PRODUCT"],
    )
    params: Dict[str, str] = Field(
        default_factory=dict,
        description="Target URL under 'url' plus optional overrides such as 'currency'",
        examples=[{"url": "https://www.trendyol.com/marka/urun-p-123456", "currency": "TRY"}],
    )


class ValidateRequest(CamelModel):
    url: str = Field("", description="Product URL to check", examples=["https://www.n11.com/urun/abc-123"])

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return (v or "").strip()


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class MetricSampleResponse(CamelModel):
    """Price sample returned by a successful fetch."""

    metric: str = "price"
    value: Decimal
    unit: str
    observed_at: datetime

    @field_serializer("value", when_used="json")
    def value_as_number(self, value: Decimal) -> float:
        return float(value)

    @classmethod
    def from_sample(cls, sample: MetricSample) -> "MetricSampleResponse":
        return cls(
            metric=sample.metric,
            value=sample.value,
            unit=sample.unit,
            observed_at=sample.observed_at,
        )


class ProviderAttemptDetail(CamelModel):
    provider: str
    outcome: str
    error: Optional[str] = None

    @classmethod
    def from_attempt(cls, attempt: ProviderAttempt) -> "ProviderAttemptDetail":
        return cls(
            provider=attempt.provider,
            outcome=attempt.kind,
            error=attempt.error.message if attempt.error else None,
        )


class ProviderInfoResponse(CamelModel):
    name: str
    domains: List[str]
    priority: int
    requires_rendering: bool
    default_currency: str
    fetch_method: str
    description: str = ""

    @classmethod
    def from_info(cls, info: ProviderInfo) -> "ProviderInfoResponse":
        return cls(
            name=info.name,
            domains=list(info.domains),
            priority=info.priority,
            requires_rendering=info.requires_rendering,
            default_currency=info.default_currency,
            fetch_method=info.fetch_method,
            description=info.description,
        )


class BestProviderResponse(CamelModel):
    url: str
    best_provider: Optional[str] = None
    supported: bool


class ValidateResponse(CamelModel):
    valid: bool
    url: Optional[str] = None
    best_provider: Optional[str] = None
    supported: Optional[bool] = None
    reason: Optional[str] = None


class AnalysisResponse(CamelModel):
    url: str
    domain: str
    best_provider: Optional[str] = None
    claiming_providers: List[str]
    fetch_method: Optional[str] = None
    supported: bool

    @classmethod
    def from_analysis(cls, analysis: ProviderAnalysis) -> "AnalysisResponse":
        return cls(
            url=analysis.url,
            domain=analysis.domain,
            best_provider=analysis.best_provider,
            claiming_providers=list(analysis.claiming_providers),
            fetch_method=analysis.fetch_method,
            supported=analysis.supported,
        )


class ProviderStatsResponse(CamelModel):
    total_providers: int
    rendered_providers: int
    direct_providers: int
    supported_domains: int

    @classmethod
    def from_stats(cls, stats: ProviderStats) -> "ProviderStatsResponse":
        return cls(
            total_providers=stats.total_providers,
            rendered_providers=stats.rendered_providers,
            direct_providers=stats.direct_providers,
            supported_domains=stats.supported_domains,
        )
