"""Core data structures passed between the orchestrator, acquirer and strategies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from functools import cached_property
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from bs4 import BeautifulSoup

from pricefetch.core.exceptions import (
    AcquisitionFailedError,
    NoCandidateFoundError,
    PriceFetchError,
)


@dataclass(frozen=True)
class FetchRequest:
    """Inbound fetch request.

    ``params["url"]`` is the target page; other keys are overrides such as
    ``currency``. Params are copied into a read-only mapping on creation.
    """

    source_type: str
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params or {})))

    @property
    def url(self) -> str:
        return (self.params.get("url") or "").strip()

    @property
    def currency(self) -> Optional[str]:
        value = (self.params.get("currency") or "").strip()
        return value.upper() or None


@dataclass(frozen=True)
class ExtractionContext:
    """Acquired page handed to every strategy of one provider run.

    The parsed ``document`` is built lazily once and shared, so strategies
    must only query it.
    """

    url: str
    html: str
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params or {})))

    @cached_property
    def document(self) -> BeautifulSoup:
        return BeautifulSoup(self.html or "", "html.parser")


@dataclass(frozen=True)
class MetricSample:
    """Terminal result of a successful fetch."""

    value: Decimal
    unit: str
    observed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metric: str = "price"

    def __post_init__(self):
        """Validate data after initialization."""
        if self.value is None or self.value <= 0:
            raise ValueError("value must be a positive Decimal")
        if not self.unit:
            raise ValueError("unit is required")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "value": self.value,
            "unit": self.unit,
            "observedAt": self.observed_at.isoformat(),
        }


@dataclass(frozen=True)
class ProviderAttempt:
    """Outcome of running one provider: a sample or the reason it failed."""

    provider: str
    sample: Optional[MetricSample] = None
    error: Optional[PriceFetchError] = None

    def __post_init__(self):
        if (self.sample is None) == (self.error is None):
            raise ValueError("exactly one of sample or error is required")

    @property
    def ok(self) -> bool:
        return self.sample is not None

    @property
    def kind(self) -> str:
        """'success', 'acquisition_failed', 'no_candidate' or 'error'."""
        if self.ok:
            return "success"
        if isinstance(self.error, AcquisitionFailedError):
            return "acquisition_failed"
        if isinstance(self.error, NoCandidateFoundError):
            return "no_candidate"
        return "error"
