"""Custom exception classes for the price fetch engine."""

from typing import List, Optional, Sequence


class PriceFetchError(Exception):
    """Base exception for all PriceFetch errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidInputError(PriceFetchError):
    """Raised for a malformed fetch request (missing URL and the like)."""


class UnsupportedSourceError(InvalidInputError):
    """Raised when a request names a source type this engine does not handle."""

    def __init__(self, source_type: str):
        self.source_type = source_type
        super().__init__(f"Unsupported source type: '{source_type}'")


class AcquisitionFailedError(PriceFetchError):
    """Raised when page markup could not be retrieved."""

    def __init__(self, url: str, cause: str):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to acquire {url}: {cause}")


class NotANumberError(PriceFetchError):
    """Raised by the normalizer when no numeric pattern matches."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Could not parse a number from '{raw}'")


class NoCandidateFoundError(PriceFetchError):
    """Raised when every strategy of a provider came back empty."""

    def __init__(self, provider: str, url: str, attempted: Sequence[str] = ()):
        self.provider = provider
        self.url = url
        self.attempted = list(attempted)
        super().__init__(f"No price candidate found by {provider} for {url}")


class RenderPoolError(PriceFetchError):
    """Raised when a renderer slot cannot be checked out."""


class AllProvidersExhaustedError(PriceFetchError):
    """Raised when every eligible provider failed for a URL."""

    def __init__(self, url: str, attempts: Optional[List] = None):
        self.url = url
        self.attempts = list(attempts or [])
        tried = ", ".join(a.provider for a in self.attempts) or "none"
        super().__init__(f"All providers failed for {url} (tried: {tried})")

    @property
    def causes(self) -> List[PriceFetchError]:
        """Underlying errors in the order the providers were tried."""
        return [a.error for a in self.attempts if a.error is not None]

    @property
    def last_error(self) -> Optional[PriceFetchError]:
        causes = self.causes
        return causes[-1] if causes else None
