"""PriceFetch: multi-strategy price extraction and fetch orchestration."""

__version__ = "0.1.0"
