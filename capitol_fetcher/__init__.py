"""
capitol_fetcher

Trade disclosure collection from Capitol Trades, served through an in-memory TTL cache.

Design goals:
- One shared headless browser, one short-lived page per fetch
- Bounded retry with fixed delay (no exponential backoff)
- Cache stores serialized bodies only (callers cannot corrupt it)
- Readability first
"""

from .config import FetcherConfig
from .errors import (
    AcquisitionError,
    ExtractionError,
    FetchFailedError,
    FetcherError,
    ValidationError,
)
from .models import FetchResult, TradeFilter, TradeRecord
from .pipeline import TradesFetcher

__all__ = [
    "FetcherConfig",
    "TradesFetcher",
    "TradeFilter",
    "TradeRecord",
    "FetchResult",
    "FetcherError",
    "ValidationError",
    "AcquisitionError",
    "ExtractionError",
    "FetchFailedError",
]
