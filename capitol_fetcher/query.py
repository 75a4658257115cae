"""
Upstream query building and cache key derivation.

All four query shapes (all trades, by size, by politician, by ticker) go through
build_query: the selector is just one more optional parameter.
"""
from __future__ import annotations

from urllib.parse import urlencode, urlsplit

from .models import TradeFilter


BASE_URL = "https://www.capitoltrades.com/trades"
CACHE_KEY_PREFIX = "__cache__"

# TradeFilter attribute -> upstream parameter name
_PARAM_NAMES = {
    "page": "page",
    "limit": "limit",
    "sort_by": "sortBy",
    "order": "order",
    "start_date": "startDate",
    "end_date": "endDate",
    "size": "size",
    "politician_id": "politician",
    "ticker": "ticker",
}


def _param_value(value) -> str:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def build_query(filters: TradeFilter) -> list[tuple[str, str]]:
    """Upstream parameters, unset values dropped, sorted by parameter name."""
    params = []
    for attr, name in _PARAM_NAMES.items():
        value = getattr(filters, attr)
        if value is None or value == "":
            continue
        params.append((name, _param_value(value)))
    return sorted(params)


def build_url(filters: TradeFilter, *, base_url: str = BASE_URL) -> str:
    return f"{base_url}?{urlencode(build_query(filters))}"


def cache_key(filters: TradeFilter, *, base_url: str = BASE_URL) -> str:
    """
    Deterministic cache key: upstream host and path plus canonical (sorted, urlencoded) query.

    urlencode escapes '&' and '=' inside values, so distinct filters cannot collide.
    """
    parts = urlsplit(base_url)
    path = parts.path or "/"
    return f"{CACHE_KEY_PREFIX}{parts.netloc}{path}?{urlencode(build_query(filters))}"
