"""
Fetch pipeline: query -> cache lookup -> (miss) browser fetch with retry -> cache store.

Per call:
  BUILD_QUERY -> CACHE_LOOKUP -> hit: done
                              -> miss: RETRY_LOOP(acquire page, navigate, wait for rows,
                                       extract, release page) -> STORE_CACHE -> done

Concurrent misses for the same key are not coalesced; both fetch.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Awaitable, Callable

from .browser.page import DEFAULT_POLICY, ResourcePolicy, acquire_page
from .browser.session import RenderSessionManager
from .cache import ResponseCache
from .config import FetcherConfig
from .errors import AcquisitionError, FetchFailedError, FetcherError
from .extract import ROW_SELECTOR, extract_records
from .models import FetchResult, TradeFilter
from .query import BASE_URL, build_url, cache_key
from .retry import with_retry

logger = logging.getLogger(__name__)


class TradesFetcher:
    """
    Entry point for trade queries.

    The session manager and cache are injected so tests (and embedding services)
    can supply their own. Use as an async context manager, or call close() at shutdown.
    """

    def __init__(
        self,
        *,
        config: FetcherConfig | None = None,
        sessions: RenderSessionManager | None = None,
        cache: ResponseCache | None = None,
        base_url: str = BASE_URL,
        policy: ResourcePolicy = DEFAULT_POLICY,
        log=None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config or FetcherConfig()
        self._log = log or logger
        self._sessions = sessions or RenderSessionManager(headless=self.config.headless, log=self._log)
        self._cache = cache if cache is not None else ResponseCache()
        self._base_url = base_url
        self._policy = policy
        self._sleep = sleep

    async def __aenter__(self) -> "TradesFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._sessions.close_session()

    def default_filter(self) -> TradeFilter:
        return TradeFilter(limit=self.config.default_page_size)

    # -- query shapes ---------------------------------------------------------

    async def get_all_trades(self, filters: TradeFilter | None = None, *, skip_cache: bool = False) -> FetchResult:
        return await self.fetch(filters or self.default_filter(), skip_cache=skip_cache)

    async def get_trades_by_size(self, size: str, filters: TradeFilter | None = None, *, skip_cache: bool = False) -> FetchResult:
        return await self.fetch((filters or self.default_filter()).for_size(size), skip_cache=skip_cache)

    async def get_trades_by_politician(self, politician_id: str, filters: TradeFilter | None = None, *, skip_cache: bool = False) -> FetchResult:
        return await self.fetch((filters or self.default_filter()).for_politician(politician_id), skip_cache=skip_cache)

    async def get_trades_by_ticker(self, ticker: str, filters: TradeFilter | None = None, *, skip_cache: bool = False) -> FetchResult:
        return await self.fetch((filters or self.default_filter()).for_ticker(ticker), skip_cache=skip_cache)

    # -- admin ----------------------------------------------------------------

    def clear_cache(self) -> dict:
        self._log.info("Clearing entire cache")
        return self._cache.clear()

    def cache_stats(self) -> dict:
        return self._cache.stats()

    def config_snapshot(self) -> dict:
        return self.config.snapshot(cache=self._cache)

    # -- pipeline -------------------------------------------------------------

    def cache_bypassed(self, skip_cache: bool = False) -> bool:
        if not self.config.cache_enabled:
            return True
        return bool(skip_cache) and self.config.is_development

    async def fetch(self, filters: TradeFilter, *, skip_cache: bool = False) -> FetchResult:
        url = build_url(filters, base_url=self._base_url)
        key = cache_key(filters, base_url=self._base_url)
        bypass = self.cache_bypassed(skip_cache)

        if bypass:
            self._log.debug("Cache skipped")
        else:
            cached = self._cache.get(key)
            if cached is not None:
                self._log.debug(f"Cache hit for {key}")
                return FetchResult.from_dict(json.loads(cached))
            self._log.debug(f"Cache miss for {key}")

        self._log.info(f"Fetching trades from {url}")
        try:
            result = await with_retry(
                lambda: self._fetch_once(url, filters),
                max_retries=self.config.max_retries,
                delay_ms=self.config.retry_delay_ms,
                retry_on=(AcquisitionError,),
                log=self._log,
                sleep=self._sleep,
            )
        except FetcherError as e:
            self._log.error(f"Fetch failed for {url}: {e}")
            raise FetchFailedError(url=url, cause=e) from e

        if not bypass:
            self._store(key, result)
        return result

    async def _fetch_once(self, url: str, filters: TradeFilter) -> FetchResult:
        session = await self._sessions.acquire_session()
        timeout = self.config.navigation_timeout_ms
        async with acquire_page(session, policy=self._policy, log=self._log) as page:
            try:
                await page.goto(url, wait_until="networkidle", timeout=timeout)
            except Exception as e:
                raise AcquisitionError(stage="navigate", url=url, cause=e) from e
            try:
                await page.wait_for_selector(ROW_SELECTOR, timeout=timeout)
                document = await page.content()
            except Exception as e:
                raise AcquisitionError(stage="wait", url=url, cause=e) from e
            records = extract_records(document)
        return FetchResult(page=filters.page, limit=filters.limit, records=tuple(records))

    def _store(self, key: str, result: FetchResult) -> None:
        ttl = self.config.cache_ttl_seconds
        try:
            self._cache.put(key, json.dumps(result.to_dict(), ensure_ascii=False), ttl)
        except Exception as e:
            self._log.warning(f"Cache write failed for {key}: {e}")
            return
        self._log.debug(f"Caching response for {key} with TTL {ttl}s")
