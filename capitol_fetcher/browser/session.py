"""
Shared headless browser lifecycle.

One browser per process, launched lazily on first use and reused by every fetch.
The manager is passed into the pipeline, so tests can hand it a fake launcher.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from playwright.async_api import async_playwright

from ..errors import AcquisitionError

logger = logging.getLogger(__name__)


ENGINE_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
]


@dataclass
class RenderSession:
    """A launched browser plus the playwright driver that owns it."""

    browser: Any
    playwright: Any = None

    def is_live(self) -> bool:
        return bool(self.browser.is_connected())

    async def new_page(self, **options):
        return await self.browser.new_page(**options)

    async def close(self) -> None:
        try:
            await self.browser.close()
        finally:
            if self.playwright is not None:
                await self.playwright.stop()


async def launch_chromium(*, headless: bool = True) -> RenderSession:
    pw = await async_playwright().start()
    try:
        browser = await pw.chromium.launch(headless=headless, args=ENGINE_ARGS)
    except BaseException:
        await pw.stop()
        raise
    return RenderSession(browser=browser, playwright=pw)


class RenderSessionManager:
    """
    Owns the single shared RenderSession.

    acquire_session() uses double-checked locking so concurrent first callers share
    one launch. A failed launch leaves the slot empty; the next call tries again.
    """

    def __init__(
        self,
        *,
        launcher: Callable[[], Awaitable[Any]] | None = None,
        headless: bool = True,
        log=None,
    ):
        self._launcher = launcher or (lambda: launch_chromium(headless=headless))
        self._lock = asyncio.Lock()
        self._session = None
        self._log = log or logger

    @property
    def has_session(self) -> bool:
        return self._session is not None

    async def acquire_session(self):
        session = self._session
        if session is not None and session.is_live():
            return session
        async with self._lock:
            # Double-check after acquiring lock
            session = self._session
            if session is not None and session.is_live():
                return session
            if session is not None:
                self._session = None
                await self._close_quietly(session)

            self._log.info("Initializing headless browser session")
            try:
                session = await self._launcher()
            except Exception as e:
                raise AcquisitionError(stage="session", url=None, cause=e) from e
            self._session = session
            return session

    async def close_session(self) -> None:
        """Release the browser. No-op when nothing was launched."""
        async with self._lock:
            session, self._session = self._session, None
        if session is None:
            return
        self._log.info("Closing headless browser session")
        await self._close_quietly(session)

    async def _close_quietly(self, session) -> None:
        try:
            await session.close()
        except Exception as e:
            self._log.warning(f"browser close failed: {e}")
