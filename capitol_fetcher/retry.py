from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


async def with_retry(
    attempt: Callable[[], Awaitable[T]],
    *,
    max_retries: int,
    delay_ms: float,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    log=None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run `attempt` up to `max_retries` times (0 means one attempt, no retry).

    Failures listed in `retry_on` are logged and followed by a fixed `delay_ms` pause,
    except after the final attempt. Anything else propagates immediately.
    When every attempt fails the last error is re-raised unchanged.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")
    log = log or logger
    attempts = max(int(max_retries), 1)
    last_err: BaseException | None = None

    for i in range(attempts):
        try:
            return await attempt()
        except retry_on as e:
            last_err = e
            log.warning(f"Attempt {i + 1}/{attempts} failed: {e}")
            if i + 1 < attempts:
                await sleep(delay_ms / 1000.0)

    assert last_err is not None
    raise last_err
