from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Mapping

from ..errors import AcquisitionError

logger = logging.getLogger(__name__)


VIEWPORT = {"width": 1920, "height": 1080}
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

ALLOW = "allow"
BLOCK = "block"


@dataclass(frozen=True)
class ResourcePolicy:
    """
    resource type -> allow|block, evaluated for every subresource request.

    Types not listed fall back to `default`.
    """

    rules: Mapping[str, str] = field(
        default_factory=lambda: {"image": BLOCK, "stylesheet": BLOCK, "font": BLOCK}
    )
    default: str = ALLOW

    def __post_init__(self):
        bad = {k: v for k, v in self.rules.items() if v not in (ALLOW, BLOCK)}
        if bad or self.default not in (ALLOW, BLOCK):
            raise ValueError(f"policy actions must be {ALLOW!r} or {BLOCK!r}: {bad or self.default}")

    def allows(self, resource_type: str) -> bool:
        return self.rules.get(resource_type, self.default) == ALLOW


DEFAULT_POLICY = ResourcePolicy()


async def route_request(route, policy: ResourcePolicy) -> None:
    if policy.allows(route.request.resource_type):
        await route.continue_()
    else:
        await route.abort()


@asynccontextmanager
async def acquire_page(session, *, policy: ResourcePolicy = DEFAULT_POLICY, log=None):
    """
    Open a configured page on `session` and close it exactly once on exit.

    Close failures are logged and never replace the error (or result) of the body.
    """
    log = log or logger
    try:
        page = await session.new_page(viewport=VIEWPORT, user_agent=USER_AGENT)
    except Exception as e:
        raise AcquisitionError(stage="page", url=None, cause=e) from e

    try:
        async def _handle(route):
            await route_request(route, policy)

        await page.route("**/*", _handle)
        yield page
    finally:
        try:
            await page.close()
        except Exception as e:
            log.warning(f"page close failed: {e}")
