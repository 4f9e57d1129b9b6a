"""
Traffic Filter
==============

Per-request allow/abort policy installed on every rendering page. Images never
change the serialized markup, and blocked URLs (analytics, chat widgets, ...)
only delay the network-idle completion signal.
"""

from enum import Enum
from typing import Any, Iterable

from spa_prerender.config.logging import get_logger

logger = get_logger(__name__)

BLOCKED_RESOURCE_TYPES = frozenset({"image"})


class FilterDecision(str, Enum):
    """What to do with an outgoing request."""
    ABORT = "abort"
    CONTINUE = "continue"


class TrafficFilter:
    """Request policy closing over the configured blocked URL substrings."""

    def __init__(self, blocked_urls: Iterable[str] = ()):
        self.blocked_urls = tuple(blocked_urls)

    def decide(self, resource_type: str, url: str) -> FilterDecision:
        """First match wins: blocked resource type, blocked substring, then continue."""
        if resource_type in BLOCKED_RESOURCE_TYPES:
            return FilterDecision.ABORT
        if any(pattern in url for pattern in self.blocked_urls):
            return FilterDecision.ABORT
        return FilterDecision.CONTINUE

    async def handle(self, route: Any) -> None:
        """Playwright route handler."""
        request = route.request
        if self.decide(request.resource_type, request.url) is FilterDecision.ABORT:
            logger.debug("Request blocked", url=request.url, resource_type=request.resource_type)
            await route.abort()
        else:
            await route.continue_()
