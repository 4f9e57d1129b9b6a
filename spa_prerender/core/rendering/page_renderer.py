"""
Page Renderer
=============

Renders a single route: navigates an isolated browser page to its URL, waits
for the completion signal and serializes the resulting DOM.
"""

import time
from typing import Any, Optional

from playwright.async_api import Browser

from spa_prerender.config.logging import get_logger
from spa_prerender.core.errors import RouteRenderError
from spa_prerender.core.rendering.traffic_filter import TrafficFilter
from spa_prerender.models.schemas import GotoOptions, RenderResult

logger = get_logger(__name__)


class PageRenderer:
    """Renders routes against a shared browser, one cold context per render."""

    def __init__(self, browser: Browser, goto_options: Optional[GotoOptions] = None):
        self.browser = browser
        self.goto_options = goto_options or GotoOptions()
        self.traffic_filter = TrafficFilter(self.goto_options.blocked_urls)
        self.logger: Any = logger.bind(component="page_renderer")

    async def render(self, url: str, route: Optional[str] = None) -> RenderResult:
        """
        Render one URL.

        Args:
            url: Absolute URL to navigate to
            route: Route the URL was built from, defaults to the URL

        Returns:
            RenderResult that is either rendered (non-empty HTML) or empty

        Raises:
            RouteRenderError: If navigation or serialization fails, or the
                server answers with an error status
        """
        route = route or url
        started = time.perf_counter()
        context = None

        try:
            # No cookies, storage or cache shared with any other render
            context = await self.browser.new_context()
            page = await context.new_page()
            try:
                await page.route("**/*", self.traffic_filter.handle)
                response = await page.goto(url, **self.goto_options.navigation_kwargs())
                html = await page.content()
            finally:
                await page.close()
        except Exception as e:
            self.logger.error("Route render failed", route=route, url=url, error=str(e))
            raise RouteRenderError(
                route, f"Failed to build HTML for {url}.\nMessage: {e}"
            ) from e
        finally:
            if context is not None:
                await context.close()

        # Playwright does not raise on error statuses; an error page is not a render
        if response is None or not response.ok:
            status = response.status if response is not None else "no response"
            self.logger.error("Route returned an error status", route=route, url=url, status=status)
            raise RouteRenderError(
                route, f"Failed to build HTML for {url}.\nMessage: returned HTTP {status}"
            )

        elapsed = time.perf_counter() - started
        if not html:
            self.logger.warning("Route rendered an empty document", route=route, url=url)
            return RenderResult.empty(route, url, elapsed)

        self.logger.debug("Route rendered", route=route, html_length=len(html), elapsed=elapsed)
        return RenderResult.rendered(route, url, html, elapsed)


async def render_route(
    browser: Browser, url: str, goto_options: Optional[GotoOptions] = None
) -> RenderResult:
    """Render a single URL with a throwaway renderer."""
    return await PageRenderer(browser, goto_options).render(url)
