"""
Browser Session
===============

Owns the Playwright driver and the single browser instance shared by every
batch of a run.
"""

from typing import Any, Optional

from playwright.async_api import async_playwright, Browser

from spa_prerender.config.logging import get_logger
from spa_prerender.core.errors import BrowserLaunchError
from spa_prerender.models.schemas import LaunchOptions

logger = get_logger(__name__)


class BrowserSession:
    """One launched browser for the lifetime of a run."""

    def __init__(self, launch_options: Optional[LaunchOptions] = None):
        self.launch_options = launch_options or LaunchOptions()
        self.browser: Optional[Browser] = None
        self._playwright = None
        self.logger: Any = logger.bind(component="browser_session")

    async def start(self) -> Browser:
        """
        Start Playwright and launch the configured browser.

        Raises:
            BrowserLaunchError: If the driver or the browser fails to start
        """
        engine = self.launch_options.browser.value
        try:
            self._playwright = await async_playwright().start()
            browser_type = getattr(self._playwright, engine)
            self.browser = await browser_type.launch(**self.launch_options.launch_kwargs())
        except Exception as e:
            self.logger.error("Failed to launch browser", browser=engine, error=str(e))
            await self.close()
            raise BrowserLaunchError(f"Failed to launch {engine} browser.\nMessage: {e}") from e

        self.logger.info(
            "Browser launched", browser=engine, headless=self.launch_options.headless
        )
        return self.browser

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver."""
        if self.browser is not None:
            await self.browser.close()
            self.browser = None
            self.logger.info("Browser closed")

        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def __aenter__(self) -> Browser:
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
