"""
Pre-render Pipeline
===================

Wires a complete run together: configuration, static server, one shared
browser and the batch scheduler. Infrastructure failures abort the run with a
stage-specific error; route failures are contained by the scheduler and
reported in the returned RunReport.
"""

from pathlib import Path
from typing import Any, Optional, Union

from spa_prerender.config.logging import get_logger
from spa_prerender.config.loader import load_configuration
from spa_prerender.config.settings import get_settings
from spa_prerender.core.errors import PrerenderError
from spa_prerender.core.output.paths import find_path_collisions
from spa_prerender.core.rendering.browser import BrowserSession
from spa_prerender.core.rendering.page_renderer import PageRenderer
from spa_prerender.core.scheduler import BatchScheduler
from spa_prerender.core.server import StaticServer
from spa_prerender.models.schemas import RenderConfiguration, RunReport

logger = get_logger(__name__)


class PrerenderPipeline:
    """Runs one pre-render pass over every configured route."""

    def __init__(self, configuration: RenderConfiguration):
        self.configuration = configuration
        self.settings = get_settings()
        self.logger: Any = logger.bind(component="pipeline")

    def create_server(self) -> StaticServer:
        return StaticServer(
            directory=self.configuration.build_directory,
            routes=self.configuration.routes,
            port=self.configuration.port,
            host=self.settings.host,
            startup_timeout=self.settings.server_startup_timeout,
        )

    def create_browser_session(self) -> BrowserSession:
        return BrowserSession(self.configuration.engine.launch_options)

    def warn_about_collisions(self) -> None:
        """Routes sharing an output file overwrite each other; report, don't resolve."""
        for path, routes in find_path_collisions(self.configuration.routes).items():
            self.logger.warning(
                "Routes map to the same output file", path=str(path), routes=routes
            )

    async def run(self) -> RunReport:
        """
        Serve, render and write every route.

        Raises:
            ServerStartError: If the static server cannot start
            BrowserLaunchError: If the browser cannot be launched
            PrerenderError: If rendering fails outside a single route
        """
        configuration = self.configuration
        self.warn_about_collisions()

        async with self.create_server() as server:
            async with self.create_browser_session() as browser:
                renderer = PageRenderer(browser, configuration.engine.goto_options)
                scheduler = BatchScheduler(
                    renderer,
                    server.base_url,
                    configuration.build_directory,
                    configuration.batch_size,
                )
                try:
                    report = await scheduler.run_all(configuration.routes)
                except Exception as e:
                    raise PrerenderError(f"Failed to render routes.\nMessage: {e}") from e

        if report.success:
            self.logger.info(
                "Finished pre-rendering",
                pages=len(report.written),
                processing_time=round(report.processing_time, 3),
            )
        else:
            self.logger.warning(
                "Finished pre-rendering with incomplete routes",
                written=len(report.written),
                empty=[r.route for r in report.empty],
                failed=[r.route for r in report.failed],
                skipped=len(report.skipped),
            )
        return report


async def run_prerender(
    config_path: Optional[Union[str, Path]] = None,
    configuration: Optional[RenderConfiguration] = None,
) -> RunReport:
    """
    Load the configuration (unless given) and run the pipeline.

    Raises:
        ConfigurationError: Before any server is started, if the configuration is invalid
    """
    if configuration is None:
        configuration = load_configuration(config_path)
    return await PrerenderPipeline(configuration).run()
