"""
Batch Scheduler
===============

Partitions the route list into fixed-size batches and renders the batches
concurrently against one shared browser. Routes inside a batch are rendered
and written strictly in order, so at most one page per batch is open at a
time.
"""

import asyncio
import time
from pathlib import Path
from typing import Any, List, Sequence, TypeVar, Union

from playwright.async_api import Browser

from spa_prerender.config.logging import get_logger
from spa_prerender.core.errors import RouteError
from spa_prerender.core.output.writer import write_output_file
from spa_prerender.core.rendering.page_renderer import PageRenderer
from spa_prerender.models.schemas import (
    DEFAULT_BATCH_SIZE,
    EngineOptions,
    RouteOutcome,
    RouteReport,
    RunReport,
)

logger = get_logger(__name__)

T = TypeVar("T")


def chunk_routes(routes: Sequence[T], size: int = DEFAULT_BATCH_SIZE) -> List[List[T]]:
    """Split routes into contiguous batches of `size`; the last may be shorter."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(routes[i : i + size]) for i in range(0, len(routes), size)]


class BatchScheduler:
    """Runs every route through the renderer and writes the results."""

    def __init__(
        self,
        renderer: PageRenderer,
        base_url: str,
        output_dir: Union[str, Path],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.renderer = renderer
        self.base_url = base_url.rstrip("/")
        self.output_dir = Path(output_dir)
        self.batch_size = batch_size
        self.logger: Any = logger.bind(component="batch_scheduler")

    async def run_all(self, routes: Sequence[str]) -> RunReport:
        """
        Render and write every route.

        Route failures are recorded in the report and stop only their own
        batch. Any other exception is raised once every batch has settled.
        """
        started = time.perf_counter()
        batches = chunk_routes(routes, self.batch_size)
        self.logger.info(
            "Starting batches",
            routes=len(routes),
            batches=len(batches),
            batch_size=self.batch_size,
        )

        results = await asyncio.gather(
            *(self._run_batch(index, batch) for index, batch in enumerate(batches)),
            return_exceptions=True,
        )

        report = RunReport(total_routes=len(routes), batch_count=len(batches))
        errors = []
        for result in results:
            if isinstance(result, BaseException):
                errors.append(result)
            else:
                report.routes.extend(result)
        if errors:
            raise errors[0]

        report.processing_time = time.perf_counter() - started
        self.logger.info(
            "Batches finished",
            written=len(report.written),
            empty=len(report.empty),
            failed=len(report.failed),
            skipped=len(report.skipped),
            processing_time=round(report.processing_time, 3),
        )
        return report

    async def _run_batch(self, index: int, routes: List[str]) -> List[RouteReport]:
        """Render one batch in order, stopping at the first empty or failed route."""
        log = self.logger.bind(batch=index)
        reports: List[RouteReport] = []

        for route in routes:
            log.info("Processing route", route=route)
            try:
                result = await self.renderer.render(f"{self.base_url}{route}", route)
                if not result.is_rendered:
                    reports.append(
                        RouteReport(route=route, batch=index, outcome=RouteOutcome.EMPTY)
                    )
                    break

                output_path = await write_output_file(route, result.html, self.output_dir)
                reports.append(
                    RouteReport(
                        route=route,
                        batch=index,
                        outcome=RouteOutcome.WRITTEN,
                        output_path=output_path,
                    )
                )
            except RouteError as e:
                log.error("Failed to process route", route=route, error=str(e))
                reports.append(
                    RouteReport(
                        route=route, batch=index, outcome=RouteOutcome.FAILED, error=str(e)
                    )
                )
                break

        remaining = routes[len(reports) :]
        if remaining:
            log.warning("Batch stopped early", skipped=len(remaining), last_route=reports[-1].route)
        reports.extend(
            RouteReport(route=route, batch=index, outcome=RouteOutcome.SKIPPED)
            for route in remaining
        )
        return reports


async def run_all(
    routes: Sequence[str],
    browser: Browser,
    base_url: str,
    output_dir: Union[str, Path],
    engine: EngineOptions,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> RunReport:
    """Render every route with a shared browser."""
    renderer = PageRenderer(browser, engine.goto_options)
    scheduler = BatchScheduler(renderer, base_url, output_dir, batch_size)
    return await scheduler.run_all(routes)
