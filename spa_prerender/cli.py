"""
Command Line Interface
======================

`spa-prerender` entry point: reads the render configuration, runs the
pipeline and maps its terminal state onto the process exit code.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from spa_prerender import __version__
from spa_prerender.config.logging import get_logger, setup_logging
from spa_prerender.core.errors import PrerenderError
from spa_prerender.core.pipeline import run_prerender

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INCOMPLETE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spa-prerender",
        description="Pre-render a single-page application into static HTML files",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Render configuration file (default: .rsp.json)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured log level",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help=f"Exit with code {EXIT_INCOMPLETE} unless every route was written",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the exit code."""
    args = build_parser().parse_args(argv)

    try:
        setup_logging(args.log_level)
    except ValidationError as e:
        logger.error("Invalid runtime settings", error=str(e))
        return EXIT_FATAL

    try:
        report = asyncio.run(run_prerender(args.config))
    except PrerenderError as e:
        logger.error("Pre-rendering aborted", error_type=type(e).__name__, error=str(e))
        return EXIT_FATAL
    except KeyboardInterrupt:
        logger.warning("Pre-rendering interrupted")
        return EXIT_FATAL

    logger.info("Finish spa-prerender tasks!")
    if args.strict and not report.success:
        return EXIT_INCOMPLETE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
