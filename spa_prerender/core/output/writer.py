"""
Output Writer
=============

Writes rendered HTML to the path mapped from its route.
"""

from pathlib import Path
from typing import Union

import aiofiles

from spa_prerender.config.logging import get_logger
from spa_prerender.core.errors import OutputWriteError
from spa_prerender.core.output.paths import map_route_to_path

logger = get_logger(__name__)


async def write_output_file(route: str, html: str, output_dir: Union[str, Path]) -> Path:
    """
    Write the rendered HTML for a route, overwriting any existing file.

    Args:
        route: Route the HTML was rendered from
        html: Serialized DOM
        output_dir: Root of the output tree

    Returns:
        Path of the written file

    Raises:
        OutputWriteError: If the path cannot be mapped or the write fails
    """
    try:
        file_path = map_route_to_path(route, output_dir)
        async with aiofiles.open(file_path, mode="w", encoding="utf-8") as f:
            await f.write(html)
    except (OSError, ValueError) as e:
        raise OutputWriteError(
            route, f"Failed to create HTML page for {route}.\nMessage: {e}"
        ) from e

    logger.info("Created page", route=route, path=str(file_path), size=len(html))
    return file_path
