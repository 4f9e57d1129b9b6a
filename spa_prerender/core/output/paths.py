"""
Route Path Mapping
==================

Maps URL routes onto the on-disk layout of the pre-rendered site. Directory
style routes become `<route>/index.html` so a static host serves them at the
same URL; routes naming an HTML file keep their file name.
"""

from collections import defaultdict
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Union

INDEX_FILE = "index.html"
HTML_SUFFIXES = (".html", ".htm")


def route_path(route: str) -> str:
    """Drop query string and fragment, which are not part of a route."""
    for separator in ("?", "#"):
        route = route.split(separator, 1)[0]
    return route


def route_to_relative_path(route: str) -> PurePosixPath:
    """
    Relative output path for a route.

    Examples:
        "/"              -> index.html
        "/about"         -> about/index.html
        "/blog/post-1"   -> blog/post-1/index.html
        "/legal/tos.html" -> legal/tos.html

    Raises:
        ValueError: If the route does not start with '/' or contains dot segments
    """
    if not route.startswith("/"):
        raise ValueError(f"Route must start with '/': {route!r}")

    segments = [segment for segment in route_path(route).split("/") if segment]
    if any(segment in (".", "..") for segment in segments):
        raise ValueError(f"Route must not contain relative segments: {route!r}")

    if segments and segments[-1].lower().endswith(HTML_SUFFIXES):
        return PurePosixPath(*segments)
    return PurePosixPath(*segments, INDEX_FILE)


def map_route_to_path(route: str, output_dir: Union[str, Path]) -> Path:
    """
    Output file path for a route, creating its directory chain.

    Directory creation is idempotent; calling this twice for the same route
    returns the same path.
    """
    file_path = Path(output_dir) / route_to_relative_path(route)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    return file_path


def find_path_collisions(routes: Iterable[str]) -> Dict[PurePosixPath, List[str]]:
    """
    Distinct routes that map to the same output file.

    `/foo` and `/foo/` both map to `foo/index.html`; the later write wins.
    Collisions are reported, not resolved.
    """
    targets: Dict[PurePosixPath, List[str]] = defaultdict(list)
    for route in dict.fromkeys(routes):
        try:
            targets[route_to_relative_path(route)].append(route)
        except ValueError:
            # Invalid routes fail individually when they are written
            continue
    return {path: mapped for path, mapped in targets.items() if len(mapped) > 1}
