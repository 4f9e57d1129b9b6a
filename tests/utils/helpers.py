"""
Test Helpers
============

Helper functions for common testing operations.
"""

import json
import socket
from pathlib import Path
from typing import Any, Dict

SPA_SHELL = (
    "<!DOCTYPE html><html><head><title>App</title>"
    '<script src="/static/app.js"></script></head>'
    '<body><div id="root"></div></body></html>'
)


def free_port() -> int:
    """Ask the OS for a currently unused TCP port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def create_build_directory(root: Path) -> Path:
    """Create a minimal single-page application build."""
    build = root / "build"
    (build / "static").mkdir(parents=True)
    (build / "index.html").write_text(SPA_SHELL, encoding="utf-8")
    (build / "static" / "app.js").write_text("console.log('app');", encoding="utf-8")
    return build


def write_config_file(path: Path, data: Dict[str, Any]) -> Path:
    """Write a render configuration file."""
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
