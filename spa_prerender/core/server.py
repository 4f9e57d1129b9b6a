"""
Static Server
=============

Temporary FastAPI server for the application's build directory. Every
configured route returns the root document so client-side routing resolves
when a route is navigated to directly.
"""

import asyncio
import socket
import time
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from spa_prerender.config.logging import get_logger
from spa_prerender.core.errors import ServerStartError
from spa_prerender.core.output.paths import INDEX_FILE, route_path

logger = get_logger(__name__)


class StaticServer:
    """Serves a build directory on localhost for the duration of a run."""

    def __init__(
        self,
        directory: Union[str, Path],
        routes: Iterable[str],
        port: int,
        host: str = "127.0.0.1",
        startup_timeout: float = 10.0,
    ):
        self.directory = Path(directory).resolve()
        self.routes = tuple(dict.fromkeys(route_path(route) for route in routes))
        self.port = port
        self.host = host
        self.startup_timeout = startup_timeout
        self._root_document: Optional[bytes] = None
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None
        self.logger: Any = logger.bind(component="static_server")

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def create_app(self) -> FastAPI:
        """Build the ASGI app: route handlers first, static files for everything else."""
        app = FastAPI(
            title="SPA Prerender Static Server",
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )

        async def serve_root_document() -> HTMLResponse:
            if self._root_document is None:
                raise HTTPException(status_code=404, detail=f"{INDEX_FILE} not found")
            return HTMLResponse(content=self._root_document)

        for route in self.routes:
            app.add_api_route(
                route, serve_root_document, methods=["GET"], include_in_schema=False
            )

        app.mount("/", StaticFiles(directory=self.directory, html=True), name="static")
        return app

    def _load_root_document(self) -> None:
        # Snapshot the shell before rendered pages start overwriting it
        root_document = self.directory / INDEX_FILE
        if not root_document.is_file():
            self._root_document = None
            raise FileNotFoundError(f"Root document not found: {root_document}")
        self._root_document = root_document.read_bytes()

    def _bind_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        return sock

    async def start(self) -> str:
        """
        Bind the port and start serving.

        Returns:
            Base URL of the server

        Raises:
            ServerStartError: If the directory has no root document or the port cannot be bound
        """
        if self.is_running:
            return self.base_url

        try:
            self._load_root_document()
            app = self.create_app()
            sock = self._bind_socket()
        except (OSError, RuntimeError) as e:
            raise ServerStartError(
                f"Failed to run static server on port {self.port}.\nMessage: {e}"
            ) from e

        # Port 0 binds an ephemeral port
        self.port = sock.getsockname()[1]

        # log_config=None keeps the logging set up by setup_logging()
        config = uvicorn.Config(
            app, log_config=None, log_level="warning", access_log=False, lifespan="off"
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[sock]))

        deadline = time.monotonic() + self.startup_timeout
        while not self._server.started:
            if self._task.done():
                error = self._task.exception()
                self._reset()
                raise ServerStartError(
                    f"Failed to run static server on port {self.port}.\nMessage: {error}"
                )
            if time.monotonic() > deadline:
                await self.stop()
                raise ServerStartError(
                    f"Static server on port {self.port} did not start "
                    f"within {self.startup_timeout} seconds"
                )
            await asyncio.sleep(0.05)

        self.logger.info(
            "Static server started",
            url=self.base_url,
            directory=str(self.directory),
            routes=len(self.routes),
        )
        return self.base_url

    async def stop(self) -> None:
        """Signal the server to exit and wait for it to shut down."""
        if self._server is not None:
            self._server.should_exit = True
        if self._task is not None:
            await self._task
            self.logger.info("Static server stopped", url=self.base_url)
        self._reset()

    def _reset(self) -> None:
        self._server = None
        self._task = None

    async def __aenter__(self) -> "StaticServer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
