"""
Integration Tests for the Pre-render Pipeline
=============================================

Full runs against a real static server and build directory. The browser is
replaced by a double that loads each URL over HTTP and injects the route into
the application's root element.
"""

import pytest
from pathlib import Path
from unittest.mock import AsyncMock, patch

from spa_prerender.core.errors import ConfigurationError, PrerenderError, ServerStartError
from spa_prerender.core.pipeline import PrerenderPipeline, run_prerender
from spa_prerender.core.server import StaticServer
from spa_prerender.models.schemas import RenderConfiguration

from tests.utils.assertions import assert_complete_report, assert_pages_written
from tests.utils.helpers import SPA_SHELL, free_port, write_config_file
from tests.utils.mocks import FakeBrowserSession


@pytest.fixture
def browser_session():
    session = FakeBrowserSession()
    with patch.object(PrerenderPipeline, "create_browser_session", return_value=session):
        yield session


class TestPrerenderPipeline:
    """Test complete runs."""

    @pytest.mark.asyncio
    async def test_two_routes(self, tmp_path: Path, build_dir: Path, browser_session, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config_file = write_config_file(
            tmp_path / ".rsp.json",
            {"port": free_port(), "routes": ["/", "/about"], "buildDirectory": "./build"},
        )

        report = await run_prerender(config_file)

        assert_complete_report(report)
        assert_pages_written(build_dir, ["/", "/about"])
        home = (build_dir / "index.html").read_text(encoding="utf-8")
        about = (build_dir / "about" / "index.html").read_text(encoding="utf-8")
        assert '<div id="root"><h1>/</h1></div>' in home
        assert '<div id="root"><h1>/about</h1></div>' in about
        assert browser_session.started and browser_session.closed

    @pytest.mark.asyncio
    async def test_many_routes_across_batches(self, build_dir: Path, browser_session):
        routes = ["/"] + [f"/blog/post-{i}" for i in range(12)]
        configuration = RenderConfiguration(
            port=free_port(), routes=routes, build_directory=build_dir, batch_size=5
        )

        report = await PrerenderPipeline(configuration).run()

        assert_complete_report(report)
        assert report.batch_count == 3
        assert len(report.written) == len(routes)
        assert_pages_written(build_dir, routes)
        assert len(browser_session.browser.contexts) == len(routes)
        assert all(context.closed for context in browser_session.browser.contexts)

    @pytest.mark.asyncio
    async def test_routes_render_from_original_shell(self, build_dir: Path, browser_session):
        configuration = RenderConfiguration(
            port=free_port(), routes=["/", "/about"], build_directory=build_dir, batch_size=1
        )

        await PrerenderPipeline(configuration).run()

        about = (build_dir / "about" / "index.html").read_text(encoding="utf-8")
        assert "<h1>/</h1>" not in about
        assert about == SPA_SHELL.replace(
            '<div id="root"></div>', '<div id="root"><h1>/about</h1></div>'
        )

    @pytest.mark.asyncio
    async def test_server_stopped_after_run(self, build_dir: Path, browser_session):
        configuration = RenderConfiguration(
            port=free_port(), routes=["/"], build_directory=build_dir
        )
        pipeline = PrerenderPipeline(configuration)
        servers = []
        create_server = pipeline.create_server

        def tracking_create_server():
            server = create_server()
            servers.append(server)
            return server

        pipeline.create_server = tracking_create_server
        await pipeline.run()

        assert len(servers) == 1
        assert not servers[0].is_running

    @pytest.mark.asyncio
    async def test_collisions_are_reported_not_resolved(self, build_dir: Path, browser_session):
        configuration = RenderConfiguration(
            port=free_port(), routes=["/foo", "/foo/"], build_directory=build_dir
        )

        with patch("spa_prerender.core.pipeline.logger") as mock_logger:
            pipeline = PrerenderPipeline(configuration)
            report = await pipeline.run()

        assert len(report.written) == 2
        mock_logger.bind.return_value.warning.assert_any_call(
            "Routes map to the same output file",
            path="foo/index.html",
            routes=["/foo", "/foo/"],
        )


class TestPipelineFailures:
    """Test infrastructure failures."""

    @pytest.mark.asyncio
    async def test_unreadable_configuration_stops_before_server(self, tmp_path: Path, build_dir: Path):
        config_file = tmp_path / ".rsp.json"
        config_file.write_text("{not json", encoding="utf-8")
        before = sorted(p.relative_to(build_dir) for p in build_dir.rglob("*"))

        with patch.object(StaticServer, "start", new_callable=AsyncMock) as mock_start:
            with pytest.raises(ConfigurationError):
                await run_prerender(config_file)

        mock_start.assert_not_called()
        assert sorted(p.relative_to(build_dir) for p in build_dir.rglob("*")) == before

    @pytest.mark.asyncio
    async def test_server_failure_stops_before_browser(self, tmp_path: Path, browser_session):
        configuration = RenderConfiguration(
            port=free_port(), routes=["/"], build_directory=tmp_path / "missing-build"
        )

        with pytest.raises(ServerStartError):
            await PrerenderPipeline(configuration).run()

        assert not browser_session.started

    @pytest.mark.asyncio
    async def test_missing_root_document_stops_before_browser(self, build_dir: Path, browser_session):
        (build_dir / "index.html").unlink()
        before = sorted(p.relative_to(build_dir) for p in build_dir.rglob("*"))
        configuration = RenderConfiguration(
            port=free_port(), routes=["/", "/about"], build_directory=build_dir
        )

        with pytest.raises(ServerStartError, match="Root document not found"):
            await PrerenderPipeline(configuration).run()

        assert not browser_session.started
        assert sorted(p.relative_to(build_dir) for p in build_dir.rglob("*")) == before

    @pytest.mark.asyncio
    async def test_error_status_is_not_written(self, build_dir: Path, browser_session):
        configuration = RenderConfiguration(
            port=free_port(), routes=["/", "/about"], build_directory=build_dir, batch_size=1
        )
        pipeline = PrerenderPipeline(configuration)
        # Serve "/" only so "/about" falls through to a 404 from the static files
        pipeline.create_server = lambda: StaticServer(build_dir, ["/"], port=configuration.port)

        report = await pipeline.run()

        assert not report.success
        assert [r.route for r in report.written] == ["/"]
        assert [r.route for r in report.failed] == ["/about"]
        assert "returned HTTP 404" in report.failed[0].error
        assert not (build_dir / "about").exists()

    @pytest.mark.asyncio
    async def test_scheduler_infrastructure_error_wrapped(self, build_dir: Path, browser_session):
        configuration = RenderConfiguration(
            port=free_port(), routes=["/"], build_directory=build_dir
        )

        with patch(
            "spa_prerender.core.pipeline.BatchScheduler.run_all",
            new_callable=AsyncMock,
            side_effect=RuntimeError("Browser has been closed"),
        ):
            with pytest.raises(PrerenderError, match="Failed to render routes"):
                await PrerenderPipeline(configuration).run()

        assert browser_session.closed
