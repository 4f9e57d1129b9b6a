"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides isolated settings, build directories and render configurations.
"""

import pytest
from pathlib import Path
from pydantic_settings import SettingsConfigDict

from spa_prerender.config import settings as settings_module
from spa_prerender.config.settings import Settings
from spa_prerender.models.schemas import RenderConfiguration

from tests.utils.helpers import create_build_directory


class IsolatedSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    log_level: str = "DEBUG"
    server_startup_timeout: float = 5.0

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="SPA_PRERENDER_TEST_")


@pytest.fixture(autouse=True)
def test_settings(monkeypatch) -> IsolatedSettings:
    """Override application settings for testing."""
    test_settings = IsolatedSettings()
    monkeypatch.setattr(settings_module, "settings", test_settings)
    return test_settings


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Build directory containing a minimal single-page application."""
    return create_build_directory(tmp_path)


@pytest.fixture
def render_config(build_dir: Path) -> RenderConfiguration:
    """Render configuration pointing at the test build directory."""
    return RenderConfiguration(
        port=5000,
        routes=["/", "/about"],
        build_directory=build_dir,
    )


def pytest_configure(config):
    """Register markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Tests that start a real static server")


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests by directory."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
