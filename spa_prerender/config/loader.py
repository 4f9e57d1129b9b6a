"""
Render Configuration Loader
===========================

Reads the JSON render configuration (`.rsp.json` by default) and validates it
into an immutable `RenderConfiguration`. Any failure here is fatal and happens
before the static server is started.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from spa_prerender.config.logging import get_logger
from spa_prerender.config.settings import get_settings
from spa_prerender.core.errors import ConfigurationError
from spa_prerender.models.schemas import RenderConfiguration

logger = get_logger(__name__)


def parse_configuration(data: Dict[str, Any]) -> RenderConfiguration:
    """
    Validate raw configuration data.

    Args:
        data: Decoded JSON object

    Returns:
        Validated render configuration

    Raises:
        ConfigurationError: If the data does not describe a valid configuration
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration must be a JSON object, got {type(data).__name__}"
        )
    try:
        return RenderConfiguration.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_configuration(path: Optional[Union[str, Path]] = None) -> RenderConfiguration:
    """
    Read and validate the render configuration file.

    Args:
        path: Configuration file, defaults to the `config_file` setting

    Returns:
        Validated render configuration

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated
    """
    config_path = Path(path) if path is not None else get_settings().config_file

    try:
        raw = config_path.read_text(encoding="utf-8")
        configuration = parse_configuration(json.loads(raw))
    except (OSError, ValueError, ConfigurationError) as e:
        raise ConfigurationError(
            f"Failed to read options from '{config_path}'.\nMessage: {e}"
        ) from e

    logger.info(
        "Configuration loaded",
        config_file=str(config_path),
        routes=len(configuration.routes),
        port=configuration.port,
        build_directory=str(configuration.build_directory),
    )
    return configuration
