"""
Process-wide settings shared by every call: global headers, parameters and timeout.

Settings come from ``RESTCHECK_`` environment variables (nested fields use
``__``, e.g. ``RESTCHECK_GLOBAL_REQUEST_ATTRIBUTES__TIMEOUT=5000``) or from a
JSON file passed to ``load_configuration``.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Union

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import USE_GLOBAL_TIMEOUT, HttpRequest

# Set up logger for this module
logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000


class GlobalRequestAttributes(BaseModel):
    """Attributes applied to every request before its own attributes."""

    headers: Dict[str, str] = Field(default_factory=dict, description="Headers sent with every request")
    query_params: Dict[str, str] = Field(default_factory=dict, description="Query parameters added to every URL")
    route_params: Dict[str, str] = Field(default_factory=dict, description="Route parameter defaults")
    timeout: int = Field(
        DEFAULT_TIMEOUT_MS,
        ge=0,
        description="Milliseconds allowed for each of the connect and read phases; 0 waits indefinitely",
    )


class Configuration(BaseSettings):
    """Global harness configuration."""

    model_config = SettingsConfigDict(env_prefix="RESTCHECK_", env_nested_delimiter="__")

    global_request_attributes: GlobalRequestAttributes = Field(default_factory=GlobalRequestAttributes)

    def effective_timeout(self, request: HttpRequest) -> int:
        """Get the timeout to use for a request, honouring its override."""
        if request.timeout == USE_GLOBAL_TIMEOUT:
            return self.global_request_attributes.timeout
        return request.timeout


def load_configuration(path: Union[str, Path]) -> Configuration:
    """Load configuration from a JSON file.

    Args:
        path: Location of the JSON document

    Returns:
        The loaded configuration; environment variables fill fields the file omits

    Raises:
        ConfigurationError: If the file cannot be read or is not a valid configuration
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")

    try:
        configuration = Configuration(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    return configuration
