"""Configuration stores for SesPress settings.

A configuration store is a read-only key/value lookup for the options in
``OPTION_NAMES``. Sources:

1. Environment variables (``SESPRESS_<OPTION>``), the default
2. DynamoDB (``SESPRESS_SETTINGS_SOURCE=dynamodb``), shared and editable
   through the settings API
3. A plain mapping, for tests and embedding callers
"""

import os
from collections.abc import Mapping
from typing import Protocol

import structlog

from sespress.models.settings import OPTION_NAMES, REQUIRED_OPTIONS

logger = structlog.get_logger()

ENV_PREFIX = "SESPRESS_"


class ConfigurationStore(Protocol):
    """Read-only key/value settings source."""

    def get(self, key: str) -> str | None:
        """Return the raw value for ``key`` or None if unset."""
        ...


class MappingConfigurationStore:
    """Configuration store backed by an in-memory mapping."""

    def __init__(self, values: Mapping[str, str | None] | None = None):
        self._values = dict(values or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)


class EnvironmentConfigurationStore:
    """Configuration store reading ``SESPRESS_<KEY>`` environment variables.

    Example:
        SESPRESS_REGION=us-east-1
        SESPRESS_ENABLE_EMAILS=on
    """

    def __init__(self, prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None):
        self.prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def get(self, key: str) -> str | None:
        return self._environ.get(f"{self.prefix}{key.upper()}")


def get_configuration_store() -> ConfigurationStore:
    """Pick the configuration store from ``SESPRESS_SETTINGS_SOURCE``.

    Returns:
        SettingsRepository for ``dynamodb``, the environment store otherwise.
    """
    source = os.environ.get("SESPRESS_SETTINGS_SOURCE", "env").lower()
    if source == "dynamodb":
        from sespress.repositories.settings import SettingsRepository

        return SettingsRepository()
    if source != "env":
        logger.warning("Unknown settings source, using environment", source=source)
    return EnvironmentConfigurationStore()


__all__ = [
    "OPTION_NAMES",
    "REQUIRED_OPTIONS",
    "ConfigurationStore",
    "EnvironmentConfigurationStore",
    "MappingConfigurationStore",
    "get_configuration_store",
]
