"""Configuration schema for the LocaleFlow sync CLI.

Defines Pydantic models for the config file with dedicated sections for
the API connection, file format, paths, pull/push patterns and logging.
Every field has a default so ``UnifiedConfig()`` (zero-config) is always
valid; required values such as the project are enforced later, when the
per-invocation options are resolved.

Usage:
    from localeflow_sync.config_schema import build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001"


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class ApiConfig(BaseModel):
    """Remote translation store connection settings."""

    url: str = Field(default=DEFAULT_API_URL, description="API base URL")
    api_key: str | None = Field(default=None, description="API key")
    timeout: float = Field(
        default=60, gt=0, description="Read timeout in seconds"
    )

    model_config = {"frozen": True}


class FormatConfig(BaseModel):
    """Translation file format.

    Attributes:
        type: ``json`` or ``yaml``.
        nested: Write dotted keys as nested objects.
        indentation: Spaces per indentation level.
    """

    type: Literal["json", "yaml"] = "json"
    nested: bool = True
    indentation: int = Field(default=2, ge=1, le=8)

    model_config = {"frozen": True}


class PathsConfig(BaseModel):
    translations: str = Field(
        default="locales", description="Translations root directory"
    )

    model_config = {"frozen": True}


class FilesConfig(BaseModel):
    """File naming for one transfer direction."""

    file_pattern: str = Field(
        default="{lang}.json",
        description="File name pattern containing {lang}",
    )
    languages: list[str] | None = Field(
        default=None, description="Restrict to these languages"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level configuration file model."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    project: str | None = None
    default_space: str | None = None
    default_branch: str = "main"
    format: FormatConfig = Field(default_factory=FormatConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    pull: FilesConfig = Field(default_factory=FilesConfig)
    push: FilesConfig = Field(default_factory=FilesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged config file data.

    Handles missing sections gracefully; anything absent gets defaults.

    Raises:
        ConfigurationError: If a value fails validation.
    """
    if not raw_data:
        return UnifiedConfig()

    try:
        return UnifiedConfig(**raw_data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config file: {exc}") from exc
