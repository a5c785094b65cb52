"""
Hierarchical configuration loader for the LocaleFlow sync CLI.

Provides convention-based config file discovery, env var interpolation,
and hierarchical merge with "project wins" semantics.

Usage:
    from localeflow_sync.config_loader import load_hierarchical_config

    config = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LOCALEFLOW_CONFIG"
PROJECT_CONFIG_DIR = ".localeflow"

# ---------------------------------------------------------------------------
# 1. Env var interpolation
# ---------------------------------------------------------------------------

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` patterns with env values.

    * ``${VAR}`` is replaced with ``os.environ.get(VAR, "")``.
    * ``${VAR:-default}`` uses *default* when VAR is unset or empty.
    * Literal ``${`` with no closing ``}`` is left untouched.
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        return match.group(2) or ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Walk a nested dict/list and interpolate env vars in all strings."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate_recursive(item) for item in obj]
    return obj


# ---------------------------------------------------------------------------
# 2. Convention-based file discovery
# ---------------------------------------------------------------------------


def discover_config_files(cwd: Path | None = None) -> list[Path]:
    """Return existing config file paths in precedence order (highest first).

    Search order:
        1. ``LOCALEFLOW_CONFIG`` env var (explicit single path)
        2. ``.localeflow/config.yml`` in CWD (project-level)
        3. ``localeflow.config.yml`` in CWD
        4. ``~/.config/localeflow/config.yml`` (XDG global)

    Only paths that exist on disk are returned.
    """
    cwd = cwd or Path.cwd()
    candidates: list[Path] = []

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path).expanduser().resolve()
        if not explicit.exists():
            logger.warning(
                "%s points to a missing file: %s", CONFIG_ENV_VAR, explicit
            )
        candidates.append(explicit)

    candidates.append(cwd / PROJECT_CONFIG_DIR / "config.yml")
    candidates.append(cwd / "localeflow.config.yml")
    candidates.append(Path.home() / ".config" / "localeflow" / "config.yml")

    return [p for p in candidates if p.exists()]


# ---------------------------------------------------------------------------
# 3. Config bootstrapping
# ---------------------------------------------------------------------------

_STARTER_CONFIG = """\
# localeflow configuration
#
# API settings can also be set via environment variables:
#   LOCALEFLOW_API_URL, LOCALEFLOW_API_KEY
#
# api:
#   url: http://localhost:3001
#   api_key: ${LOCALEFLOW_API_KEY}
#
# project: my-project
# default_space: frontend
default_branch: main

format:
  type: json
  nested: true
  indentation: 2

paths:
  translations: locales

pull:
  file_pattern: "{lang}.json"

push:
  file_pattern: "{lang}.json"

# logging:
#   level: INFO
#   file: null
"""


def ensure_config(cwd: Path | None = None) -> tuple[Path, bool]:
    """Ensure a project config file exists.

    An existing project-level file is never overwritten.

    Returns:
        ``(path, created)`` where *created* is ``False`` if the file
        already existed.
    """
    config_path = (cwd or Path.cwd()) / PROJECT_CONFIG_DIR / "config.yml"
    if config_path.exists():
        logger.debug("Config file already exists: %s", config_path)
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", config_path)
    return config_path, True


# ---------------------------------------------------------------------------
# 4. Hierarchical merge
# ---------------------------------------------------------------------------


def _load_yaml(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Config file {path} is not valid YAML: {exc}"
        ) from exc


def load_hierarchical_config(cwd: Path | None = None) -> dict[str, Any]:
    """Load and merge all discovered config files.

    Merge strategy ("project wins"):
        Files are loaded from lowest precedence to highest.  Each file's
        top-level keys **replace** (not deep-merge) those from earlier files.

    After merging, env var interpolation is applied to all string values.

    Returns an empty dict when no config files exist (zero-config).
    """
    paths = discover_config_files(cwd)

    if not paths:
        logger.debug("No config files found, using zero-config defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        data = _load_yaml(path)
        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Config file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
