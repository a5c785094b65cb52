"""Per-invocation options for the LocaleFlow sync CLI.

Each command resolves its settings once into an immutable
``ResolvedOptions`` which is then passed to the sync engine; nothing
downstream reads config files or environment variables.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    LOCALEFLOW_API_URL: API base URL
    LOCALEFLOW_API_KEY: API key
    LOCALEFLOW_PROJECT: Project slug
    LOCALEFLOW_SPACE: Space slug
    LOCALEFLOW_BRANCH: Branch name
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from .config_schema import UnifiedConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

COMMANDS = ("pull", "push", "sync")


@dataclass(frozen=True)
class ResolvedOptions:
    api_url: str
    project: str
    space: str
    branch: str
    directory: Path
    file_pattern: str
    api_key: str | None = None
    timeout: float = 60
    format: str = "json"
    nested: bool = True
    indentation: int = 2
    languages: tuple[str, ...] | None = None
    force_local: bool = False
    force_remote: bool = False
    dry_run: bool = False


def validate_options(options: ResolvedOptions) -> None:
    """Validate resolved options and raise ConfigurationError if invalid.

    Raises:
        ConfigurationError: If the API URL is malformed, both force flags
            are set, or the indentation is out of range.
    """
    if not options.api_url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Invalid API URL '{options.api_url}': must start with "
            f"http:// or https://"
        )
    if not urlparse(options.api_url).hostname:
        raise ConfigurationError(
            f"Invalid API URL '{options.api_url}': URL must include a "
            f"hostname"
        )
    if options.force_local and options.force_remote:
        raise ConfigurationError(
            "--force-local and --force-remote are mutually exclusive"
        )
    if not 1 <= options.indentation <= 8:
        raise ConfigurationError(
            f"Invalid indentation {options.indentation}: must be "
            f"between 1 and 8"
        )
    if options.format not in ("json", "yaml"):
        raise ConfigurationError(
            f"Unknown format: '{options.format}'. Valid formats: "
            f"['json', 'yaml']"
        )


def _split_languages(raw: Any) -> tuple[str, ...] | None:
    """Normalise ``["en,de", "fr"]`` or ``"en, de"`` to a tuple."""
    if not raw:
        return None
    items = [raw] if isinstance(raw, str) else list(raw)
    languages = [
        lang.strip()
        for item in items
        for lang in str(item).split(",")
        if lang.strip()
    ]
    return tuple(dict.fromkeys(languages)) or None


def resolve_options(
    command: str,
    unified: UnifiedConfig,
    cli_overrides: dict[str, Any] | None = None,
    cwd: Path | None = None,
) -> ResolvedOptions:
    """Build the options for one command invocation.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > config file > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        command: ``"pull"``, ``"push"`` or ``"sync"``.
        unified: The config file model produced by ``build_config()``.
        cli_overrides: CLI argument values; ``None`` values are ignored.
            Keys: project, space, branch, dir, format, languages,
            force_local, force_remote, dry_run, api_url, api_key.
        cwd: Base for a relative translations directory.

    Returns:
        Validated ``ResolvedOptions``.

    Raises:
        ConfigurationError: If project or space cannot be resolved or a
            value is invalid.
    """
    if command not in COMMANDS:
        raise ValueError(f"Unknown command: '{command}'")
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    project = (
        cli.get("project") or os.getenv("LOCALEFLOW_PROJECT") or unified.project
    )
    if not project:
        raise ConfigurationError(
            "Project is required. Use --project, set LOCALEFLOW_PROJECT, "
            "or set 'project' in the config file."
        )

    space = (
        cli.get("space")
        or os.getenv("LOCALEFLOW_SPACE")
        or unified.default_space
    )
    if not space:
        raise ConfigurationError(
            "Space is required. Use --space, set LOCALEFLOW_SPACE, or "
            "set 'default_space' in the config file."
        )

    branch = (
        cli.get("branch")
        or os.getenv("LOCALEFLOW_BRANCH")
        or unified.default_branch
    )

    api_url = (
        cli.get("api_url")
        or os.getenv("LOCALEFLOW_API_URL")
        or unified.api.url
    ).strip()
    api_key = (
        cli.get("api_key")
        or os.getenv("LOCALEFLOW_API_KEY")
        or unified.api.api_key
    )

    files = unified.push if command == "push" else unified.pull
    languages = _split_languages(cli.get("languages")) or _split_languages(
        files.languages
    )

    directory = Path(cli.get("dir") or unified.paths.translations)
    if not directory.is_absolute():
        directory = (cwd or Path.cwd()) / directory

    options = ResolvedOptions(
        api_url=api_url.removesuffix("/"),
        api_key=api_key,
        timeout=unified.api.timeout,
        project=project,
        space=space,
        branch=branch,
        directory=directory,
        file_pattern=files.file_pattern,
        format=cli.get("format") or unified.format.type,
        nested=unified.format.nested,
        indentation=unified.format.indentation,
        languages=languages,
        force_local=bool(cli.get("force_local", False)),
        force_remote=bool(cli.get("force_remote", False)),
        dry_run=bool(cli.get("dry_run", False)),
    )
    validate_options(options)

    logger.debug(
        "Resolved %s options: project=%s space=%s branch=%s dir=%s "
        "format=%s",
        command,
        options.project,
        options.space,
        options.branch,
        options.directory,
        options.format,
    )
    return options
