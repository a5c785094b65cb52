"""Format adapters for translation files.

- ``JsonFormatter`` -- ``.json`` files.
- ``YamlFormatter`` -- ``.yaml`` / ``.yml`` files.

Both accept ``nested`` (dotted keys written as an object tree) and
``indentation``.  ``create_formatter()`` maps a config format string to a
formatter instance.
"""

from __future__ import annotations

from localeflow_sync.errors import ConfigurationError

from .base import BaseFormatter, TranslationFormatter
from .json_format import JsonFormatter
from .yaml_format import YamlFormatter

_FORMATTER_MAP: dict[str, type[BaseFormatter]] = {
    "json": JsonFormatter,
    "yaml": YamlFormatter,
}

SUPPORTED_FORMATS = tuple(sorted(_FORMATTER_MAP))


def create_formatter(
    format_type: str, nested: bool = True, indentation: int = 2
) -> TranslationFormatter:
    """Create a formatter for the given format string.

    Args:
        format_type: ``"json"`` or ``"yaml"``.
        nested: Write dotted keys as nested objects.
        indentation: Spaces per indentation level.

    Raises:
        ConfigurationError: If the format is not recognised.
    """
    cls = _FORMATTER_MAP.get(format_type)
    if cls is None:
        raise ConfigurationError(
            f"Unknown format: '{format_type}'. Valid formats: "
            f"{list(SUPPORTED_FORMATS)}"
        )
    return cls(nested=nested, indentation=indentation)


__all__ = [
    "BaseFormatter",
    "JsonFormatter",
    "SUPPORTED_FORMATS",
    "TranslationFormatter",
    "YamlFormatter",
    "create_formatter",
]
