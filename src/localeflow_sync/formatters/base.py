"""Formatter protocol shared by the JSON and YAML adapters."""

from __future__ import annotations

from typing import Any, Protocol

from .common import flatten, unflatten


class TranslationFormatter(Protocol):
    """Protocol that all translation formatters must satisfy."""

    name: str
    extension: str
    extensions: tuple[str, ...]
    nested: bool
    indentation: int

    def parse(self, content: str) -> dict[str, str]:
        """Parse file content into a flat key -> value mapping.

        Raises:
            FormatError: On malformed syntax or unsupported structure.
        """
        ...  # pragma: no cover

    def format(self, translations: dict[str, str]) -> str:
        """Serialise a flat mapping deterministically (sorted keys)."""
        ...  # pragma: no cover


class BaseFormatter:
    """Common nested/flat handling for concrete formatters.

    Subclasses implement ``_load`` and ``_dump``.

    Args:
        nested: Write dotted keys as an object tree.
        indentation: Number of spaces per indentation level.
    """

    name = ""
    extension = ""
    extensions: tuple[str, ...] = ()

    def __init__(self, nested: bool = True, indentation: int = 2) -> None:
        self.nested = nested
        self.indentation = indentation

    def parse(self, content: str) -> dict[str, str]:
        if not content.strip():
            return {}
        return flatten(self._load(content))

    def format(self, translations: dict[str, str]) -> str:
        if self.nested:
            data: dict[str, Any] = unflatten(translations)
        else:
            data = {key: translations[key] for key in sorted(translations)}
        return self._dump(data)

    def _load(self, content: str) -> Any:
        raise NotImplementedError

    def _dump(self, data: dict[str, Any]) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(nested={self.nested}, "
            f"indentation={self.indentation})"
        )
