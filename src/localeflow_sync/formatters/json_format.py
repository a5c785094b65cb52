"""JSON translation files."""

from __future__ import annotations

import json
from typing import Any

from localeflow_sync.errors import FormatError

from .base import BaseFormatter


def _unique_object(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """Build a JSON object, refusing keys that appear twice."""
    obj: dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise FormatError(f"Duplicate key '{key}' in JSON object")
        obj[key] = value
    return obj


class JsonFormatter(BaseFormatter):
    name = "json"
    extension = ".json"
    extensions = (".json",)

    def _load(self, content: str) -> Any:
        try:
            return json.loads(content, object_pairs_hook=_unique_object)
        except json.JSONDecodeError as exc:
            raise FormatError(
                f"Invalid JSON at line {exc.lineno}, column {exc.colno}: "
                f"{exc.msg}"
            ) from exc

    def _dump(self, data: dict[str, Any]) -> str:
        return (
            json.dumps(
                data,
                indent=self.indentation,
                ensure_ascii=False,
                sort_keys=True,
            )
            + "\n"
        )
