"""YAML translation files.

PyYAML only supports indentation between 2 and 9 spaces; configured
values outside that range are clamped when dumping.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

import yaml

from localeflow_sync.errors import FormatError

from .base import BaseFormatter

_MIN_INDENT = 2
_MAX_INDENT = 9


class TranslationLoader(yaml.SafeLoader):
    """YAML SafeLoader subclass that rejects duplicate mapping keys.

    Uses a dedicated subclass so the global ``yaml.SafeLoader`` is never
    modified.
    """


def _unique_mapping_constructor(
    loader: TranslationLoader, node: yaml.MappingNode
) -> dict[Any, Any]:
    loader.flatten_mapping(node)
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=True)
        if not isinstance(key, Hashable):
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                "found unhashable key",
                key_node.start_mark,
            )
        if key in mapping:
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                f"found duplicate key '{key}'",
                key_node.start_mark,
            )
        mapping[key] = loader.construct_object(value_node, deep=True)
    return mapping


TranslationLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _unique_mapping_constructor,
)


class YamlFormatter(BaseFormatter):
    name = "yaml"
    extension = ".yaml"
    extensions = (".yaml", ".yml")

    def _load(self, content: str) -> Any:
        loader = TranslationLoader(content)
        try:
            data = loader.get_single_data()
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            where = (
                f" at line {mark.line + 1}, column {mark.column + 1}"
                if mark is not None
                else ""
            )
            raise FormatError(f"Invalid YAML{where}: {exc}") from exc
        finally:
            loader.dispose()
        return {} if data is None else data

    def _dump(self, data: dict[str, Any]) -> str:
        indent = min(max(self.indentation, _MIN_INDENT), _MAX_INDENT)
        return yaml.safe_dump(
            data,
            indent=indent,
            allow_unicode=True,
            sort_keys=True,
            default_flow_style=False,
            width=4096,
        )
