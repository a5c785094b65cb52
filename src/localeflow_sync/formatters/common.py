"""Shared helpers for translation formatters.

Translation files hold either a flat mapping (``{"home.title": "Hi"}``)
or a nested object tree (``{"home": {"title": "Hi"}}``).  In memory a
language is always a flat ``dict[str, str]``; these helpers convert
between the two shapes.

Key design choices:

* ``flatten`` accepts both shapes, so a nested file read in flat mode
  still yields every key.  Two spellings of the same dotted key
  (``"a.b"`` next to ``{"a": {"b": ...}}``) raise ``FormatError``.
* Scalars are coerced to strings (``true``/``false`` for booleans, ``""``
  for null); lists are rejected rather than dropped.
* Empty nested objects and duplicate keys in the source document are
  rejected too, so parsing never loses a key silently.  Empty key
  segments (``".a"``, ``"a."``) are real segments and survive a round
  trip.
* ``unflatten`` refuses to turn a string leaf into an object (``a`` and
  ``a.b`` both present) instead of overwriting it.
"""

from __future__ import annotations

from typing import Any

from localeflow_sync.errors import FormatError

KEY_SEPARATOR = "."


def scalar_to_str(value: Any, path: str) -> str:
    """Coerce a parsed scalar into a translation string.

    Raises:
        FormatError: If *value* is a list or another non-scalar.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise FormatError(
        f"Unsupported value at '{path}': expected a string, "
        f"got {type(value).__name__}"
    )


def flatten(data: Any, prefix: str | None = None) -> dict[str, str]:
    """Flatten a (possibly nested) mapping into dotted keys.

    Args:
        data: The parsed document root.
        prefix: Key prefix used during recursion; ``None`` at the root.
            An empty string is a real (empty) key segment.

    Returns:
        Flat mapping of dotted key to string value.

    Raises:
        FormatError: If the root is not a mapping, a value is a list, a
            nested object is empty, or two entries flatten to the same key.
    """
    where = "<root>" if prefix is None else prefix
    if not isinstance(data, dict):
        raise FormatError(
            f"Expected a mapping at '{where}', got {type(data).__name__}"
        )
    if not data and prefix is not None:
        raise FormatError(f"Empty object at '{where}' holds no keys")

    result: dict[str, str] = {}
    for raw_key, value in data.items():
        key = scalar_to_str(raw_key, where)
        full_key = key if prefix is None else f"{prefix}{KEY_SEPARATOR}{key}"
        if isinstance(value, dict):
            items = flatten(value, full_key).items()
        else:
            items = [(full_key, scalar_to_str(value, full_key))]
        for flat_key, flat_value in items:
            if flat_key in result:
                raise FormatError(f"Duplicate key '{flat_key}'")
            result[flat_key] = flat_value
    return result


def unflatten(mapping: dict[str, str]) -> dict[str, Any]:
    """Build a nested object tree from dotted keys.

    Keys are processed in sorted order so the result (and the error
    reported for a collision) is deterministic.

    Raises:
        FormatError: If a key needs an object where a string already
            lives, or a string where an object already lives.
    """
    tree: dict[str, Any] = {}
    for key in sorted(mapping):
        segments = key.split(KEY_SEPARATOR)
        node = tree
        for depth, segment in enumerate(segments[:-1]):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                parent = KEY_SEPARATOR.join(segments[: depth + 1])
                raise FormatError(
                    f"Cannot nest '{key}': '{parent}' already holds a "
                    f"string value"
                )
            node = child
        leaf = segments[-1]
        if isinstance(node.get(leaf), dict):
            raise FormatError(
                f"Cannot set '{key}': it is already an object holding "
                f"nested keys"
            )
        node[leaf] = mapping[key]
    return tree
