"""Combined ``namespace:key`` identifiers.

Only the first ``:`` separates the namespace, so keys may contain colons
but namespaces may not.  An empty namespace (``":key"``) is read as no
namespace.
"""

from __future__ import annotations

from dataclasses import dataclass

NAMESPACE_SEPARATOR = ":"


@dataclass(frozen=True)
class NamespacedKey:
    namespace: str | None
    key: str


def parse_namespaced_key(combined: str) -> NamespacedKey:
    """Split a combined key into namespace and key.

    Args:
        combined: ``"namespace:key"`` or a bare ``"key"``.

    Returns:
        The decomposed key; ``namespace`` is ``None`` when absent.
    """
    namespace, sep, key = combined.partition(NAMESPACE_SEPARATOR)
    if not sep:
        return NamespacedKey(namespace=None, key=combined)
    return NamespacedKey(namespace=namespace or None, key=key)


def combined_key(namespace: str | None, key: str) -> str:
    """Build a combined key, omitting the prefix when *namespace* is None.

    Raises:
        ValueError: If *namespace* contains the separator or is empty.
    """
    if namespace is None:
        return key
    if not namespace or NAMESPACE_SEPARATOR in namespace:
        raise ValueError(
            f"Invalid namespace '{namespace}': must be non-empty and "
            f"must not contain '{NAMESPACE_SEPARATOR}'"
        )
    return f"{namespace}{NAMESPACE_SEPARATOR}{key}"
