"""Per-key merge strategies.

Pull and sync treat the same pair of values differently, so each policy
is a named strategy behind the ``MergeStrategy`` protocol:

- ``PullMergeStrategy``: the remote is authoritative, except that an empty
  remote value never replaces a non-empty local one.
- ``SyncMergeStrategy``: one-sided keys travel to the other side; keys
  with differing values on both sides are conflicts.

``MISSING`` marks a key that is absent on one side.  It is distinct from
the empty string.
"""

from __future__ import annotations

from typing import Protocol

from localeflow_sync.sync.models import Decision


class _Missing:
    """Sentinel for a key absent from one side."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()

Value = str | _Missing


class MergeStrategy(Protocol):
    """Protocol that all merge strategies must satisfy."""

    def resolve(self, local: Value, remote: Value) -> Decision:
        """Decide which side's value the key should end up with.

        Args:
            local: Local value, or ``MISSING``.
            remote: Remote value, or ``MISSING``.
        """
        ...  # pragma: no cover


class PullMergeStrategy:
    """Remote wins, unless it would blank out a local translation.

    Only keys the remote reports are considered: a key missing from the
    remote response is dropped even if it exists locally.
    """

    def resolve(self, local: Value, remote: Value) -> Decision:
        if remote is MISSING:
            return Decision.SKIP
        if remote == "" and local is not MISSING and local != "":
            return Decision.LOCAL
        return Decision.REMOTE


class SyncMergeStrategy:
    """Classify a key for bidirectional sync."""

    def resolve(self, local: Value, remote: Value) -> Decision:
        if local is MISSING and remote is MISSING:
            return Decision.SKIP
        if remote is MISSING:
            return Decision.LOCAL
        if local is MISSING:
            return Decision.REMOTE
        if local == remote:
            return Decision.SKIP
        return Decision.CONFLICT
