"""Pydantic models for the translation sync engine.

Defines the data contracts used across the sync modules:

- ``TranslationSet``: language -> combined key -> value (plain dicts).
- ``Decision``: outcome of a merge strategy for one key.
- ``Entry``: a key present on only one side of a comparison.
- ``ConflictEntry``: a key present on both sides with different values.
- ``DiffResult``: local-only, remote-only and conflicting keys.
- ``ResolvedPartition``: conflicts split into use-local / use-remote.
- ``PullReport`` / ``SyncReport`` / ``PushReport``: command outcomes.

All models are frozen (immutable).
"""

from __future__ import annotations

from collections import defaultdict
from enum import Enum

from pydantic import BaseModel

TranslationSet = dict[str, dict[str, str]]


class Decision(str, Enum):
    """Possible merge decisions for a single key."""

    SKIP = "skip"
    LOCAL = "local"
    REMOTE = "remote"
    CONFLICT = "conflict"


class Entry(BaseModel):
    """A translation present on only one side.

    Attributes:
        language: Language code (``en``, ``de-AT``).
        key: Combined key (``namespace:key`` or bare ``key``).
        value: The translation value.
    """

    language: str
    key: str
    value: str

    model_config = {"frozen": True}


class ConflictEntry(BaseModel):
    """A key present on both sides with different values."""

    language: str
    key: str
    local_value: str
    remote_value: str

    model_config = {"frozen": True}

    def swapped(self) -> ConflictEntry:
        """Return the same conflict seen from the other side."""
        return ConflictEntry(
            language=self.language,
            key=self.key,
            local_value=self.remote_value,
            remote_value=self.local_value,
        )


class DiffResult(BaseModel):
    """Classification of every key that differs between two sets.

    Keys with identical values on both sides are omitted.
    """

    local_only: list[Entry] = []
    remote_only: list[Entry] = []
    conflicts: list[ConflictEntry] = []

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not (self.local_only or self.remote_only or self.conflicts)


class ResolvedPartition(BaseModel):
    """Conflicts split by the side whose value wins."""

    use_local: list[ConflictEntry] = []
    use_remote: list[ConflictEntry] = []

    model_config = {"frozen": True}

    @property
    def total(self) -> int:
        return len(self.use_local) + len(self.use_remote)


def group_by_language(
    items: list[Entry] | list[ConflictEntry], side: str = "value"
) -> TranslationSet:
    """Group entries or conflicts into a ``TranslationSet``.

    Args:
        items: Entries or conflicts to group.
        side: Attribute holding the value: ``"value"`` for entries,
            ``"local_value"`` or ``"remote_value"`` for conflicts.
    """
    grouped: dict[str, dict[str, str]] = defaultdict(dict)
    for item in items:
        grouped[item.language][item.key] = getattr(item, side)
    return dict(grouped)


class PullReport(BaseModel):
    """Outcome of a pull run.

    Attributes:
        branch: Branch that was pulled.
        languages: Languages written to disk.
        keys_written: Total keys across all written files.
        preserved: Local values kept because the remote value was empty.
        files: Paths of the files written.
        removed: Stale files deleted because the remote no longer reports
            any of their keys.
    """

    branch: str
    languages: list[str] = []
    keys_written: int = 0
    preserved: int = 0
    files: list[str] = []
    removed: list[str] = []

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Outcome of a sync run.

    Attributes:
        branch: Branch that was synced.
        dry_run: Whether this was a dry-run (no changes applied).
        diff: The diff the run was based on.
        uploaded: Translations sent to the remote store, per language.
        downloaded: Translations merged into local files, per language.
        resolved_local: Conflicts resolved in favour of the local value.
        resolved_remote: Conflicts resolved in favour of the remote value.
        languages_written: Languages whose local files were rewritten.
        files: Paths of the files written.
    """

    branch: str
    dry_run: bool = False
    diff: DiffResult = DiffResult()
    uploaded: TranslationSet = {}
    downloaded: TranslationSet = {}
    resolved_local: int = 0
    resolved_remote: int = 0
    languages_written: list[str] = []
    files: list[str] = []

    model_config = {"frozen": True}

    @property
    def uploaded_count(self) -> int:
        return sum(len(keys) for keys in self.uploaded.values())

    @property
    def downloaded_count(self) -> int:
        return sum(len(keys) for keys in self.downloaded.values())

    @property
    def in_sync(self) -> bool:
        return self.diff.is_empty


class PushReport(BaseModel):
    """Outcome of a push run.

    Attributes:
        branch: Branch that was pushed to.
        uploaded: Translations sent to the remote store, per language.
        new_keys: Keys that did not exist remotely.
        updated: Conflicts resolved in favour of the local value.
        skipped: Conflicts where the remote value was kept.
    """

    branch: str
    uploaded: TranslationSet = {}
    new_keys: int = 0
    updated: int = 0
    skipped: int = 0

    model_config = {"frozen": True}

    @property
    def uploaded_count(self) -> int:
        return sum(len(keys) for keys in self.uploaded.values())
