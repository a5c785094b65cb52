"""Structural diff between two translation sets.

``compute_translation_diff`` walks every ``(language, key)`` present on
either side once and classifies it with ``SyncMergeStrategy``.  Output is
ordered language-major, then by key, so CLI output and tests are
reproducible.
"""

from __future__ import annotations

import logging

from localeflow_sync.sync.models import (
    ConflictEntry,
    Decision,
    DiffResult,
    Entry,
    TranslationSet,
)
from localeflow_sync.sync.strategies import MISSING, SyncMergeStrategy

logger = logging.getLogger(__name__)

_STRATEGY = SyncMergeStrategy()


def compute_translation_diff(
    local: TranslationSet, remote: TranslationSet
) -> DiffResult:
    """Compare a local and a remote translation set.

    Args:
        local: Translations read from local files.
        remote: Translations fetched from the remote store.

    Returns:
        A ``DiffResult`` with local-only, remote-only and conflicting
        keys.  Keys with identical values (including both empty) are
        omitted.
    """
    local_only: list[Entry] = []
    remote_only: list[Entry] = []
    conflicts: list[ConflictEntry] = []

    for language in sorted(set(local) | set(remote)):
        local_keys = local.get(language, {})
        remote_keys = remote.get(language, {})
        for key in sorted(set(local_keys) | set(remote_keys)):
            local_value = local_keys.get(key, MISSING)
            remote_value = remote_keys.get(key, MISSING)
            decision = _STRATEGY.resolve(local_value, remote_value)

            if decision is Decision.LOCAL:
                local_only.append(
                    Entry(language=language, key=key, value=local_value)
                )
            elif decision is Decision.REMOTE:
                remote_only.append(
                    Entry(language=language, key=key, value=remote_value)
                )
            elif decision is Decision.CONFLICT:
                conflicts.append(
                    ConflictEntry(
                        language=language,
                        key=key,
                        local_value=local_value,
                        remote_value=remote_value,
                    )
                )

    logger.debug(
        "Diff: %d local-only, %d remote-only, %d conflicts",
        len(local_only),
        len(remote_only),
        len(conflicts),
    )
    return DiffResult(
        local_only=local_only,
        remote_only=remote_only,
        conflicts=conflicts,
    )
