"""Translation sync engine.

Keeps a local translation tree and the remote translation store
consistent with one-level diffs (local snapshot vs. remote snapshot).

Modules:

- ``models``     -- ``Entry``, ``ConflictEntry``, ``DiffResult``,
  ``ResolvedPartition``, ``Decision`` and the command reports.
- ``strategies`` -- ``PullMergeStrategy`` and ``SyncMergeStrategy``.
- ``differ``     -- ``compute_translation_diff``.
- ``resolver``   -- conflict resolution policies and prompters.
- ``engine``     -- ``SyncEngine``: pull, push and sync orchestration.
- ``reporter``   -- human-readable and JSON report formatting.

Usage example
-------------
::

    from localeflow_sync.core.client import LocaleflowClient
    from localeflow_sync.sync import (
        SyncEngine,
        TerminalPrompter,
        format_sync_report,
    )

    engine = SyncEngine(
        store=LocaleflowClient.from_options(options),
        options=options,            # ResolvedOptions
        prompter=TerminalPrompter(),
    )
    report = engine.sync()
    print(format_sync_report(report))
"""

from .differ import compute_translation_diff
from .engine import SyncEngine
from .models import (
    ConflictEntry,
    Decision,
    DiffResult,
    Entry,
    PullReport,
    PushReport,
    ResolvedPartition,
    SyncReport,
    TranslationSet,
)
from .reporter import (
    format_diff_summary,
    format_pull_report,
    format_push_report,
    format_sync_report,
    report_to_json,
)
from .resolver import (
    ResolutionPolicy,
    TerminalPrompter,
    resolve_conflicts,
)
from .strategies import MergeStrategy, PullMergeStrategy, SyncMergeStrategy

__all__ = [
    "ConflictEntry",
    "Decision",
    "DiffResult",
    "Entry",
    "MergeStrategy",
    "PullMergeStrategy",
    "PullReport",
    "PushReport",
    "ResolutionPolicy",
    "ResolvedPartition",
    "SyncEngine",
    "SyncMergeStrategy",
    "SyncReport",
    "TerminalPrompter",
    "TranslationSet",
    "compute_translation_diff",
    "format_diff_summary",
    "format_pull_report",
    "format_push_report",
    "format_sync_report",
    "report_to_json",
]
