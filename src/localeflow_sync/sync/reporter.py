"""Report formatting functions.

Provides human-readable and machine-readable output for sync operations:

- ``format_diff_summary`` -- sync analysis (counts plus conflicts).
- ``format_sync_report`` -- post-sync summary.
- ``format_pull_report`` -- post-pull summary.
- ``format_push_report`` -- post-push summary.
- ``report_to_json`` -- structured dict for ``--json`` output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .resolver import truncate

if TYPE_CHECKING:
    from .models import DiffResult, PullReport, PushReport, SyncReport


# ------------------------------------------------------------------
# Analysis
# ------------------------------------------------------------------


def format_diff_summary(diff: DiffResult) -> str:
    """Format the sync analysis as human-readable text.

    Args:
        diff: The diff between local and remote translations.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = ["Sync analysis:", ""]

    if diff.is_empty:
        lines.append("  Everything is in sync.")
        return "\n".join(lines)

    if diff.local_only:
        lines.append(
            f"  {len(diff.local_only)} key(s) only in local files "
            f"(will be uploaded)"
        )
    if diff.remote_only:
        lines.append(
            f"  {len(diff.remote_only)} key(s) only in remote "
            f"(will be downloaded)"
        )
    if diff.conflicts:
        lines.append(f"  {len(diff.conflicts)} conflict(s) detected")
        lines.append("")
        lines.append("Conflicts:")
        for conflict in diff.conflicts:
            lines.append(f"  {conflict.key} [{conflict.language}]")
            lines.append(f"    Local:  \"{truncate(conflict.local_value)}\"")
            lines.append(
                f"    Remote: \"{truncate(conflict.remote_value)}\""
            )

    return "\n".join(lines)


# ------------------------------------------------------------------
# Command reports
# ------------------------------------------------------------------


def _per_language(counts: dict[str, dict[str, str]]) -> list[str]:
    return [
        f"    {lang}: {len(keys)} key(s)"
        for lang, keys in sorted(counts.items())
    ]


def format_sync_report(report: SyncReport) -> str:
    """Format a completed sync run.

    Sections are only included when they contain something.
    """
    if report.dry_run:
        return (
            "DRY RUN -- No changes were made\n\n"
            + format_diff_summary(report.diff)
        )
    if report.in_sync:
        return "Everything is in sync."

    lines: list[str] = [f"Sync complete for branch '{report.branch}'"]
    lines.append(
        f"  Uploaded {report.uploaded_count}, downloaded "
        f"{report.downloaded_count}, conflicts resolved "
        f"{report.resolved_local} local / {report.resolved_remote} remote"
    )
    if report.uploaded:
        lines.append("  Uploaded:")
        lines.extend(_per_language(report.uploaded))
    if report.downloaded:
        lines.append("  Downloaded:")
        lines.extend(_per_language(report.downloaded))
    if report.files:
        lines.append("  Files written:")
        lines.extend(f"    {path}" for path in report.files)
    return "\n".join(lines)


def format_pull_report(report: PullReport) -> str:
    if not report.languages:
        return f"No translations found on branch '{report.branch}'."
    lines = [
        f"Pulled {report.keys_written} key(s) in "
        f"{len(report.languages)} language(s) from branch "
        f"'{report.branch}'"
    ]
    if report.preserved:
        lines.append(
            f"  Preserved {report.preserved} local value(s) that are "
            f"empty on the remote"
        )
    lines.extend(f"  {path}" for path in report.files)
    if report.removed:
        lines.append(f"  Removed {len(report.removed)} stale file(s):")
        lines.extend(f"    {path}" for path in report.removed)
    return "\n".join(lines)


def format_push_report(report: PushReport) -> str:
    if not report.uploaded:
        return "Nothing to push."
    parts = []
    if report.updated:
        parts.append(f"{report.updated} updated")
    if report.new_keys:
        parts.append(f"{report.new_keys} new")
    if report.skipped:
        parts.append(f"{report.skipped} skipped")
    summary = f" ({', '.join(parts)})" if parts else ""
    lines = [
        f"Pushed {report.uploaded_count} key(s) across "
        f"{len(report.uploaded)} language(s){summary}"
    ]
    lines.extend(_per_language(report.uploaded))
    return "\n".join(lines)


# ------------------------------------------------------------------
# JSON
# ------------------------------------------------------------------


def report_to_json(
    report: SyncReport | PullReport | PushReport,
) -> dict[str, Any]:
    """Convert a report to a JSON-serialisable dict with derived counts."""
    data = report.model_dump(mode="json")
    if hasattr(report, "uploaded_count"):
        data["uploaded_count"] = report.uploaded_count
    if hasattr(report, "downloaded_count"):
        data["downloaded_count"] = report.downloaded_count
    if hasattr(report, "in_sync"):
        data["in_sync"] = report.in_sync
    return data
