"""Sync engine that orchestrates pull, push and bidirectional sync.

The ``SyncEngine`` ties together the remote store, the local
reader/writer, the differ, the merge strategies and the conflict resolver.
Every stage completes before the next starts:

pull
    Fetching -> Reading-Local -> Merging -> Writing.  The remote is
    authoritative except where ``PullMergeStrategy`` preserves a local
    value that the remote reports as empty.  Files of a written language
    that the remote no longer fills are removed.

sync
    Fetching -> Reading-Local -> Diffing -> Resolving (only with
    conflicts) -> Uploading -> Downloading -> Writing.  Only the languages
    that received remote values are rewritten.

push
    Reading-Local -> Fetching -> Diffing -> Resolving -> Uploading.

Failure semantics:

* Fetch and upload happen before any local file is touched, so a
  ``RemoteError`` always leaves the local tree unchanged.
* Content for every file to be rewritten is rendered before uploading, so
  a nested-key collision aborts the run before the remote changes.
* A write failure after a successful upload raises ``PartialWriteError``
  naming the written and failed languages.  Each file is replaced
  atomically; across languages the guarantee is per file, not
  all-or-nothing.
"""

from __future__ import annotations

import copy
import logging

from localeflow_sync.config import ResolvedOptions
from localeflow_sync.core.client import RemoteStore, RemoteTranslations
from localeflow_sync.errors import (
    FormatError,
    LocalWriteError,
    PartialWriteError,
)
from localeflow_sync.formatters import TranslationFormatter, create_formatter
from localeflow_sync.sync.differ import compute_translation_diff
from localeflow_sync.sync.models import (
    Decision,
    DiffResult,
    PullReport,
    PushReport,
    ResolvedPartition,
    SyncReport,
    TranslationSet,
    group_by_language,
)
from localeflow_sync.sync.resolver import (
    ConflictPrompter,
    ResolutionPolicy,
    policy_from_flags,
    resolve_conflicts,
)
from localeflow_sync.sync.strategies import MISSING, PullMergeStrategy
from localeflow_sync.translation_io import (
    prune_language_files,
    read_translation_files,
    resolve_file_pattern,
    split_by_namespace,
    write_language_files,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure merge helpers
# ---------------------------------------------------------------------------


def merge_pull(
    local: TranslationSet,
    remote: TranslationSet,
    languages: tuple[str, ...] | None = None,
) -> tuple[TranslationSet, int]:
    """Merge a remote response over the local set for pull.

    Only keys reported by the remote appear in the output; a key absent
    from the remote response is dropped even if it exists locally.

    Args:
        local: Local translations.
        remote: Remote translations.
        languages: Restrict the output to these languages.

    Returns:
        ``(merged, preserved)`` where *preserved* counts local values kept
        because the remote value was empty.
    """
    strategy = PullMergeStrategy()
    merged: TranslationSet = {}
    preserved = 0

    for language in sorted(remote):
        if languages is not None and language not in languages:
            continue
        local_keys = local.get(language, {})
        result: dict[str, str] = {}
        for key, remote_value in remote[language].items():
            local_value = local_keys.get(key, MISSING)
            if strategy.resolve(local_value, remote_value) is Decision.LOCAL:
                result[key] = local_value
                preserved += 1
            else:
                result[key] = remote_value
        merged[language] = result

    return merged, preserved


def build_upload_payload(
    diff: DiffResult, partition: ResolvedPartition
) -> TranslationSet:
    """Local-only entries plus conflicts resolved to the local value."""
    payload = group_by_language(diff.local_only)
    for language, keys in group_by_language(
        partition.use_local, side="local_value"
    ).items():
        payload.setdefault(language, {}).update(keys)
    return payload


def build_download(
    diff: DiffResult, partition: ResolvedPartition
) -> TranslationSet:
    """Remote-only entries plus conflicts resolved to the remote value."""
    download = group_by_language(diff.remote_only)
    for language, keys in group_by_language(
        partition.use_remote, side="remote_value"
    ).items():
        download.setdefault(language, {}).update(keys)
    return download


def apply_download(
    local: TranslationSet, download: TranslationSet
) -> TranslationSet:
    """Return a copy of *local* with *download* merged in."""
    merged = copy.deepcopy(local)
    for language, keys in download.items():
        merged.setdefault(language, {}).update(keys)
    return merged


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class SyncEngine:
    """Run pull, push and sync for one set of resolved options.

    Args:
        store: Remote translation store.
        options: Resolved per-invocation options.
        prompter: Asked about conflicts when no force flag is set.
    """

    def __init__(
        self,
        store: RemoteStore,
        options: ResolvedOptions,
        prompter: ConflictPrompter | None = None,
    ) -> None:
        self.store = store
        self.options = options
        self.prompter = prompter
        self.formatter: TranslationFormatter = create_formatter(
            options.format,
            nested=options.nested,
            indentation=options.indentation,
        )
        self.file_pattern = resolve_file_pattern(
            options.file_pattern, self.formatter
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _fetch(self) -> tuple[str, RemoteTranslations]:
        opts = self.options
        logger.info(
            "Fetching translations for %s/%s@%s",
            opts.project,
            opts.space,
            opts.branch,
        )
        branch_id = self.store.resolve_branch(
            opts.project, opts.space, opts.branch
        )
        return branch_id, self.store.fetch_translations(branch_id)

    def _read_local(self) -> TranslationSet:
        logger.info(
            "Reading local translations from %s", self.options.directory
        )
        return read_translation_files(
            self.options.directory, self.formatter, self.file_pattern
        )

    def _render_check(
        self, translations: TranslationSet, languages: list[str]
    ) -> None:
        """Raise ``FormatError`` now if any file could not be rendered."""
        for language in languages:
            for namespace, keys in split_by_namespace(
                translations[language]
            ).items():
                try:
                    self.formatter.format(keys)
                except FormatError as exc:
                    where = f"{language}" + (
                        f" (namespace '{namespace}')" if namespace else ""
                    )
                    raise FormatError(f"{where}: {exc.message}") from exc

    def _write(
        self,
        translations: TranslationSet,
        languages: list[str],
        uploaded: bool,
        prune: bool = False,
    ) -> tuple[list[str], list[str]]:
        """Write *languages*, attempting every language once.

        With *prune*, files of a written language that received no keys
        (a top-level file or a namespace the remote no longer reports) are
        deleted so their stale keys do not survive.

        Returns:
            ``(files_written, files_removed)``.

        Raises:
            PartialWriteError: If anything failed after an upload.
            LocalWriteError: If anything failed and nothing was uploaded.
        """
        files: list[str] = []
        removed: list[str] = []
        written: list[str] = []
        failed: list[str] = []
        errors: list[str] = []

        for language in languages:
            try:
                paths = write_language_files(
                    self.options.directory,
                    language,
                    translations[language],
                    self.formatter,
                    self.file_pattern,
                )
                if prune:
                    removed.extend(
                        str(p)
                        for p in prune_language_files(
                            self.options.directory,
                            language,
                            paths,
                            self.formatter,
                            self.file_pattern,
                        )
                    )
            except (LocalWriteError, FormatError) as exc:
                logger.error("Failed to write %s: %s", language, exc.message)
                failed.append(language)
                errors.append(exc.message)
                continue
            written.append(language)
            files.extend(str(p) for p in paths)

        if failed:
            detail = "; ".join(errors)
            if uploaded:
                raise PartialWriteError(
                    f"Remote store was updated but {len(failed)} "
                    f"language(s) could not be written locally "
                    f"({', '.join(failed)}): {detail}",
                    written=written,
                    failed=failed,
                )
            raise LocalWriteError(
                f"Could not write {len(failed)} language(s) "
                f"({', '.join(failed)}): {detail}"
            )
        return files, removed

    # ------------------------------------------------------------------
    # pull
    # ------------------------------------------------------------------

    def pull(self) -> PullReport:
        """Download remote translations into local files."""
        _, remote = self._fetch()
        local = self._read_local()

        merged, preserved = merge_pull(
            local, remote.translations, self.options.languages
        )
        languages = [lang for lang in sorted(merged) if merged[lang]]
        if self.options.languages:
            missing = sorted(set(self.options.languages) - set(merged))
            if missing:
                logger.warning(
                    "No remote translations for: %s", ", ".join(missing)
                )
        if preserved:
            logger.info(
                "Preserved %d local value(s) the remote reports as empty",
                preserved,
            )

        self._render_check(merged, languages)
        files, removed = self._write(
            merged, languages, uploaded=False, prune=True
        )

        return PullReport(
            branch=self.options.branch,
            languages=languages,
            keys_written=sum(len(merged[lang]) for lang in languages),
            preserved=preserved,
            files=files,
            removed=removed,
        )

    # ------------------------------------------------------------------
    # sync
    # ------------------------------------------------------------------

    def analyze(self) -> tuple[str, TranslationSet, DiffResult]:
        """Fetch, read and diff without changing anything.

        Returns:
            ``(branch_id, local, diff)``.
        """
        branch_id, remote = self._fetch()
        local = self._read_local()
        diff = compute_translation_diff(local, remote.translations)
        logger.info(
            "%d local-only, %d remote-only, %d conflict(s)",
            len(diff.local_only),
            len(diff.remote_only),
            len(diff.conflicts),
        )
        return branch_id, local, diff

    def sync(self) -> SyncReport:
        """Bidirectional sync between local files and the remote store."""
        opts = self.options
        policy = policy_from_flags(opts.force_local, opts.force_remote)
        branch_id, local, diff = self.analyze()

        if opts.dry_run:
            return SyncReport(branch=opts.branch, dry_run=True, diff=diff)

        partition = resolve_conflicts(diff.conflicts, policy, self.prompter)

        if (
            not diff.local_only
            and not diff.remote_only
            and partition.total == 0
        ):
            logger.info("Already in sync")
            return SyncReport(branch=opts.branch, diff=diff)

        upload = build_upload_payload(diff, partition)
        download = build_download(diff, partition)
        merged = apply_download(local, download)
        touched = sorted(download)

        self._render_check(merged, touched)

        if upload:
            logger.info(
                "Uploading %d translation(s)",
                sum(len(keys) for keys in upload.values()),
            )
            self.store.upload_translations(branch_id, upload)

        files, _ = self._write(merged, touched, uploaded=bool(upload))

        return SyncReport(
            branch=opts.branch,
            diff=diff,
            uploaded=upload,
            downloaded=download,
            resolved_local=len(partition.use_local),
            resolved_remote=len(partition.use_remote),
            languages_written=touched,
            files=files,
        )

    # ------------------------------------------------------------------
    # push
    # ------------------------------------------------------------------

    def push(self) -> PushReport:
        """Upload local translations, asking about conflicts.

        The whole local set is uploaded except conflicts where the remote
        value is kept.
        """
        opts = self.options
        local = self._read_local()
        if opts.languages:
            local = {
                lang: keys
                for lang, keys in local.items()
                if lang in opts.languages
            }
        if not local:
            logger.info("No local translations to push")
            return PushReport(branch=opts.branch)

        branch_id, remote = self._fetch()
        diff = compute_translation_diff(local, remote.translations)
        policy = (
            ResolutionPolicy.FORCE_LOCAL
            if opts.force_local
            else ResolutionPolicy.INTERACTIVE
        )
        partition = resolve_conflicts(diff.conflicts, policy, self.prompter)

        payload = copy.deepcopy(local)
        for conflict in partition.use_remote:
            payload[conflict.language].pop(conflict.key, None)
        payload = {lang: keys for lang, keys in payload.items() if keys}

        if not payload:
            logger.info("Nothing to push (all changes skipped)")
        else:
            self.store.upload_translations(branch_id, payload)

        return PushReport(
            branch=opts.branch,
            uploaded=payload,
            new_keys=len(diff.local_only),
            updated=len(partition.use_local),
            skipped=len(partition.use_remote),
        )
