"""Reading and writing local translation files.

Layout under the translations root directory::

    ROOT/{pattern}              keys without a namespace
    ROOT/{namespace}/{pattern}  keys of that namespace

where ``{pattern}`` is the file pattern with ``{lang}`` substituted, e.g.
``en.json`` for ``{lang}.json``.  Namespaced keys are held in memory as
``namespace:key`` combined keys.

Only the file name part of the pattern is used; a directory prefix such
as ``locales/{lang}.json`` is ignored in favour of the root directory.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from localeflow_sync.errors import (
    FormatError,
    LocalReadError,
    LocalWriteError,
)
from localeflow_sync.file_handler import read_file_with_encoding, write_file
from localeflow_sync.formatters import TranslationFormatter
from localeflow_sync.keys import (
    NAMESPACE_SEPARATOR,
    combined_key,
    parse_namespaced_key,
)

logger = logging.getLogger(__name__)

LANG_PLACEHOLDER = "{lang}"


# =============================================================================
# File names
# =============================================================================


def pattern_filename(file_pattern: str) -> str:
    """Return the file name part of *file_pattern*."""
    return PurePosixPath(file_pattern).name


def resolve_file_pattern(
    file_pattern: str, formatter: TranslationFormatter
) -> str:
    """Make the pattern's extension agree with the formatter.

    ``{lang}.json`` becomes ``{lang}.yaml`` for the YAML formatter; a
    pattern already using one of the formatter's extensions (``.yml``) is
    kept as is.
    """
    name = pattern_filename(file_pattern)
    if LANG_PLACEHOLDER not in name:
        logger.warning(
            "File pattern '%s' has no %s placeholder, using '%s%s'",
            file_pattern,
            LANG_PLACEHOLDER,
            LANG_PLACEHOLDER,
            formatter.extension,
        )
        return f"{LANG_PLACEHOLDER}{formatter.extension}"
    suffix = PurePosixPath(name).suffix
    if suffix in formatter.extensions:
        return name
    if suffix and not suffix.endswith("}"):
        name = name[: -len(suffix)]
    return f"{name}{formatter.extension}"


def _pattern_regex(file_pattern: str) -> re.Pattern[str]:
    name = pattern_filename(file_pattern)
    escaped = re.escape(name).replace(
        re.escape(LANG_PLACEHOLDER), r"(?P<lang>[^/\\]+?)"
    )
    return re.compile(f"^{escaped}$")


def extract_language_from_filename(filename: str, file_pattern: str) -> str:
    """Extract the language code from a translation file name.

    Falls back to the file name without its extension when the pattern
    does not match.

    Examples:
        >>> extract_language_from_filename("messages-en.json", "messages-{lang}.json")
        'en'
        >>> extract_language_from_filename("de.json", "invalid-pattern")
        'de'
    """
    if LANG_PLACEHOLDER in file_pattern:
        match = _pattern_regex(file_pattern).match(filename)
        if match:
            return match.group("lang")
    return PurePosixPath(filename).stem


def translation_file_path(
    root_dir: Path,
    language: str,
    file_pattern: str,
    namespace: str | None = None,
) -> Path:
    """Build the path of the file holding *language* / *namespace*."""
    name = pattern_filename(file_pattern).replace(LANG_PLACEHOLDER, language)
    if namespace is None:
        return root_dir / name
    return root_dir / namespace / name


# =============================================================================
# Reading
# =============================================================================


def _is_translation_file(path: Path, formatter: TranslationFormatter) -> bool:
    return (
        path.is_file()
        and not path.name.startswith(".")
        and path.suffix in formatter.extensions
    )


def _list_dir(path: Path) -> list[Path]:
    try:
        return sorted(path.iterdir())
    except OSError as exc:
        raise LocalReadError(f"Could not list {path}: {exc}") from exc


def iter_translation_files(
    root_dir: Path, formatter: TranslationFormatter
) -> Iterator[tuple[str | None, Path]]:
    """Yield ``(namespace, path)`` for every translation file in the tree.

    Hidden entries are skipped, as are directories whose name contains
    the namespace separator.
    """
    if not root_dir.is_dir():
        return
    for entry in _list_dir(root_dir):
        if entry.is_dir():
            if entry.name.startswith("."):
                continue
            if NAMESPACE_SEPARATOR in entry.name:
                logger.warning(
                    "Skipping directory %s: namespace names cannot "
                    "contain '%s'",
                    entry,
                    NAMESPACE_SEPARATOR,
                )
                continue
            for child in _list_dir(entry):
                if _is_translation_file(child, formatter):
                    yield entry.name, child
        elif _is_translation_file(entry, formatter):
            yield None, entry


def read_translation_file(
    path: Path, formatter: TranslationFormatter
) -> dict[str, str]:
    """Read and parse one translation file.

    Raises:
        FormatError: If the content is malformed; the error names *path*.
        LocalReadError: If the file cannot be read.
    """
    try:
        content, _ = read_file_with_encoding(path)
    except OSError as exc:
        raise LocalReadError(f"Could not read {path}: {exc}") from exc
    try:
        return formatter.parse(content)
    except FormatError as exc:
        raise FormatError(exc.message, path=str(path)) from exc


def read_translation_files(
    root_dir: Path,
    formatter: TranslationFormatter,
    file_pattern: str,
) -> dict[str, dict[str, str]]:
    """Read every translation file under *root_dir*.

    Top-level files hold un-namespaced keys; each sub-directory is a
    namespace whose files contribute ``namespace:key`` entries.  A missing
    directory or one without matching files yields an empty set.

    Raises:
        FormatError: If any file is malformed.  Nothing is returned for a
            partially parsed tree.
        LocalReadError: If a file or directory cannot be read.
    """
    translations: dict[str, dict[str, str]] = defaultdict(dict)
    if not root_dir.is_dir():
        logger.info("Translation directory %s does not exist", root_dir)
        return {}

    for namespace, path in iter_translation_files(root_dir, formatter):
        language = extract_language_from_filename(path.name, file_pattern)
        for key, value in read_translation_file(path, formatter).items():
            translations[language][combined_key(namespace, key)] = value

    logger.debug(
        "Read %d language(s) from %s: %s",
        len(translations),
        root_dir,
        ", ".join(sorted(translations)),
    )
    return dict(translations)


# =============================================================================
# Writing
# =============================================================================


def split_by_namespace(
    translations: dict[str, str],
) -> dict[str | None, dict[str, str]]:
    """Group combined keys by namespace, stripping the prefix."""
    groups: dict[str | None, dict[str, str]] = defaultdict(dict)
    for combined, value in translations.items():
        parsed = parse_namespaced_key(combined)
        groups[parsed.namespace][parsed.key] = value
    return dict(groups)


def write_translation_file(
    path: Path,
    translations: dict[str, str],
    formatter: TranslationFormatter,
) -> int:
    """Serialise *translations* and write them atomically to *path*.

    Parent directories are created as needed.

    Returns:
        Number of bytes written.

    Raises:
        FormatError: If the mapping cannot be structured (nested-key
            collision).  Nothing is written.
        LocalWriteError: If the file cannot be written.  The previous
            content is left untouched.
    """
    try:
        content = formatter.format(translations)
    except FormatError as exc:
        raise FormatError(exc.message, path=str(path)) from exc
    try:
        return write_file(path, content)
    except OSError as exc:
        raise LocalWriteError(f"Could not write {path}: {exc}") from exc


def write_language_files(
    root_dir: Path,
    language: str,
    translations: dict[str, str],
    formatter: TranslationFormatter,
    file_pattern: str,
) -> list[Path]:
    """Write one language, one file per namespace.

    Returns:
        The paths written, in namespace order (un-namespaced first).
    """
    written: list[Path] = []
    groups = split_by_namespace(translations)
    ordered = sorted(groups, key=lambda ns: (ns is not None, ns or ""))
    for namespace in ordered:
        path = translation_file_path(
            root_dir, language, file_pattern, namespace
        )
        write_translation_file(path, groups[namespace], formatter)
        logger.debug(
            "Wrote %d key(s) to %s", len(groups[namespace]), path
        )
        written.append(path)
    return written


def prune_language_files(
    root_dir: Path,
    language: str,
    keep: list[Path],
    formatter: TranslationFormatter,
    file_pattern: str,
) -> list[Path]:
    """Delete files of *language* that are not in *keep*.

    Used after a pull rewrote *language*: a top-level or namespace file the
    remote no longer reports would otherwise keep its local-only keys.

    Returns:
        The paths removed.

    Raises:
        LocalWriteError: If a stale file cannot be removed.
    """
    kept = set(keep)
    stale = [
        path
        for _, path in iter_translation_files(root_dir, formatter)
        if path not in kept
        and extract_language_from_filename(path.name, file_pattern)
        == language
    ]
    for path in stale:
        try:
            path.unlink()
        except OSError as exc:
            raise LocalWriteError(
                f"Could not remove stale file {path}: {exc}"
            ) from exc
        logger.info("Removed %s: no remote keys left in it", path)
    return stale
