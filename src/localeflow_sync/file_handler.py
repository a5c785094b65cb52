"""File I/O primitives for translation files.

* ``read_file_with_encoding`` decodes UTF-8 (with or without BOM) and falls
  back to charset-normalizer detection for legacy encodings.
* ``write_file`` writes atomically: content goes to a temp file in the
  target directory which then replaces the target via ``os.replace()``, so
  a failed write never leaves a truncated translation file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    raw = path.read_bytes()
    if not raw:
        return ("", "utf-8")

    if raw.startswith(_UTF8_BOM):
        raw = raw[len(_UTF8_BOM) :]
    try:
        return (raw.decode("utf-8"), "utf-8")
    except UnicodeDecodeError:
        pass

    result = from_bytes(raw).best()
    if result is None:
        logger.warning(
            "Could not detect encoding of %s, decoding as UTF-8", path
        )
        return (raw.decode("utf-8", errors="replace"), "utf-8")
    logger.debug("Detected %s encoding for %s", result.encoding, path)
    return (str(result), result.encoding)


def write_file(
    path: Path, content: str, encoding: str = "utf-8"
) -> int:
    """Atomically write content, creating parent directories as needed.

    Args:
        path: Path to the output file.
        content: String content to write.
        encoding: Encoding to use (default: utf-8).

    Returns:
        Number of bytes written.

    Raises:
        OSError: If the directory cannot be created or the file cannot be
            written.  The previous file content is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content.encode(encoding)
    mode = path.stat().st_mode & 0o777 if path.exists() else 0o644

    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(encoded)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    return len(encoded)
