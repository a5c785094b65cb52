"""Error taxonomy for the LocaleFlow sync CLI.

Every error raised on purpose by this package derives from
``LocaleflowError`` and carries the process exit code the CLI should use,
plus a corrective action shown to the operator:

- ``ConfigurationError``: missing project/space, conflicting flags.
  Raised before any network or file I/O.
- ``RemoteError``: network failure, non-2xx response, unknown space/branch.
- ``FormatError``: malformed translation file content or an impossible
  nested structure.
- ``LocalReadError``: a translation file or directory could not be read.
- ``LocalWriteError``: a translation file could not be written.
- ``PartialWriteError``: the upload succeeded but local write-back failed,
  so the remote already holds the new data.
- ``ConflictResolutionError``: conflicts need an operator decision but no
  interactive terminal is available.
"""

from __future__ import annotations


class LocaleflowError(Exception):
    """Base class for all LocaleFlow sync errors."""

    exit_code = 1
    kind = "error"
    corrective_action = "Re-run with --debug for details."

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def render(self) -> str:
        """Format the error for display on stderr."""
        return (
            f"Error ({self.kind}): {self.message}\n\n"
            f"Action: {self.corrective_action}"
        )


class ConfigurationError(LocaleflowError):
    exit_code = 3
    kind = "configuration"
    corrective_action = (
        "Pass the missing option on the command line or set it in "
        ".localeflow/config.yml (see 'localeflow init')."
    )


class RemoteError(LocaleflowError):
    """The remote translation store failed or rejected a request.

    Attributes:
        resource: The space, branch or URL the request was about.
        status_code: HTTP status code when the server answered.
    """

    exit_code = 4
    kind = "remote"
    corrective_action = (
        "Check the API URL, your API key and that the project, space and "
        "branch exist, then retry. No local files were changed."
    )

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.resource = resource
        self.status_code = status_code


class FormatError(LocaleflowError):
    """Translation content could not be parsed or structured.

    Attributes:
        path: The file the content came from, when known.
    """

    exit_code = 5
    kind = "format"
    corrective_action = "Fix the file syntax and run the command again."

    def __init__(self, message: str, path: str | None = None) -> None:
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class LocalReadError(LocaleflowError):
    exit_code = 8
    kind = "read"
    corrective_action = (
        "Check that the translations directory and its files are readable."
    )


class LocalWriteError(LocaleflowError):
    exit_code = 6
    kind = "write"
    corrective_action = (
        "Check permissions and free space in the translations directory."
    )


class PartialWriteError(LocalWriteError):
    """Upload succeeded but some local files could not be rewritten.

    Attributes:
        written: Languages whose files were rewritten.
        failed: Languages whose files could not be rewritten.
    """

    exit_code = 7
    kind = "partial-write"
    corrective_action = (
        "The remote store already has the new translations. Fix the local "
        "problem and run 'localeflow pull' to refresh the stale files."
    )

    def __init__(
        self,
        message: str,
        written: list[str] | None = None,
        failed: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.written = written or []
        self.failed = failed or []


class ConflictResolutionError(LocaleflowError):
    exit_code = 2
    kind = "conflict"
    corrective_action = (
        "Run in an interactive terminal, or pass --force-local or "
        "--force-remote to choose a side for every conflict."
    )
