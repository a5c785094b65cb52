"""Conflict resolution policies for sync and push.

Provides the resolvers that turn a list of conflicts into a
``ResolvedPartition``:

- ``LocalWinsResolver``: every conflict keeps the local value.
- ``RemoteWinsResolver``: every conflict keeps the remote value.
- ``InteractiveResolver``: asks a ``ConflictPrompter`` for each conflict.

Prompting is isolated behind ``ConflictPrompter`` so the partitioning
logic stays free of terminal I/O; ``TerminalPrompter`` is the stdin/stdout
implementation used by the CLI.

The ``create_resolver()`` factory maps a policy to a resolver instance and
``policy_from_flags()`` turns the ``--force-local`` / ``--force-remote``
flags into a policy.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Callable, Protocol, TextIO

from localeflow_sync.errors import (
    ConfigurationError,
    ConflictResolutionError,
)
from localeflow_sync.sync.models import (
    ConflictEntry,
    Decision,
    ResolvedPartition,
)

logger = logging.getLogger(__name__)


class ResolutionPolicy(str, Enum):
    FORCE_LOCAL = "force-local"
    FORCE_REMOTE = "force-remote"
    INTERACTIVE = "interactive"


def policy_from_flags(
    force_local: bool, force_remote: bool
) -> ResolutionPolicy:
    """Map the CLI force flags to a resolution policy.

    Raises:
        ConfigurationError: If both flags are set.
    """
    if force_local and force_remote:
        raise ConfigurationError(
            "--force-local and --force-remote are mutually exclusive"
        )
    if force_local:
        return ResolutionPolicy.FORCE_LOCAL
    if force_remote:
        return ResolutionPolicy.FORCE_REMOTE
    return ResolutionPolicy.INTERACTIVE


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


class ConflictPrompter(Protocol):
    """Capability that asks an operator to pick a side."""

    def ask(
        self, conflict: ConflictEntry, position: int, total: int
    ) -> Decision:
        """Return ``Decision.LOCAL`` or ``Decision.REMOTE``.

        Args:
            conflict: The conflict to decide.
            position: 1-based index of the conflict.
            total: Number of conflicts being resolved.

        Raises:
            ConflictResolutionError: If no answer can be obtained.
        """
        ...  # pragma: no cover


def truncate(text: str, max_length: int = 60) -> str:
    """Shorten *text* to *max_length* characters with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


class TerminalPrompter:
    """Prompt on a terminal for each conflict.

    Answers: ``l`` (local), ``r`` (remote), ``L`` (local for all
    remaining), ``R`` (remote for all remaining).  The sticky answers are
    remembered for the rest of the session.

    Args:
        stdin: Input stream; must be a TTY.
        stdout: Output stream for the conflict display.
        input_fn: Line reader, ``input`` by default.
        remote_label: Label for the remote side (``"Remote"``/``"Server"``).
    """

    _ANSWERS = {
        "l": (Decision.LOCAL, False),
        "r": (Decision.REMOTE, False),
        "L": (Decision.LOCAL, True),
        "R": (Decision.REMOTE, True),
    }

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        input_fn: Callable[[str], str] = input,
        remote_label: str = "Remote",
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.input_fn = input_fn
        self.remote_label = remote_label
        self._sticky: Decision | None = None

    def is_interactive(self) -> bool:
        isatty = getattr(self.stdin, "isatty", None)
        return bool(isatty and isatty())

    def ask(
        self, conflict: ConflictEntry, position: int, total: int
    ) -> Decision:
        if self._sticky is not None:
            return self._sticky

        if not self.is_interactive():
            raise ConflictResolutionError(
                f"{total} conflict(s) need a decision but stdin is not "
                f"an interactive terminal"
            )

        out = self.stdout
        print(f"[{position}/{total}] {conflict.key}", file=out)
        print(f"  Language: {conflict.language}", file=out)
        print(
            f"  {self.remote_label}: \"{truncate(conflict.remote_value)}\"",
            file=out,
        )
        print(
            f"  Local:  \"{truncate(conflict.local_value)}\"", file=out
        )

        while True:
            try:
                answer = self.input_fn(
                    "Use [l]ocal, [r]emote, [L]ocal for all, "
                    "[R]emote for all? "
                ).strip()
            except EOFError:
                raise ConflictResolutionError(
                    "Input closed before all conflicts were resolved"
                ) from None
            if answer in self._ANSWERS:
                decision, sticky = self._ANSWERS[answer]
                if sticky:
                    self._sticky = decision
                print(file=out)
                return decision
            print(f"  Unrecognised answer: '{answer}'", file=out)


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------


class ConflictResolver(Protocol):
    """Protocol that all conflict resolvers must satisfy."""

    def partition(
        self, conflicts: list[ConflictEntry]
    ) -> ResolvedPartition:
        """Place every conflict in exactly one bucket."""
        ...  # pragma: no cover


class LocalWinsResolver:
    """Always resolve conflicts in favour of the local value."""

    def partition(
        self, conflicts: list[ConflictEntry]
    ) -> ResolvedPartition:
        return ResolvedPartition(use_local=list(conflicts))


class RemoteWinsResolver:
    """Always resolve conflicts in favour of the remote value."""

    def partition(
        self, conflicts: list[ConflictEntry]
    ) -> ResolvedPartition:
        return ResolvedPartition(use_remote=list(conflicts))


class InteractiveResolver:
    """Ask the prompter about every conflict.

    A prompter answer other than ``LOCAL``/``REMOTE`` is a programming
    error and raises ``ValueError``; no conflict is ever defaulted.
    """

    def __init__(self, prompter: ConflictPrompter) -> None:
        self.prompter = prompter

    def partition(
        self, conflicts: list[ConflictEntry]
    ) -> ResolvedPartition:
        use_local: list[ConflictEntry] = []
        use_remote: list[ConflictEntry] = []
        total = len(conflicts)

        for position, conflict in enumerate(conflicts, start=1):
            decision = self.prompter.ask(conflict, position, total)
            if decision is Decision.LOCAL:
                use_local.append(conflict)
            elif decision is Decision.REMOTE:
                use_remote.append(conflict)
            else:
                raise ValueError(
                    f"Prompter returned {decision!r} for "
                    f"{conflict.language}:{conflict.key}; expected "
                    f"LOCAL or REMOTE"
                )

        logger.info(
            "Resolved %d conflict(s): %d local, %d remote",
            total,
            len(use_local),
            len(use_remote),
        )
        return ResolvedPartition(use_local=use_local, use_remote=use_remote)


def create_resolver(
    policy: ResolutionPolicy,
    prompter: ConflictPrompter | None = None,
) -> ConflictResolver:
    """Create a conflict resolver for *policy*.

    Args:
        policy: The resolution policy.
        prompter: Required for ``INTERACTIVE``.

    Raises:
        ConflictResolutionError: If the policy is interactive and no
            prompter is available.
    """
    if policy is ResolutionPolicy.FORCE_LOCAL:
        return LocalWinsResolver()
    if policy is ResolutionPolicy.FORCE_REMOTE:
        return RemoteWinsResolver()
    if prompter is None:
        raise ConflictResolutionError(
            "Conflicts need a decision but no interactive prompter is "
            "available"
        )
    return InteractiveResolver(prompter)


def resolve_conflicts(
    conflicts: list[ConflictEntry],
    policy: ResolutionPolicy,
    prompter: ConflictPrompter | None = None,
) -> ResolvedPartition:
    """Partition *conflicts* according to *policy*.

    An empty conflict list never consults the prompter.
    """
    if not conflicts:
        return ResolvedPartition()
    return create_resolver(policy, prompter).partition(conflicts)
