"""Command-line interface: ``localeflow pull|push|sync|init``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Sequence
from typing import Any

from dotenv import load_dotenv

from . import __version__
from .config import ResolvedOptions, resolve_options
from .config_loader import ensure_config, load_hierarchical_config
from .config_schema import build_config
from .core.client import LocaleflowClient, RemoteStore
from .errors import LocaleflowError
from .formatters import SUPPORTED_FORMATS
from .logger import setup_logging
from .sync.engine import SyncEngine
from .sync.reporter import (
    format_pull_report,
    format_push_report,
    format_sync_report,
    report_to_json,
)
from .sync.resolver import TerminalPrompter

logger = logging.getLogger(__name__)

StoreFactory = Callable[[ResolvedOptions], RemoteStore]


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-p", "--project", help="Project slug")
    parser.add_argument("-s", "--space", help="Space slug")
    parser.add_argument("-b", "--branch", help="Branch name")
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        help="File format (default: from config, else json)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the report as JSON",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="localeflow",
        description="Keep local translation files in sync with LocaleFlow",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Download translations into ./locales
  localeflow pull --project web --space frontend

  # Bidirectional sync, keeping remote values for every conflict
  localeflow sync --force-remote

  # Preview a sync without changing anything
  localeflow sync --dry-run

Exit codes:
  0 success, 1 unexpected error, 2 unresolved conflicts (no terminal),
  3 configuration, 4 remote store, 5 file format, 6 local write,
  7 remote updated but local write-back incomplete, 8 local read
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"localeflow version {__version__}",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default="text",
        help="Log record format on stderr (default: text)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    pull = sub.add_parser("pull", help="Download translations")
    _add_target_args(pull)
    pull.add_argument(
        "-o", "--output", dest="dir", help="Output directory"
    )
    pull.add_argument(
        "-l",
        "--lang",
        dest="languages",
        action="append",
        help="Language to pull (repeatable or comma-separated)",
    )

    sync = sub.add_parser(
        "sync", help="Bidirectional sync between local and remote"
    )
    _add_target_args(sync)
    sync.add_argument("-d", "--dir", help="Translation directory")
    sync.add_argument(
        "--force-local",
        action="store_true",
        help="Resolve every conflict with the local value",
    )
    sync.add_argument(
        "--force-remote",
        action="store_true",
        help="Resolve every conflict with the remote value",
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the analysis without changing anything",
    )

    push = sub.add_parser("push", help="Upload local translations")
    _add_target_args(push)
    push.add_argument("-S", "--source", dest="dir", help="Source directory")
    push.add_argument(
        "-l",
        "--languages",
        action="append",
        help="Languages to push (repeatable or comma-separated)",
    )
    push.add_argument(
        "-f",
        "--force",
        dest="force_local",
        action="store_true",
        help="Use local values for every conflict without prompting",
    )

    sub.add_parser("init", help="Create a starter .localeflow/config.yml")
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    keys = (
        "project",
        "space",
        "branch",
        "format",
        "dir",
        "languages",
        "force_local",
        "force_remote",
        "dry_run",
    )
    return {key: getattr(args, key, None) for key in keys}


def _emit(report: Any, text: str, json_output: bool) -> None:
    if json_output:
        print(json.dumps(report_to_json(report), indent=2))
    else:
        print(text)


def run_command(
    args: argparse.Namespace,
    store_factory: StoreFactory = LocaleflowClient.from_options,
) -> int:
    """Execute a parsed command and return the process exit code.

    Raises:
        LocaleflowError: Propagated to ``main()`` for reporting.
    """
    if args.command == "init":
        path, created = ensure_config()
        if created:
            print(f"Created {path}")
        else:
            print(f"Config already exists: {path}")
        return 0

    unified = build_config(load_hierarchical_config())
    if unified.logging.file or unified.logging.level.upper() != "INFO":
        setup_logging(
            debug=args.debug,
            log_file=args.log_file or unified.logging.file,
            debug_format=args.log_format,
            level=unified.logging.level,
        )
    options = resolve_options(args.command, unified, _cli_overrides(args))
    store = store_factory(options)
    prompter = TerminalPrompter(
        remote_label="Server" if args.command == "push" else "Remote"
    )
    engine = SyncEngine(store, options, prompter=prompter)

    try:
        if args.command == "pull":
            report = engine.pull()
            _emit(report, format_pull_report(report), args.json_output)
        elif args.command == "sync":
            report = engine.sync()
            _emit(report, format_sync_report(report), args.json_output)
        else:
            report = engine.push()
            _emit(report, format_push_report(report), args.json_output)
    finally:
        close = getattr(store, "close", None)
        if close is not None:
            close()
    return 0


def main(
    argv: Sequence[str] | None = None,
    store_factory: StoreFactory = LocaleflowClient.from_options,
) -> int:
    """Parse arguments, run the command and map errors to exit codes."""
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging(
        debug=args.debug,
        log_file=args.log_file,
        debug_format=args.log_format,
    )

    try:
        return run_command(args, store_factory)
    except LocaleflowError as exc:
        logger.debug("Command failed", exc_info=True)
        print(exc.render(), file=sys.stderr)
        return exc.exit_code
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
