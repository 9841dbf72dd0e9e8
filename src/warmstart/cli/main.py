# SPDX-License-Identifier: MIT
"""Command-line interface for running scripts with the module cache."""

from __future__ import annotations

import argparse
import json
import logging
import runpy
import sys
from dataclasses import asdict
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import logfire

from ..observability import Profiler, init_logfire
from ..runtime.context import CacheContext
from ..runtime.settings import Settings, load_settings

LOG_LEVELS = ["fatal", "error", "warn", "notice", "info", "debug", "trace"]

# Module logger for CLI diagnostics mirroring
logger = logging.getLogger(__name__)


def _print_version() -> None:
    """Print the installed package version."""
    try:
        pkg_version = version("warmstart")
    except PackageNotFoundError:  # pragma: no cover - fallback for source checkouts
        pkg_version = "unknown"
    line = f"warmstart {pkg_version}"
    print(line)
    logger.info(line)


def _configure_logging(args: argparse.Namespace, settings: Settings) -> None:
    """Configure Logfire based on verbosity flags."""
    index = 2 + args.verbose - args.quiet
    index = max(0, min(len(LOG_LEVELS) - 1, index))
    init_logfire(settings.logfire_token, LOG_LEVELS[index])  # type: ignore[arg-type]


def _cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    """Execute a script with the cache loader installed."""
    started = Profiler.now()
    context = CacheContext(settings)
    if args.profile:
        context.enable_profile()
    script = Path(args.script)
    with context.session():
        context.record_setup(started)
        saved_argv = sys.argv
        sys.argv = [str(script), *args.script_args]
        try:
            runpy.run_path(str(script), run_name="__main__")
        finally:
            sys.argv = saved_argv
    if args.log:
        context.print_log()
    if args.profile:
        context.print_profile()
    return 0


def _cmd_inspect(args: argparse.Namespace, settings: Settings) -> int:
    """List cached modules with their freshness status."""
    context = CacheContext(settings)
    context.load()
    reports = context.inspect()
    if args.json:
        print(json.dumps([asdict(report) for report in reports], indent=2))
        return 0
    print(f"Store: {settings.store_path} ({len(reports)} entries)")
    for report in reports:
        print(f"{report.status:<7}  {report.name}  {report.path}  {report.size}B")
    return 0


def _cmd_clear(args: argparse.Namespace, settings: Settings) -> int:
    """Delete the module cache store."""
    context = CacheContext(settings)
    if not context.clear():
        print(f"Cannot delete {settings.store_path}", file=sys.stderr)
        return 1
    print(f"Cleared {settings.store_path}")
    return 0


def _add_common_args(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Attach options shared by every subcommand."""
    parser.add_argument(
        "--config", help="Path to a YAML configuration file.", default=None
    )
    parser.add_argument(
        "--cache-dir", help="Directory holding the store file.", default=None
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (repeatable).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=0,
        help="Decrease logging verbosity (repeatable).",
    )
    return parser


def _add_run_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    common: argparse.ArgumentParser,
) -> argparse.ArgumentParser:
    """Create the ``run`` subcommand parser."""
    parser = subparsers.add_parser(
        "run",
        parents=[common],
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Run a script with cached module loading",
        description=(
            "Execute SCRIPT with the cache loader ahead of the default import"
            " machinery, then persist newly compiled modules."
        ),
    )
    parser.add_argument("script", help="Python script to execute.")
    parser.add_argument(
        "script_args", nargs=argparse.REMAINDER, help="Arguments for the script."
    )
    parser.add_argument(
        "--root",
        action="append",
        dest="roots",
        default=None,
        help="Runtime path root (repeatable). Overrides configured roots.",
    )
    parser.add_argument(
        "--no-reduced-search",
        action="store_false",
        dest="reduced_search",
        default=None,
        help="Always scan the full runtime path on cache misses.",
    )
    parser.add_argument(
        "--profile", action="store_true", help="Print per-module load timings."
    )
    parser.add_argument("--log", action="store_true", help="Print the loader log.")
    parser.set_defaults(func=_cmd_run)
    return parser


def _add_inspect_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    common: argparse.ArgumentParser,
) -> argparse.ArgumentParser:
    """Create the ``inspect`` subcommand parser."""
    parser = subparsers.add_parser(
        "inspect",
        parents=[common],
        help="List cached modules",
        description="Show every cached module and whether its source changed.",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON output.")
    parser.set_defaults(func=_cmd_inspect)
    return parser


def _add_clear_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    common: argparse.ArgumentParser,
) -> argparse.ArgumentParser:
    """Create the ``clear`` subcommand parser."""
    parser = subparsers.add_parser(
        "clear",
        parents=[common],
        help="Delete the module cache",
        description="Remove the store file so the next run recompiles everything.",
    )
    parser.set_defaults(func=_cmd_clear)
    return parser


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser configured with subcommands."""
    parser = argparse.ArgumentParser(
        description=(
            "Cache compiled module code between runs so start-up skips the"
            " runtime path scan and recompilation."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the warmstart version and exit.",
    )
    common = _add_common_args(
        argparse.ArgumentParser(
            add_help=False, formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
    )
    subparsers = parser.add_subparsers(dest="command")
    _add_run_subparser(subparsers, common)
    _add_inspect_subparser(subparsers, common)
    _add_clear_subparser(subparsers, common)
    return parser


def _apply_args_to_settings(args: argparse.Namespace, settings: Settings) -> None:
    """Override settings fields based on CLI arguments."""
    if getattr(args, "cache_dir", None) is not None:
        settings.cache_dir = Path(args.cache_dir)
    if getattr(args, "roots", None) is not None:
        settings.runtime_path = [Path(root) for root in args.roots]
    if getattr(args, "reduced_search", None) is not None:
        settings.reduced_search = args.reduced_search


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and dispatch to the requested subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.version:
        _print_version()
        return 0
    if args.command is None:
        parser.print_help()
        raise SystemExit(1)
    settings = load_settings(args.config)
    _apply_args_to_settings(args, settings)
    _configure_logging(args, settings)
    try:
        return args.func(args, settings)
    finally:
        logfire.force_flush()


if __name__ == "__main__":
    # Allow module to be executed as a standalone script
    raise SystemExit(main())
