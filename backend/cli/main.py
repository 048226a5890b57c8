"""
hashwatch Command Line Interface.

Watches a source tree and reruns the build whenever a source file's
content really changes.
Requires Python 3.11+.

Usage:
    hashwatch [options] [build arguments...]

Arguments not recognised as options are passed on to the build
command unchanged, e.g. ``hashwatch -m -o app.js`` runs
``gopherjs build -m -o app.js``.
"""

import argparse
import asyncio
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from builder.rebuild import Rebuilder
from digest.change_detector import ChangeDetector
from utils.config import LOG_LEVELS, get_settings
from utils.console import ConsoleReporter
from utils.logger import close_logging, configure_logging, get_logger
from watcher.dispatcher import Dispatcher
from watcher.filters import PathFilter
from watcher.startup import iter_source_files, start_watching

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="hashwatch",
        # Build flags must never be mistaken for abbreviated options
        allow_abbrev=False,
        description="Rebuild when source files change, ignoring duplicate save events",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory to watch (default: current directory)",
    )
    parser.add_argument(
        "--ext",
        default=None,
        help="Source file extension to watch (default: .go)",
    )
    parser.add_argument(
        "--command",
        default=None,
        help='Build command to run (default: "gopherjs build")',
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        default=None,
        help="Hash existing source files at startup so the first edit is compared",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for diagnostics written to stderr",
    )
    return parser


async def watch(
    root: Path | None,
    build_args: Sequence[str],
    reporter: ConsoleReporter,
    path_filter: PathFilter,
    command: Sequence[str],
    seed: bool = False,
) -> int:
    """
    Run startup and then the watch loop until cancelled.

    Returns:
        Process exit status
    """
    result = start_watching(root, hidden_prefix=path_filter.hidden_prefix)
    if not result.ok:
        reporter.fatal(str(result.error))
        return 1

    source = result.source
    try:
        detector = ChangeDetector()
        if seed:
            detector.seed(iter_source_files(result.directories, path_filter))

        dispatcher = Dispatcher(
            detector=detector,
            rebuilder=Rebuilder(command=command, cwd=result.root),
            reporter=reporter,
            path_filter=path_filter,
            build_args=build_args,
        )
        reporter.notice_watching(len(result.directories))
        await dispatcher.run(source)
    finally:
        source.close()

    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args, build_args = parser.parse_known_args(argv)

    reporter = ConsoleReporter(colors=False if args.no_color else None)

    try:
        settings = get_settings()
        configure_logging(level=args.log_level)
    except (ValidationError, ValueError) as e:
        reporter.fatal(f"invalid configuration: {e}")
        sys.exit(1)

    path_filter = PathFilter(
        extension=args.ext or settings.watcher.extension,
        hidden_prefix=settings.watcher.hidden_prefix,
    )
    command = shlex.split(args.command) if args.command else settings.build.argv
    seed = settings.watcher.seed_on_start if args.seed is None else args.seed

    if not command:
        reporter.fatal("build command is empty")
        sys.exit(1)

    try:
        status = asyncio.run(watch(
            args.root,
            build_args,
            reporter=reporter,
            path_filter=path_filter,
            command=command,
            seed=seed,
        ))
    except KeyboardInterrupt:
        logger.info("interrupted")
        sys.exit(130)
    finally:
        close_logging()

    sys.exit(status)


if __name__ == "__main__":
    main()
