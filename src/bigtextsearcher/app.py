"""Command-line entry point for bigtextsearcher."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from rich.console import Console
from rich.markup import escape

from bigtextsearcher.adapters.console_reporter import ConsoleReporter
from bigtextsearcher.core.config import DEFAULT_BUFFER_SIZE_MB, DEFAULT_KEYWORDS, build_settings
from bigtextsearcher.core.errors import SearchError
from bigtextsearcher.core.pipeline import run_search
from bigtextsearcher.settings import AppSettings, LoggingSettings, load_app_settings

NAME = "BIGTEXT"
FONT = "tarty-1"
PROG = "bigtextsearcher"

EXIT_OK = 0
EXIT_ERROR = 1

EXAMPLES = f"""examples:
  {PROG} input.log.gz output.txt -k chrome,edge,firefox
  {PROG} input.log.gz output.txt -k error,warning --case-sensitive
"""

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging(config: LoggingSettings) -> None:
    level = getattr(logging, config.level, logging.WARNING)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [console_handler]

    if config.file_path:
        directory = os.path.dirname(config.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Copy the lines of a large text file (plain or .gz) that contain any keyword.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="Input file path (supports .gz compressed files)")
    parser.add_argument("output", help="Output file path for matching lines")
    parser.add_argument(
        "-k",
        "--keywords",
        default=DEFAULT_KEYWORDS,
        metavar="KEYWORDS",
        help=f"Comma-separated list of keywords to search for (default: {DEFAULT_KEYWORDS})",
    )
    parser.add_argument(
        "-c",
        "--case-sensitive",
        action="store_true",
        help="Enable case-sensitive matching (default: case-insensitive)",
    )
    parser.add_argument(
        "-b",
        "--buffer-size",
        type=int,
        default=DEFAULT_BUFFER_SIZE_MB,
        metavar="SIZE",
        help=f"Buffer size in MB for file operations (default: {DEFAULT_BUFFER_SIZE_MB})",
    )
    return parser


def run(args: argparse.Namespace, console: Optional[Console] = None) -> int:
    """Run one search for parsed arguments and return the process exit code."""

    reporter = ConsoleReporter(console)
    settings = build_settings(
        args.input,
        args.output,
        keywords=args.keywords,
        case_sensitive=args.case_sensitive,
        buffer_size_mb=args.buffer_size,
    )
    try:
        run_search(settings, reporter)
    except SearchError as exc:
        reporter.close()
        reporter.error(exc.message)
        return EXIT_ERROR
    except KeyboardInterrupt:
        reporter.close()
        reporter.error("Interrupted; partial output was left in place")
        return EXIT_ERROR
    except Exception as exc:
        reporter.close()
        LOGGER.exception("Unexpected error during scan")
        reporter.error(str(exc) or exc.__class__.__name__)
        return EXIT_ERROR
    return EXIT_OK


def main(argv: Optional[list[str]] = None, *, app_settings: Optional[AppSettings] = None) -> int:
    try:
        app_settings = app_settings or load_app_settings()
    except ValueError as exc:
        Console(stderr=True).print(f"[red]Error:[/] {escape(str(exc))}")
        return EXIT_ERROR
    _configure_logging(app_settings.logging)
    args = build_parser().parse_args(argv)
    if app_settings.show_banner:
        _print_banner()
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
