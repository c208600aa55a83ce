"""Argument parsing for the ``entail`` command.

Maps command-line flags onto Settings overrides. Only flags the user
actually passed become overrides, so environment configuration still
applies to everything else.
"""

import argparse
import logging
from collections.abc import Sequence
from typing import Any

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the ``entail`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="entail",
        description=(
            "Run test modules whose exported functions and mappings "
            "follow the test/skip/only naming conventions."
        ),
    )
    parser.add_argument(
        "patterns",
        nargs="*",
        metavar="PATTERN",
        help="Globs selecting test files relative to --cwd (default: test/**/*.py tests/**/*.py)",
    )
    parser.add_argument(
        "-b",
        "--bail",
        action="store_true",
        default=None,
        help="Exit on first failure",
    )
    parser.add_argument(
        "-C",
        "--cwd",
        default=None,
        help="The directory to resolve patterns from (default: .)",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=None,
        metavar="GLOB",
        help="File or directory globs to ignore; repeatable",
    )
    parser.add_argument(
        "-c",
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print colorized output (default: on)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Diagnostic log level, written to stderr",
    )
    return parser


def parse_overrides(argv: Sequence[str] | None = None) -> dict[str, Any]:
    """Parse ``argv`` into Settings overrides.

    Args:
        argv: Arguments without the program name; ``sys.argv[1:]`` when None.

    Returns:
        Settings field name -> value, for flags that were given.

    Raises:
        SystemExit: On invalid arguments or ``--help``.
    """
    args = build_parser().parse_args(argv)
    overrides: dict[str, Any] = {
        "bail": args.bail,
        "cwd": args.cwd,
        "ignore": args.ignore,
        "color": args.color,
        "log_level": args.log_level,
        "patterns": args.patterns or None,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    logger.debug(f"Command-line overrides: {overrides}")
    return overrides
