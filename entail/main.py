"""Composition root for the entail test harness.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation (discovery, loader, reporter, style)
- Run pipeline (resolve, execute, report)
- Entry point for the ``entail`` command
"""

import asyncio
import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from entail.adapters.cli.commands import parse_overrides
from entail.adapters.discovery.filesystem import find_tests
from entail.adapters.discovery.loader import ModuleLoader
from entail.adapters.reporter.text import TextReporter, write_stdout
from entail.adapters.styles.ansi import ColoramaStyle
from entail.config import Settings, load_settings
from entail.core.models import Report
from entail.core.ports import PLAIN, LoaderPort, ReporterPort, StylePort, Write
from entail.core.runner import run_suite

logger = logging.getLogger(__name__)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure harness logging.

    Records go to stderr so they never interleave with report text on
    stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.WARNING)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def stdout_is_terminal() -> bool:
    """True when stdout is an interactive terminal."""
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def make_style(color: bool) -> StylePort:
    """Select the style adapter for the ``color`` setting."""
    return ColoramaStyle() if color else PLAIN


async def test(
    modules: Mapping[str, Mapping[str, Any]],
    *,
    bail: bool = False,
    reporter: ReporterPort | None = None,
    write: Write | None = write_stdout,
    channel_size: int = 64,
    color: bool | None = None,
) -> Report:
    """Run a set of in-memory test modules and report on them.

    Args:
        modules: Logical module name -> exported suite mapping.
        bail: Stop at the first failure.
        reporter: Event consumer (default: text reporter).
        write: Sink for report text (default: stdout; None for silence).
        channel_size: Capacity of the event channel.
        color: Color the report text; defaults to whether stdout is a
            terminal.

    Returns:
        The final Report.
    """
    if color is None:
        color = stdout_is_terminal()
    reporter = reporter or TextReporter(make_style(color))
    return await run_suite(
        modules, reporter, bail=bail, write=write, channel_size=channel_size
    )


async def run_paths(
    settings: Settings,
    loader: LoaderPort | None = None,
    reporter: ReporterPort | None = None,
    write: Write | None = write_stdout,
) -> Report:
    """Discover, load and run test files as configured.

    Args:
        settings: Validated settings.
        loader: Test file loader (default: import from disk).
        reporter: Event consumer (default: text reporter).
        write: Sink for report text.

    Returns:
        The final Report.

    Raises:
        ModuleLoadError: If a discovered file fails to import.
        NotADirectoryError: If ``settings.cwd`` is not a directory.
    """
    paths = find_tests(settings.cwd, settings.patterns, settings.ignore)
    loader = loader or ModuleLoader(settings.cwd)
    modules = loader.load(paths)

    reporter = reporter or TextReporter(make_style(settings.color))
    return await run_suite(
        modules,
        reporter,
        bail=settings.bail,
        write=write,
        channel_size=settings.channel_size,
    )


async def bootstrap(argv: Sequence[str] | None = None) -> int:
    """Load configuration, wire adapters, and run the tests.

    Steps:
    1. Parse command-line flags into overrides
    2. Load configuration from environment plus overrides
    3. Configure logging
    4. Discover, load, run and report

    Returns:
        Process exit code: 1 if any test failed, else 0.
    """
    overrides = parse_overrides(argv)
    settings = load_settings(**overrides)

    configure_logging(settings.log_level, settings.log_format)
    logger.info(f"Running tests from {settings.cwd} matching {settings.patterns}")

    report = await run_paths(settings)
    return 0 if report.ok else 1


def main(argv: Sequence[str] | None = None) -> None:
    """Command-line entry point.

    Exit codes:
        0: Every test passed or was skipped
        1: A test failed, or discovery/configuration failed
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    try:
        code = asyncio.run(bootstrap(argv))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
