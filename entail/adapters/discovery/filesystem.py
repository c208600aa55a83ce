"""Filesystem discovery of test files.

Walks a directory tree and selects test files whose path, relative to
the root, matches one of the configured glob patterns.
"""

import logging
import os
import re
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePosixPath

from entail.core.glob import Glob

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = ("test/**/*.py", "tests/**/*.py")

# Directory names never descended into.
DEFAULT_IGNORED_DIRS = frozenset(
    {
        ".git",
        ".tox",
        ".venv",
        "__pycache__",
        "build",
        "coverage",
        "dist",
        "node_modules",
        "venv",
    }
)

# Support code living next to tests is not itself a test.
HELPER_DIR = re.compile(r"(?:^|/)tests?/(?:.*/)?(?:helper|fixture)s?(?:/|$)", re.IGNORECASE)

EXTENSIONS = (".py",)


def compile_patterns(patterns: Iterable[str]) -> list[Glob]:
    """Compile path globs the way discovery matches them.

    Patterns are extended, globstar, anchored and case-insensitive.
    """
    return [
        Glob(pattern, extended=True, globstar=True, anchored=True, flags=re.IGNORECASE)
        for pattern in patterns
    ]


def _ignored_dir(name: str, relative: str, ignore: Sequence[Glob]) -> bool:
    if name.startswith(".") or name in DEFAULT_IGNORED_DIRS:
        return True
    if HELPER_DIR.search(relative):
        return True
    return any(pattern.test(relative) for pattern in ignore)


def find_tests(
    cwd: str | os.PathLike[str],
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    ignore: Sequence[str] = (),
) -> list[str]:
    """Find test files under ``cwd``.

    A file is a test file when its POSIX path relative to ``cwd`` matches
    one of ``patterns``, it has a ``.py`` extension, its basename does not
    start with ``_`` and it is not inside an ignored directory.

    Args:
        cwd: Root directory to search.
        patterns: Globs matched against relative paths.
        ignore: Extra globs; matching files and directories are dropped.

    Returns:
        Sorted absolute paths.

    Raises:
        NotADirectoryError: If ``cwd`` is not a directory.
    """
    root = Path(cwd).resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    include = compile_patterns(patterns)
    exclude = compile_patterns(ignore)
    found: list[str] = []

    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        base = PurePosixPath(Path(dirpath).relative_to(root).as_posix())
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not _ignored_dir(name, str(base / name), exclude)
        )

        for name in filenames:
            if name.startswith(("_", ".")) or not name.endswith(EXTENSIONS):
                continue
            relative = str(base / name)
            if not any(pattern.test(relative) for pattern in include):
                continue
            if any(pattern.test(relative) for pattern in exclude):
                logger.debug(f"Ignoring {relative}")
                continue
            found.append(str(Path(dirpath, name).resolve()))

    found.sort()
    logger.info(f"Discovered {len(found)} test file(s) under {root}")
    return found
