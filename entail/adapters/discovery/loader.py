"""Module loader adapter.

Implements LoaderPort by importing each test file under a unique module
name and exposing its public attributes as a suite.
"""

import hashlib
import importlib.util
import inspect
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from types import ModuleType
from typing import Any

from entail.core.models import Suite
from entail.core.ports import LoaderPort, ModuleLoadError

logger = logging.getLogger(__name__)


def module_name(path: Path) -> str:
    """Unique, importable module name for a test file."""
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    stem = "".join(c if c.isalnum() else "_" for c in path.stem)
    return f"entail_suite_{stem}_{digest}"


def exports_of(module: ModuleType) -> dict[str, Any]:
    """Public attributes of ``module`` in declaration order.

    Modules are left out, and so are functions and classes imported from
    elsewhere, so that ``from helpers import test_data`` does not turn a
    helper into a test.
    """
    exports: dict[str, Any] = {}
    for name, value in vars(module).items():
        if name.startswith("_") or inspect.ismodule(value):
            continue
        if (inspect.isfunction(value) or inspect.isclass(value)) and (
            value.__module__ != module.__name__
        ):
            continue
        exports[name] = value
    return exports


class ModuleLoader(LoaderPort):
    """Imports test files from disk."""

    def __init__(self, cwd: str | os.PathLike[str] = ".", add_to_path: bool = True):
        """Initialize module loader.

        Args:
            cwd: Directory module names are made relative to.
            add_to_path: Put ``cwd`` on ``sys.path`` so test files can
                import project code.
        """
        self.cwd = Path(cwd).resolve()
        self.add_to_path = add_to_path

    def load(self, paths: Sequence[str]) -> dict[str, Suite]:
        if self.add_to_path and str(self.cwd) not in sys.path:
            sys.path.insert(0, str(self.cwd))

        suites: dict[str, Suite] = {}
        for raw in paths:
            path = Path(raw).resolve()
            suites[self._display_name(path)] = exports_of(self._import(path))
        logger.info(f"Loaded {len(suites)} test module(s)")
        return suites

    def _display_name(self, path: Path) -> str:
        try:
            return path.relative_to(self.cwd).as_posix()
        except ValueError:
            return path.as_posix()

    def _import(self, path: Path) -> ModuleType:
        name = module_name(path)
        if name in sys.modules:
            return sys.modules[name]

        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise ModuleLoadError(str(path), ImportError(f"Cannot import {path}"))

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        logger.debug(f"Importing {path} as {name}")
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            del sys.modules[name]
            raise ModuleLoadError(str(path), e) from e
        return module
