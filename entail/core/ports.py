"""Port interfaces for the entail test harness.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - StylePort: Decorate report and diff text (colors, emphasis)

2. **Driving Ports** (adapters feed the core or consume its output)
   - LoaderPort: Turn discovered files into the module -> suite mapping
   - ReporterPort: Consume the ordered event stream into a Report
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, Awaitable, Callable, Sequence

from .models import Output, Report, Suite


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class StylePort(ABC):
    """Port for decorating text with terminal styles.

    The core treats styling as pure string decoration: every method takes
    text and returns text. Implementations must not change the visible
    characters, only wrap them.
    """

    @abstractmethod
    def red(self, text: str) -> str:
        """Removed lines, failures, actual values."""

    @abstractmethod
    def green(self, text: str) -> str:
        """Added lines, passing tallies, expected values."""

    @abstractmethod
    def grey(self, text: str) -> str:
        """Unchanged lines, stack traces, pass/skip glyphs."""

    @abstractmethod
    def yellow(self, text: str) -> str:
        """Skipped totals."""

    @abstractmethod
    def dim(self, text: str) -> str:
        """De-emphasised text such as line numbers and type tags."""

    @abstractmethod
    def bold(self, text: str) -> str:
        """Emphasised text such as suite paths."""

    @abstractmethod
    def italic(self, text: str) -> str:
        """Titles such as operator names and diff labels."""

    @abstractmethod
    def underline(self, text: str) -> str:
        """Module headers and diff block titles."""

    @abstractmethod
    def fail_badge(self, text: str) -> str:
        """The badge that opens a failure diagnostic."""


class PlainStyle(StylePort):
    """Style that leaves text untouched.

    Used for ``AssertionFailure.details`` and whenever color is disabled.
    """

    def red(self, text: str) -> str:
        return text

    def green(self, text: str) -> str:
        return text

    def grey(self, text: str) -> str:
        return text

    def yellow(self, text: str) -> str:
        return text

    def dim(self, text: str) -> str:
        return text

    def bold(self, text: str) -> str:
        return text

    def italic(self, text: str) -> str:
        return text

    def underline(self, text: str) -> str:
        return text

    def fail_badge(self, text: str) -> str:
        return text


PLAIN = PlainStyle()


# ============================================================================
# DRIVING PORTS (Adapters feed the core or consume its output)
# ============================================================================


class LoaderPort(ABC):
    """Port for loading discovered test files into suites.

    Adapters implementing this port import each file and adapt its
    exports into the mapping the suite resolver consumes.
    """

    @abstractmethod
    def load(self, paths: Sequence[str]) -> dict[str, Suite]:
        """Load test files into a module name -> suite mapping.

        Args:
            paths: Absolute paths of test files, in discovery order.

        Returns:
            Mapping keyed by logical module name, preserving the order
            of ``paths``.

        Raises:
            ModuleLoadError: If a file cannot be imported.
        """


Write = Callable[[str], Awaitable[None] | None]


class ReporterPort(ABC):
    """Port for consuming the execution event stream.

    Implementations fold events, in order, into a Report. They may
    render output along the way through the supplied ``write`` callable.
    """

    @abstractmethod
    async def consume(
        self, events: AsyncIterable[Output], write: Write | None = None
    ) -> Report:
        """Fold the whole event stream into a Report.

        Args:
            events: Ordered stream of output events; exhausted on return.
            write: Optional sink for rendered text chunks. May be sync
                or async.

        Returns:
            The finalized Report.
        """


class ModuleLoadError(Exception):
    """A discovered test file could not be imported."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Failed to load test module {path}: {cause}")
        self.path = path
        self.cause = cause


__all__ = [
    "LoaderPort",
    "ModuleLoadError",
    "PLAIN",
    "PlainStyle",
    "ReporterPort",
    "StylePort",
    "Write",
]
