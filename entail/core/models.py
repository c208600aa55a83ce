"""Domain models for the entail test harness.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypeAlias


class Mode(Enum):
    """Resolved run disposition of a unit."""

    SKIP = "skip"
    ONLY = "only"
    TEST = "test"


# A test body receives the assertion library and may return an awaitable.
TestFn: TypeAlias = Callable[[Any], Any]


@dataclass(frozen=True)
class Case:
    """A suite member that is an executable test body."""

    test: TestFn


@dataclass(frozen=True)
class Group:
    """A suite member that nests further members.

    ``members`` keeps declaration order. ``skip`` and ``only`` are the
    group-level flags read from the raw mapping.
    """

    members: tuple[tuple[str, "Member"], ...]
    skip: bool = False
    only: bool = False


Member: TypeAlias = Case | Group


def adapt_member(value: Any) -> Member | None:
    """Adapt a raw suite value into a tagged member.

    A callable that is not a class becomes a ``Case``; a ``Mapping``
    becomes a ``Group``. Every other value is ignored and yields None.
    """
    if callable(value) and not isinstance(value, type):
        return Case(test=value)
    if isinstance(value, Mapping):
        members = []
        for name, raw in value.items():
            member = adapt_member(raw)
            if member is not None:
                members.append((str(name), member))
        return Group(
            members=tuple(members),
            skip=value.get("skip") is True,
            only=value.get("only") is True,
        )
    return None


@dataclass(frozen=True)
class Unit:
    """One resolved, executable test with its full path and mode."""

    at: tuple[str, ...]  # module name, then nested group names
    name: str
    test: TestFn = field(compare=False)
    mode: Mode

    @property
    def path(self) -> tuple[str, ...]:
        """Full path including the unit's own name."""
        return (*self.at, self.name)


@dataclass(frozen=True)
class Skip:
    """A unit was skipped without running its body."""

    tag: ClassVar[str] = "skip"
    unit: Unit

    @property
    def at(self) -> tuple[str, ...]:
        return self.unit.at


@dataclass(frozen=True)
class Start:
    """A unit's body is about to be invoked."""

    tag: ClassVar[str] = "test"
    unit: Unit

    @property
    def at(self) -> tuple[str, ...]:
        return self.unit.at


@dataclass(frozen=True)
class Pass:
    """A unit's body completed normally."""

    tag: ClassVar[str] = "pass"
    unit: Unit
    duration: float  # milliseconds

    @property
    def at(self) -> tuple[str, ...]:
        return self.unit.at


@dataclass(frozen=True)
class Fail:
    """A unit's body raised."""

    tag: ClassVar[str] = "fail"
    unit: Unit
    duration: float  # milliseconds
    error: BaseException

    @property
    def at(self) -> tuple[str, ...]:
        return self.unit.at


Output: TypeAlias = Skip | Start | Pass | Fail


@dataclass(frozen=True)
class Passed:
    """Outcome of a unit whose body completed."""

    duration: float


@dataclass(frozen=True)
class Failed:
    """Outcome of a unit whose body raised."""

    duration: float
    error: BaseException


Outcome: TypeAlias = Passed | Failed


@dataclass
class Report:
    """Aggregate result of a run.

    Built incrementally by a reporter while it folds the event stream.
    Durations are in milliseconds; skips contribute nothing.
    """

    passed: list[Pass] = field(default_factory=list)
    failed: list[Fail] = field(default_factory=list)
    skipped: list[Skip] = field(default_factory=list)
    duration: float = 0.0

    @property
    def total(self) -> int:
        """Number of units accounted for."""
        return len(self.passed) + len(self.failed) + len(self.skipped)

    @property
    def ok(self) -> bool:
        """True when no unit failed."""
        return not self.failed

    def record(self, event: Output) -> None:
        """Fold a single event into the report."""
        if isinstance(event, Skip):
            self.skipped.append(event)
        elif isinstance(event, Pass):
            self.passed.append(event)
            self.duration += event.duration
        elif isinstance(event, Fail):
            self.failed.append(event)
            self.duration += event.duration


Suite: TypeAlias = Mapping[str, Any]
