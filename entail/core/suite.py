"""Suite resolution for the test harness.

Turns the mapping of discovered modules into an ordered sequence of
units, deciding for each one whether it runs, is skipped, or runs
exclusively because some unit anywhere asked for ``only``.
"""

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .models import Case, Group, Member, Mode, Unit, adapt_member

logger = logging.getLogger(__name__)

SKIP_EXPORT = re.compile(r"^(?:skipTest|skip_test|skip test|skip! test)")
ONLY_EXPORT = re.compile(r"^(?:onlyTest|only_test|only test|only! test)")
TEST_EXPORT = re.compile(r"^test")

SKIP_MEMBER = re.compile(r"^skip[!_ ]")
ONLY_MEMBER = re.compile(r"^only[!_ ]")


def export_mode(name: str, module_mode: Mode | None) -> Mode | None:
    """Mode of a top-level export, or None if the name is not a test.

    Skip-flavored names always skip. Only- and test-flavored names take
    the module default when one is set.
    """
    if SKIP_EXPORT.match(name):
        return Mode.SKIP
    if ONLY_EXPORT.match(name):
        return module_mode or Mode.ONLY
    if TEST_EXPORT.match(name):
        return module_mode or Mode.TEST
    return None


def group_mode(group: Group, inherited: Mode) -> Mode | None:
    """Default mode a group hands to its unprefixed members."""
    if inherited is Mode.SKIP or group.skip:
        return Mode.SKIP
    if group.only or inherited is Mode.ONLY:
        return Mode.ONLY
    return None


def member_mode(name: str, default: Mode | None) -> Mode:
    """Mode of a group member from its name prefix and the group default."""
    if SKIP_MEMBER.match(name):
        return Mode.SKIP
    if ONLY_MEMBER.match(name):
        return Mode.SKIP if default is Mode.SKIP else Mode.ONLY
    return default or Mode.TEST


def iterate_module(exports: Mapping[str, Any], at: tuple[str, ...]) -> Iterator[Unit]:
    """Yield the units declared by one module, before global precedence."""
    module_group = adapt_member(exports.get("test"))
    module_mode: Mode | None = None
    if isinstance(module_group, Group):
        if module_group.skip:
            module_mode = Mode.SKIP
        elif module_group.only:
            module_mode = Mode.ONLY

    for name, raw in exports.items():
        mode = export_mode(name, module_mode)
        if mode is None:
            continue
        member = adapt_member(raw)
        if member is not None:
            yield from _iterate_member(name, member, mode, at)


def iterate_group(group: Group, mode: Mode, at: tuple[str, ...]) -> Iterator[Unit]:
    """Yield the units of a group, threading the effective mode down."""
    default = group_mode(group, mode)
    for name, member in group.members:
        yield from _iterate_member(name, member, member_mode(name, default), at)


def _iterate_member(name: str, member: Member, mode: Mode, at: tuple[str, ...]) -> Iterator[Unit]:
    if isinstance(member, Case):
        yield Unit(at=at, name=name, test=member.test, mode=mode)
    else:
        yield from iterate_group(member, mode, (*at, name))


@dataclass
class Exclusivity:
    """Accumulator for the global only/skip precedence fold.

    Until the first ``only`` unit is seen, units are buffered. That unit
    flips ``exclusive`` on and releases the buffer as skips; from then on
    every unit is released immediately, skipped unless it is ``only``.
    """

    exclusive: bool = False
    buffered: list[Unit] = field(default_factory=list)

    def feed(self, unit: Unit) -> list[Unit]:
        """Fold one unit in; return the units released by this step."""
        if self.exclusive:
            return [unit if unit.mode is Mode.ONLY else _skipped(unit)]

        if unit.mode is Mode.ONLY:
            self.exclusive = True
            released = [_skipped(held) for held in self.buffered]
            self.buffered.clear()
            released.append(unit)
            logger.debug(f"Exclusive mode enabled by {' > '.join(unit.path)}")
            return released

        self.buffered.append(unit)
        return []

    def finish(self) -> list[Unit]:
        """Release whatever is still buffered, with modes untouched."""
        released = list(self.buffered)
        self.buffered.clear()
        return released


def _skipped(unit: Unit) -> Unit:
    return unit if unit.mode is Mode.SKIP else replace(unit, mode=Mode.SKIP)


def iterate(modules: Mapping[str, Mapping[str, Any]]) -> Iterator[Unit]:
    """Resolve modules into the ordered, lazily produced unit sequence.

    Modules are visited in mapping order, exports and group members in
    declaration order. If any unit resolves to ``only``, exactly the
    ``only`` units keep that mode and every other unit is skipped.

    Args:
        modules: Logical module name -> exported suite mapping.

    Yields:
        Units with their final mode.
    """
    state = Exclusivity()
    for unit in _discover(modules):
        yield from state.feed(unit)
    yield from state.finish()


def _discover(modules: Mapping[str, Mapping[str, Any]]) -> Iterable[Unit]:
    for name, exports in modules.items():
        if not isinstance(exports, Mapping):
            logger.debug(f"Ignoring module {name}: exports are not a mapping")
            continue
        yield from iterate_module(exports, (name,))
