"""Execution engine for resolved units.

Units run strictly one after another. Each body receives the assertion
library as its only argument and may be sync or async. Every outcome
becomes an event; events flow to the reporter through a bounded channel.
"""

import asyncio
import inspect
import logging
import time
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Mapping
from typing import Any

from . import assertions
from .assertions import AssertionFailure
from .channel import EventChannel
from .models import Fail, Failed, Mode, Outcome, Output, Pass, Passed, Report, Skip, Start, Unit
from .ports import ReporterPort, Write
from .suite import iterate

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


async def execute(unit: Unit) -> Outcome:
    """Invoke one unit's body and settle it into an outcome.

    Any ``Exception`` raised by the body, assertion failure or not, is
    captured, and so is ``SystemExit``; an ``AssertionFailure`` also gets
    the unit attached as its origin. ``KeyboardInterrupt`` and
    cancellation propagate.
    """
    logger.debug(f"Running {' > '.join(unit.path)}")
    start = time.perf_counter()
    try:
        result = unit.test(assertions)
        if inspect.isawaitable(result):
            await result
    except (Exception, SystemExit) as error:
        duration = _elapsed_ms(start)
        if isinstance(error, AssertionFailure):
            error.origin = unit
        logger.debug(f"Failed {' > '.join(unit.path)}: {type(error).__name__}")
        return Failed(duration=duration, error=error)
    return Passed(duration=_elapsed_ms(start))


async def run(units: Iterable[Unit], bail: bool = False) -> AsyncIterator[Output]:
    """Execute units in order, yielding their events.

    Args:
        units: Resolved units, typically from ``iterate``.
        bail: Stop after the first failure; nothing after it is
            evaluated, skips included.

    Yields:
        ``Skip`` for skipped units; ``Start`` followed by ``Pass`` or
        ``Fail`` for the others.
    """
    for unit in units:
        if unit.mode is Mode.SKIP:
            yield Skip(unit=unit)
            continue

        yield Start(unit=unit)
        outcome = await execute(unit)
        if isinstance(outcome, Passed):
            yield Pass(unit=unit, duration=outcome.duration)
            continue

        yield Fail(unit=unit, duration=outcome.duration, error=outcome.error)
        if bail:
            logger.info(f"Bailing out after failure in {' > '.join(unit.path)}")
            return


async def produce(
    units: Iterable[Unit], channel: EventChannel[Output], bail: bool = False
) -> None:
    """Run units and send every event into ``channel``, then close it."""
    async for event in run(units, bail=bail):
        await channel.send(event)
    await channel.close()


class CollectingReporter(ReporterPort):
    """Reporter that only folds events into a Report, rendering nothing."""

    async def consume(
        self, events: AsyncIterable[Output], write: Write | None = None
    ) -> Report:
        report = Report()
        async for event in events:
            report.record(event)
        return report


async def run_suite(
    modules: Mapping[str, Mapping[str, Any]],
    reporter: ReporterPort | None = None,
    *,
    bail: bool = False,
    write: Write | None = None,
    channel_size: int = 64,
) -> Report:
    """Resolve, execute and report a set of modules.

    The runner and the reporter run as two tasks joined by a bounded
    channel; the runner waits whenever the reporter falls behind.

    Args:
        modules: Logical module name -> exported suite mapping.
        reporter: Consumer of the event stream (default: collect only).
        bail: Stop at the first failure.
        write: Sink for rendered text, passed to the reporter.
        channel_size: Capacity of the event channel.

    Returns:
        The reporter's final Report.
    """
    reporter = reporter or CollectingReporter()
    channel: EventChannel[Output] = EventChannel(maxsize=channel_size)

    async with asyncio.TaskGroup() as group:
        group.create_task(produce(iterate(modules), channel, bail=bail))
        consumer = group.create_task(reporter.consume(channel, write))

    report = consumer.result()
    logger.info(
        f"Run finished: {len(report.passed)} passed, {len(report.failed)} failed, "
        f"{len(report.skipped)} skipped in {report.duration:.2f}ms"
    )
    return report
