"""Text reporter adapter.

Implements ReporterPort by rendering progress as it streams in: a header
per module and group, one glyph per unit, a pass tally and failure
diagnostics whenever the path changes, and run totals at the end.
"""

import asyncio
import inspect
import logging
import sys
from collections.abc import AsyncIterable

from entail.core.assertions import AssertionFailure
from entail.core.models import Fail, Output, Pass, Report, Skip
from entail.core.ports import PLAIN, ReporterPort, StylePort, Write

logger = logging.getLogger(__name__)


class ProgressRenderer:
    """Folds events into text chunks and a Report.

    Pure and synchronous: ``feed`` and ``finish`` return the chunks to
    write; nothing is written here.
    """

    def __init__(self, style: StylePort = PLAIN):
        self.style = style
        self.report = Report()
        self.cursor: tuple[str, ...] | None = None
        self._passes = 0
        self._fails = 0
        self._skips = 0
        self._pending: list[Fail] = []

    def feed(self, event: Output) -> list[str]:
        """Fold one event, returning the text it produces."""
        chunks: list[str] = []
        if event.at != self.cursor:
            chunks.extend(self._flush_group())
            chunks.extend(self._move_cursor(event.at))

        if isinstance(event, Skip):
            self._skips += 1
            chunks.append(self.style.grey("◌ "))
        elif isinstance(event, Pass):
            self._passes += 1
            chunks.append(self.style.grey("⦿ "))
        elif isinstance(event, Fail):
            self._fails += 1
            self._pending.append(event)
            chunks.append(self.style.red("✘ "))

        self.report.record(event)
        return chunks

    def finish(self) -> list[str]:
        """Flush the last group and render the run totals."""
        had_failures = bool(self._pending)
        chunks = self._flush_group()
        if had_failures:
            chunks.append("\n")

        style, report = self.style, self.report
        passed = style.red if report.failed else style.green
        skipped = style.yellow if report.skipped else str
        chunks.append(f"\n\nTotal:     {report.total}")
        chunks.append(passed(f"\nPassed:    {len(report.passed)}"))
        if report.failed:
            chunks.append(style.red(f"\nFailed:    {len(report.failed)}"))
        chunks.append(skipped(f"\nSkipped:   {len(report.skipped)}"))
        chunks.append(f"\nDuration:  {report.duration:.2f}ms\n\n")
        return chunks

    def _flush_group(self) -> list[str]:
        chunks: list[str] = []
        total = self._passes + self._fails + self._skips
        if total:
            color = self.style.red if self._fails else self.style.green
            chunks.append(color(f"  ({self._passes} / {total})\n"))

        for failure in self._pending:
            text = AssertionFailure.format(failure.error, failure.unit, self.style)
            chunks.append(f"\n{text}\n")

        self._passes = self._fails = self._skips = 0
        self._pending.clear()
        return chunks

    def _move_cursor(self, after: tuple[str, ...]) -> list[str]:
        before = self.cursor or ()
        self.cursor = after
        chunks: list[str] = []
        if not after:
            return chunks

        diverged = not before or before[0] != after[0]
        if diverged:
            chunks.append("\n\n" + self.style.bold(self.style.underline(after[0])) + " ")

        groups_before, groups_after = before[1:], after[1:]
        for level, name in enumerate(groups_after):
            if not diverged and (level >= len(groups_before) or groups_before[level] != name):
                diverged = True
            if diverged:
                chunks.append(f"\n{'  ' * level}{name} ")

        if not chunks and groups_after:
            # back in a parent group after a nested one
            chunks.append(f"\n{'  ' * (len(groups_after) - 1)}{groups_after[-1]} ")
        elif not chunks:
            chunks.append("\n")
        return chunks


class TextReporter(ReporterPort):
    """Renders progress and failures as text while building the Report."""

    def __init__(self, style: StylePort = PLAIN):
        """Initialize text reporter.

        Args:
            style: Decorations for glyphs, tallies and diffs.
        """
        self.style = style

    async def consume(
        self, events: AsyncIterable[Output], write: Write | None = None
    ) -> Report:
        renderer = ProgressRenderer(self.style)
        async for event in events:
            await _emit(write, renderer.feed(event))
        await _emit(write, renderer.finish())
        logger.debug(f"Rendered report for {renderer.report.total} unit(s)")
        return renderer.report


async def _emit(write: Write | None, chunks: list[str]) -> None:
    if write is None:
        return
    for chunk in chunks:
        result = write(chunk)
        if inspect.isawaitable(result):
            await result


def _write_and_flush(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


async def write_stdout(text: str) -> None:
    """Write a chunk to stdout without blocking the event loop."""
    await asyncio.to_thread(_write_and_flush, text)
