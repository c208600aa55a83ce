"""Unit tests for TextReporter and its progress renderer."""

import sys
from io import StringIO

import pytest

from entail.adapters.reporter.text import ProgressRenderer, TextReporter, write_stdout
from entail.adapters.styles.ansi import ColoramaStyle
from entail.core import assertions
from entail.core.assertions import AssertionFailure
from entail.core.models import Fail, Mode, Pass, Skip, Start, Unit
from entail.core.runner import run_suite
from entail.tests.fakes import RecordingWriter


def body(a):
    pass


def make_unit(name: str, *at: str) -> Unit:
    return Unit(at=at, name=name, test=body, mode=Mode.TEST)


def failure() -> AssertionFailure:
    try:
        assertions.equal(1, 2)
    except AssertionFailure as error:
        return error
    raise RuntimeError("equal(1, 2) did not fail")


def render(events) -> str:
    renderer = ProgressRenderer()
    chunks = []
    for event in events:
        chunks.extend(renderer.feed(event))
    chunks.extend(renderer.finish())
    return "".join(chunks)


class TestProgressRenderer:
    """Text produced for event sequences, plain style."""

    def test_headers_glyphs_tallies_and_totals(self) -> None:
        a = make_unit("test_a", "mod")
        b = make_unit("b", "mod", "g")

        text = render([Start(a), Pass(a, 1.0), Skip(b)])

        assert text == (
            "\n\nmod ⦿   (1 / 1)\n"
            "\ng ◌   (0 / 1)\n"
            "\n\nTotal:     2"
            "\nPassed:    1"
            "\nSkipped:   1"
            "\nDuration:  1.00ms\n\n"
        )

    def test_start_only_moves_cursor(self) -> None:
        renderer = ProgressRenderer()

        assert renderer.feed(Start(make_unit("x", "mod"))) == ["\n\nmod "]
        assert renderer.cursor == ("mod",)

    def test_new_module_gets_new_header(self) -> None:
        text = render([Skip(make_unit("x", "one.py")), Skip(make_unit("y", "two.py"))])

        assert "\n\none.py ◌   (0 / 1)\n\n\ntwo.py ◌ " in text

    def test_nested_groups_are_indented(self) -> None:
        text = render([Skip(make_unit("x", "mod", "outer", "inner"))])

        assert "\n\nmod \nouter \n  inner ◌ " in text

    def test_only_changed_levels_are_printed(self) -> None:
        text = render(
            [
                Skip(make_unit("x", "mod", "outer", "first")),
                Skip(make_unit("y", "mod", "outer", "second")),
            ]
        )

        assert text.count("outer") == 1
        assert "\n  second ◌ " in text

    def test_diverged_parent_reprints_children(self) -> None:
        text = render(
            [
                Skip(make_unit("x", "mod", "a", "same")),
                Skip(make_unit("y", "mod", "b", "same")),
            ]
        )

        assert "\nb \n  same ◌ " in text

    def test_failures_follow_their_tally(self) -> None:
        unit = make_unit("test_b", "mod")
        error = failure()

        text = render([Start(unit), Fail(unit, 2.5, error)])

        tally = text.index("(0 / 1)")
        badge = text.index(" FAIL ")
        assert "✘ " in text
        assert tally < badge
        assert '"test_b"' in text
        assert "\nFailed:    1" in text
        assert "\nDuration:  2.50ms" in text

    def test_report_is_folded(self) -> None:
        renderer = ProgressRenderer()
        unit = make_unit("t", "mod")
        for event in [Start(unit), Pass(unit, 1.5), Start(unit), Pass(unit, 2.0)]:
            renderer.feed(event)

        assert len(renderer.report.passed) == 2
        assert renderer.report.duration == pytest.approx(3.5)


class TestTextReporter:
    """Streaming through the reporter port."""

    @pytest.mark.asyncio
    async def test_writes_through_async_sink(self) -> None:
        writer = RecordingWriter()
        modules = {"mod": {"test a": lambda a: None, "test b": lambda a: a.equal(1, 2)}}

        report = await run_suite(modules, TextReporter(), write=writer)

        assert len(report.passed) == 1
        assert len(report.failed) == 1
        assert "⦿ ✘   (1 / 2)" in writer.text
        assert "Expected values to be loosely equal" in writer.text
        assert "\nTotal:     2" in writer.text

    @pytest.mark.asyncio
    async def test_accepts_sync_sink(self) -> None:
        chunks: list[str] = []

        await run_suite({"mod": {"test": lambda a: None}}, TextReporter(), write=chunks.append)

        assert "\nPassed:    1" in "".join(chunks)

    @pytest.mark.asyncio
    async def test_without_sink_only_reports(self) -> None:
        report = await run_suite({"mod": {"test": lambda a: None}}, TextReporter())

        assert report.total == 1

    @pytest.mark.asyncio
    async def test_color_style_adds_ansi_codes(self) -> None:
        writer = RecordingWriter()

        await run_suite({"mod": {"test": lambda a: None}}, TextReporter(ColoramaStyle()), write=writer)

        assert "\x1b[" in writer.text
        assert "Passed:" in writer.text


@pytest.mark.asyncio
async def test_write_stdout(monkeypatch) -> None:
    """write_stdout writes each chunk to the current stdout."""
    captured = StringIO()
    monkeypatch.setattr(sys, "stdout", captured)

    await write_stdout("⦿ ")

    assert captured.getvalue() == "⦿ "
