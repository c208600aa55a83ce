"""Integration tests for configuration and the composition root.

These tests verify that settings load from the environment and flags,
that adapters are wired correctly, and that the command exits with the
right code.
"""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from entail.adapters.styles.ansi import ColoramaStyle
from entail.config import load_settings
from entail.core.ports import PLAIN, ModuleLoadError
from entail.main import configure_logging, main, make_style, run_paths, stdout_is_terminal
from entail.tests.fakes import FakeLoader, RecordingReporter, RecordingWriter


def write_file(root: Path, relative: str, content: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestConfigurationLoading:
    """Test configuration loading and validation."""

    def test_load_settings_with_defaults(self) -> None:
        """Load settings with default values."""
        settings = load_settings()
        assert settings.bail is False
        assert settings.color is True
        assert settings.cwd == "."
        assert settings.patterns == ["test/**/*.py", "tests/**/*.py"]
        assert settings.ignore == []
        assert settings.channel_size == 64
        assert settings.log_level == "WARNING"

    def test_load_settings_from_env(self) -> None:
        """Load settings from ENTAIL_* environment variables."""
        with patch.dict(
            os.environ,
            {
                "ENTAIL_BAIL": "true",
                "ENTAIL_COLOR": "false",
                "ENTAIL_PATTERNS": '["spec/**/*.py"]',
                "ENTAIL_LOG_LEVEL": "debug",
            },
        ):
            settings = load_settings()
            assert settings.bail is True
            assert settings.color is False
            assert settings.patterns == ["spec/**/*.py"]
            assert settings.log_level == "DEBUG"

    def test_overrides_beat_environment(self) -> None:
        """Command-line overrides take precedence; None means unset."""
        with patch.dict(os.environ, {"ENTAIL_BAIL": "false", "ENTAIL_CWD": "elsewhere"}):
            settings = load_settings(bail=True, cwd=None)
            assert settings.bail is True
            assert settings.cwd == "elsewhere"

    def test_load_settings_from_env_file(self, tmp_path: Path) -> None:
        """Settings are read from an explicit .env file."""
        env_file = write_file(tmp_path, "custom.env", "ENTAIL_CHANNEL_SIZE=8\n")
        settings = load_settings(env_file=str(env_file))
        assert settings.channel_size == 8

    def test_channel_size_must_be_positive(self) -> None:
        """Channel size validation rejects zero or negative values."""
        with patch.dict(os.environ, {"ENTAIL_CHANNEL_SIZE": "0"}):
            with pytest.raises(ValidationError):
                load_settings()

    def test_patterns_must_not_be_empty(self) -> None:
        """At least one glob is required."""
        with pytest.raises(ValidationError):
            load_settings(patterns=["  "])

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValidationError):
            load_settings(log_format="xml")


class TestWiring:
    """Adapter selection and pipeline wiring."""

    def test_make_style(self) -> None:
        assert make_style(False) is PLAIN
        assert isinstance(make_style(True), ColoramaStyle)

    def test_stdout_is_terminal(self, monkeypatch) -> None:
        class Terminal:
            def isatty(self) -> bool:
                return True

        monkeypatch.setattr("sys.stdout", Terminal())
        assert stdout_is_terminal() is True

        monkeypatch.setattr("sys.stdout", object())
        assert stdout_is_terminal() is False

    def test_configure_logging_sets_level(self) -> None:
        root = logging.getLogger()
        previous = root.level
        try:
            with patch("logging.basicConfig") as basic_config:
                configure_logging("DEBUG", "json")
            kwargs = basic_config.call_args.kwargs
            assert kwargs["level"] == logging.DEBUG
            assert kwargs["format"].startswith('{"time"')
        finally:
            root.setLevel(previous)

    @pytest.mark.asyncio
    async def test_run_paths_with_fake_loader(self, tmp_path: Path) -> None:
        """Discovered paths are handed to the loader, suites to the runner."""
        path = write_file(tmp_path, "tests/test_a.py", "")
        key = str(path.resolve())
        loader = FakeLoader({key: {"test_x": lambda a: None, "skip_test_y": lambda a: None}})
        reporter = RecordingReporter()

        settings = load_settings(cwd=str(tmp_path))
        report = await run_paths(settings, loader=loader, reporter=reporter, write=None)

        assert loader.loaded == [[key]]
        assert reporter.tags == ["test", "pass", "skip"]
        assert report.ok is True

    @pytest.mark.asyncio
    async def test_load_errors_abort_the_run(self, tmp_path: Path) -> None:
        path = write_file(tmp_path, "tests/test_a.py", "")
        loader = FakeLoader()
        loader.broken.add(str(path.resolve()))
        reporter = RecordingReporter()

        with pytest.raises(ModuleLoadError):
            await run_paths(load_settings(cwd=str(tmp_path)), loader=loader, reporter=reporter)

        assert reporter.events == []

    @pytest.mark.asyncio
    async def test_run_paths_renders_text(self, tmp_path: Path) -> None:
        write_file(tmp_path, "tests/test_text.py", "def test_ok(a):\n    a.ok(True)\n")
        writer = RecordingWriter()

        settings = load_settings(cwd=str(tmp_path), color=False)
        report = await run_paths(settings, write=writer)

        assert len(report.passed) == 1
        assert "tests/test_text.py" in writer.text
        assert "\nPassed:    1" in writer.text


class TestMain:
    """Exit codes of the command."""

    def test_exit_zero_when_everything_passes(self, tmp_path: Path, capsys) -> None:
        write_file(tmp_path, "tests/test_pass.py", "def test_ok(a):\n    a.equal(1, '1')\n")

        with pytest.raises(SystemExit) as info:
            main(["-C", str(tmp_path), "--no-color"])

        assert info.value.code == 0
        assert "Passed:    1" in capsys.readouterr().out

    def test_exit_one_on_failure(self, tmp_path: Path, capsys) -> None:
        write_file(tmp_path, "tests/test_fail.py", "def test_bad(a):\n    a.equal(1, 2)\n")

        with pytest.raises(SystemExit) as info:
            main(["-C", str(tmp_path), "--no-color"])

        assert info.value.code == 1
        out = capsys.readouterr().out
        assert " FAIL " in out
        assert "test_fail.py" in out

    def test_exit_one_on_load_error(self, tmp_path: Path) -> None:
        write_file(tmp_path, "tests/test_broken.py", "def test(:\n")

        with pytest.raises(SystemExit) as info:
            main(["-C", str(tmp_path)])

        assert info.value.code == 1

    def test_exit_130_on_interrupt(self) -> None:
        with patch("entail.main.bootstrap", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as info:
                main([])

        assert info.value.code == 130

    def test_bail_flag(self, tmp_path: Path, capsys) -> None:
        write_file(
            tmp_path,
            "tests/test_many.py",
            "def test_1(a):\n    a.fail()\n\ndef test_2(a):\n    pass\n",
        )

        with pytest.raises(SystemExit):
            main(["-C", str(tmp_path), "--bail", "--no-color"])

        assert "Total:     1" in capsys.readouterr().out
