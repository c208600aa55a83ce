"""Assertion library passed to every test body.

Each check returns None when it holds and raises ``AssertionFailure``
otherwise. Every check accepts an optional ``message``: a string replaces
the default reason, an exception instance is raised as-is instead of an
``AssertionFailure``.

Example:
    test_math = {
        "adds": lambda a: a.equal(1 + 1, 2),
        "reorders": lambda a: a.deep_equal({"x": 1, "y": 2}, {"y": 2, "x": 1}),
    }
"""

import inspect
import sysconfig
import traceback
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, NoReturn

from . import diff
from .equality import deep_equal as is_deep_equal
from .equality import identical, is_pattern, loosely_equal
from .ports import PLAIN, StylePort

Compare = Callable[[Any, Any, StylePort], str]
Message = str | BaseException | None


class AssertionFailure(AssertionError):
    """Structured description of a failed check.

    Attributes:
        reason: Default human readable explanation.
        operator: Name of the check that failed.
        actual: Value under test.
        expected: Value or pattern it was checked against.
        message: Caller supplied message, or ``reason``.
        origin: Unit the failure happened in; attached by the runner.
    """

    def __init__(
        self,
        *,
        reason: str,
        operator: str,
        actual: Any = None,
        expected: Any = None,
        message: str | None = None,
        compare: Compare | None = None,
        origin: Any = None,
    ):
        super().__init__(message or reason)
        self.reason = reason
        self.operator = operator
        self.actual = actual
        self.expected = expected
        self.message = message or reason
        self.origin = origin
        self._compare = compare
        self._details: str | None = None

    @classmethod
    def throw(cls, *, message: Message = None, **fields: Any) -> NoReturn:
        """Raise a failure, or ``message`` itself if it is an exception."""
        if isinstance(message, BaseException):
            raise message
        raise cls(message=message, **fields)

    @property
    def generated(self) -> bool:
        """True when no custom message was supplied."""
        return self.message == self.reason

    @property
    def details(self) -> str:
        """Plain text diff of actual against expected, computed on first use."""
        if self._details is None:
            self._details = self.render_details(PLAIN)
        return self._details

    def render_details(self, style: StylePort) -> str:
        if self._compare is None:
            return ""
        return self._compare(self.actual, self.expected, style)

    @classmethod
    def format(cls, error: BaseException, origin: Any = None, style: StylePort = PLAIN) -> str:
        """Full diagnostic text for a failed unit.

        Works for any exception; only ``AssertionFailure`` carries an
        operator and a diff.
        """
        if isinstance(error, cls):
            origin = origin or error.origin
            message, operator = error.message, error.operator
            details = error.render_details(style)
        else:
            message, operator, details = f"{type(error).__name__}: {error}", "", ""

        at = tuple(getattr(origin, "at", ()))
        name = getattr(origin, "name", "")
        title = f'"{style.red(style.bold(name))}"' if name else ""
        place = [*at, title] if title else list(at)
        site = f" {style.red(style.bold(' ⏵ '.join(place)))} " if place else ""
        method = style.italic(style.dim(f"  ({operator}) ")) if operator else ""

        body = [_indent(f"{_indent(message)}{method}")]
        if details:
            body.extend(["", details])
        body.extend(["", _indent(_indent(style.grey(cls.format_stack(error))))])
        return f"  {style.fail_badge(' FAIL ')}{site}\n" + "\n".join(body)

    @staticmethod
    def format_stack(error: BaseException) -> str:
        """Traceback of ``error`` without harness and runtime frames."""
        frames = [
            frame
            for frame in traceback.extract_tb(error.__traceback__)
            if not _is_internal(frame.filename)
        ]
        return "".join(traceback.format_list(frames)).rstrip("\n")


_HARNESS = Path(__file__).resolve().parent.parent
_HARNESS_DIRS = (_HARNESS / "core", _HARNESS / "adapters")
_RUNTIME_DIRS = tuple(
    Path(sysconfig.get_paths()[key]).resolve() for key in ("stdlib", "platstdlib")
)


def _is_internal(filename: str) -> bool:
    if filename.startswith("<frozen "):
        return True
    path = Path(filename).resolve()
    if any(path.is_relative_to(root) for root in _HARNESS_DIRS):
        return True
    if "site-packages" in path.parts or "dist-packages" in path.parts:
        return False
    return any(path.is_relative_to(root) for root in _RUNTIME_DIRS)


def _indent(text: str, prefix: str = "  ") -> str:
    return prefix + text.replace("\n", "\n" + prefix)


def _compare(actual: Any, expected: Any, style: StylePort) -> str:
    return diff.compare(actual, expected, style)


def ok(value: Any, message: Message = None) -> None:
    """Fails unless ``value`` is truthy.

    ``ok([], "list is empty")`` fails with the message "list is empty".
    """
    if value:
        return
    AssertionFailure.throw(
        actual=value,
        expected=True,
        operator="ok",
        reason="Expected value to be truthy",
        compare=lambda actual, _, style: f"{diff.format_value(actual)} == True",
        message=message,
    )


def fail(message: Message = None) -> NoReturn:
    """Always fails. Marks code that must not be reached."""
    AssertionFailure.throw(
        actual=fail,
        expected=None,
        operator="fail",
        reason="Failed",
        message=message,
    )


def strict_equal(actual: Any, expected: Any, message: Message = None) -> None:
    """Fails unless the values are identical; NaN is identical to NaN."""
    if identical(actual, expected):
        return
    AssertionFailure.throw(
        actual=actual,
        expected=expected,
        operator="strict_equal",
        compare=_compare,
        reason="Expected values to be strictly equal",
        message=message,
    )


def not_strict_equal(actual: Any, expected: Any, message: Message = None) -> None:
    """Fails if the values are identical."""
    if not identical(actual, expected):
        return
    AssertionFailure.throw(
        actual=actual,
        expected=expected,
        operator="not_strict_equal",
        reason="Expected values to be strictly unequal",
        message=message,
    )


def equal(actual: Any, expected: Any, message: Message = None) -> None:
    """Fails unless the values are loosely equal.

    Coercive: ``equal(1, "1")`` and ``equal(True, 1)`` hold. NaN equals NaN.
    Containers are only equal to themselves; use ``deep_equal`` for those.
    """
    if loosely_equal(actual, expected):
        return
    AssertionFailure.throw(
        actual=actual,
        expected=expected,
        operator="equal",
        compare=_compare,
        reason="Expected values to be loosely equal",
        message=message,
    )


def not_equal(actual: Any, expected: Any, message: Message = None) -> None:
    """Fails if the values are loosely equal."""
    if not loosely_equal(actual, expected):
        return
    AssertionFailure.throw(
        actual=actual,
        expected=expected,
        operator="not_equal",
        reason="Expected values to be loosely not equal",
        compare=lambda actual, expected, style: (
            f"{diff.format_value(actual)} != {diff.format_value(expected)}"
        ),
        message=message,
    )


def deep_equal(actual: Any, expected: Any, message: Message = None) -> None:
    """Fails unless the values are structurally equal."""
    if is_deep_equal(actual, expected):
        return
    AssertionFailure.throw(
        actual=actual,
        expected=expected,
        operator="deep_equal",
        compare=_compare,
        reason="Expected values to be deeply equal",
        message=message,
    )


def not_deep_equal(actual: Any, expected: Any, message: Message = None) -> None:
    """Fails if the values are structurally equal."""
    if not is_deep_equal(actual, expected):
        return
    AssertionFailure.throw(
        actual=actual,
        expected=expected,
        operator="not_deep_equal",
        reason="Expected values not to be deeply equal",
        message=message,
    )


def _is_match(value: Any, pattern: Any) -> bool:
    if isinstance(pattern, str):
        return pattern in str(value)
    return pattern.search(str(value)) is not None


def _source(pattern: Any) -> str:
    return str(pattern.pattern) if is_pattern(pattern) else str(pattern)


def match(value: Any, pattern: Any, message: Message = None) -> None:
    """Fails unless ``value`` is truthy and matches ``pattern``.

    A string pattern must be a substring of ``str(value)``; any other
    pattern (compiled regex, glob) must find a match via ``search``.
    """
    if value and _is_match(value, pattern):
        return
    AssertionFailure.throw(
        actual=value,
        expected=pattern,
        operator="match",
        compare=_compare,
        reason=(
            f'Expected value to include "{pattern}" substring'
            if isinstance(pattern, str)
            else f"Expected value to match `{_source(pattern)}` pattern"
        ),
        message=message,
    )


def _describe(error: BaseException) -> str:
    return f"{type(error).__name__}: {error}"


def _thrown_matches(error: BaseException, pattern: Any) -> bool:
    if isinstance(pattern, type):
        return isinstance(error, pattern)
    return _is_match(_describe(error), pattern)


def _mismatch_reason(pattern: Any, plain: str, patterned: str) -> str:
    if is_pattern(pattern):
        return patterned.format(source=_source(pattern))
    return plain


def throws(block: Callable[[], Any], pattern: Any = None, message: Message = None) -> Exception:
    """Calls ``block`` and fails unless it raises.

    ``pattern`` may be an exception class, a substring or a compiled
    pattern; the latter two are checked against ``"TypeName: message"``.
    A failure raised by a nested check is re-raised untouched.

    Returns:
        The exception ``block`` raised.
    """
    try:
        block()
    except AssertionFailure:
        raise
    except Exception as error:
        if pattern is not None and not _thrown_matches(error, pattern):
            AssertionFailure.throw(
                actual=error,
                expected=pattern,
                operator="throws",
                reason=_mismatch_reason(
                    pattern,
                    "Expected function to throw matching exception",
                    "Expected function to throw exception matching `{source}` pattern",
                ),
                message=message,
            )
        return error

    AssertionFailure.throw(
        actual=False,
        expected=True,
        operator="throws",
        reason="Expected function to throw",
        message=message,
    )


async def rejects(
    block: Callable[[], Awaitable[Any] | Any], pattern: Any = None, message: Message = None
) -> Exception:
    """Awaits ``block()`` and fails unless it raises.

    Same pattern rules as ``throws``.

    Returns:
        The exception the awaitable raised.
    """
    try:
        result = block()
        if inspect.isawaitable(result):
            await result
    except AssertionFailure:
        raise
    except Exception as error:
        if pattern is not None and not _thrown_matches(error, pattern):
            AssertionFailure.throw(
                actual=error,
                expected=pattern,
                operator="rejects",
                reason=_mismatch_reason(
                    pattern,
                    "Expected function to return matching failing awaitable",
                    "Expected function to return failing awaitable matching `{source}` pattern",
                ),
                message=message,
            )
        return error

    AssertionFailure.throw(
        actual=False,
        expected=True,
        operator="rejects",
        reason="Expected function to return awaitable that fails",
        message=message,
    )
