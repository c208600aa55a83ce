"""Equality primitives shared by the assertion library and the diff engine.

Three strengths of equality are provided:

- ``identical``: same object, or same immutable scalar of the same type.
- ``loosely_equal``: coercive equality between scalars.
- ``deep_equal``: structural equality over containers and plain objects.

All three treat NaN as equal to itself.
"""

import math
import re
from collections.abc import Mapping, Set
from dataclasses import fields, is_dataclass
from decimal import Decimal, InvalidOperation
from fractions import Fraction
from types import ModuleType
from typing import Any

_SCALARS = (type(None), bool, int, float, complex, str, bytes, Decimal, Fraction)
_NUMBERS = (int, float, Decimal, Fraction, complex)


def is_nan(value: Any) -> bool:
    """True for float and Decimal NaN values."""
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def is_scalar(value: Any) -> bool:
    """True for immutable values compared by value rather than identity."""
    return isinstance(value, _SCALARS)


def is_pattern(value: Any) -> bool:
    """True for compiled regular expressions and glob matchers."""
    if isinstance(value, re.Pattern):
        return True
    return hasattr(value, "search") and isinstance(getattr(value, "pattern", None), str)


def identical(actual: Any, expected: Any) -> bool:
    """Identity, with value identity for scalars of the exact same type.

    ``0.0`` and ``-0.0`` are distinguished; NaN is identical to NaN.
    """
    if actual is expected:
        return True
    if is_nan(actual) and is_nan(expected):
        return True
    if type(actual) is not type(expected) or not is_scalar(actual):
        return False
    if isinstance(actual, float) and actual == 0.0 and expected == 0.0:
        return math.copysign(1.0, actual) == math.copysign(1.0, expected)
    return bool(actual == expected)


def loosely_equal(actual: Any, expected: Any) -> bool:
    """Coercive equality between scalars.

    Containers and other objects are only loosely equal to themselves.
    ``None`` is only equal to ``None``. Booleans coerce to integers and a
    numeric string compares equal to the number it spells.
    """
    if identical(actual, expected):
        return True
    if is_nan(actual) or is_nan(expected):
        return False
    if not is_scalar(actual) or not is_scalar(expected):
        return False
    if actual is None or expected is None:
        return False

    actual, expected = _coerce(actual), _coerce(expected)
    if isinstance(actual, _NUMBERS) and isinstance(expected, str):
        expected = _to_number(expected)
    elif isinstance(actual, str) and isinstance(expected, _NUMBERS):
        actual = _to_number(actual)

    if is_nan(actual) or is_nan(expected):
        return False
    return bool(actual == expected)


def _coerce(value: Any) -> Any:
    return int(value) if isinstance(value, bool) else value


def _to_number(text: str) -> int | float:
    text = text.strip()
    if not text:
        return 0
    # digit separators are Python literal syntax, not numeric text
    if "_" in text:
        return math.nan
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return math.nan
    return number if math.isfinite(number) else math.nan


def deep_equal(actual: Any, expected: Any) -> bool:
    """Structural equality.

    Both sides must have the same type. Mappings are compared by key set
    and values regardless of insertion order; sequences element-wise;
    sets by membership; dataclasses and plain objects by their instance
    attributes. A pair of values already being compared further up the
    current path is not descended again, so self-referential structures
    terminate.
    """
    return _deep_equal(actual, expected, set())


def _deep_equal(actual: Any, expected: Any, path: set[tuple[int, int]]) -> bool:
    if identical(actual, expected):
        return True
    if type(actual) is not type(expected) or is_scalar(actual):
        return False

    key = (id(actual), id(expected))
    if key in path:
        return True
    path.add(key)
    try:
        return _deep_equal_structure(actual, expected, path)
    finally:
        path.discard(key)


def _deep_equal_structure(actual: Any, expected: Any, path: set[tuple[int, int]]) -> bool:
    if isinstance(actual, Mapping):
        if len(actual) != len(expected) or set(actual) != set(expected):
            return False
        return all(_deep_equal(actual[k], expected[k], path) for k in actual)

    if isinstance(actual, (list, tuple, bytearray)):
        if len(actual) != len(expected):
            return False
        return all(_deep_equal(a, e, path) for a, e in zip(actual, expected))

    if isinstance(actual, Set):
        return actual == expected

    if isinstance(actual, re.Pattern):
        return actual.pattern == expected.pattern and actual.flags == expected.flags

    if isinstance(actual, BaseException):
        return _deep_equal(actual.args, expected.args, path) and _deep_equal(
            vars(actual), vars(expected), path
        )

    if isinstance(actual, (type, ModuleType)) or callable(actual):
        return False

    if is_dataclass(actual):
        return all(
            _deep_equal(getattr(actual, f.name), getattr(expected, f.name), path)
            for f in fields(actual)
        )

    if type(actual).__eq__ is not object.__eq__:
        try:
            return bool(actual == expected)
        except (TypeError, ValueError, InvalidOperation):
            return False

    if hasattr(actual, "__dict__"):
        return _deep_equal(vars(actual), vars(expected), path)

    return False
