"""Human-readable diffs between actual and expected values.

``compare`` picks a rendering from the shape of the two operands:

- two sequences: element alignment diff
- a pattern on the expected side: character diff against its source
- composite values: serialized to indented text, keys of ``actual``
  reordered to follow ``expected``, then diffed as text
- multi-line text: line diff; single-line text: character diff with a
  caret row under the divergent spans
- anything else: a two-row expected / actual comparison

Rows are prefixed with ``--`` (only in actual), ``++`` (only in expected)
or ``··`` (common to both). Every function takes a ``StylePort`` so the
same text can be rendered plain or colored.
"""

import difflib
import json
import re
from collections.abc import Mapping, Set
from dataclasses import fields, is_dataclass
from types import ModuleType
from typing import Any

from .equality import is_pattern
from .ports import PLAIN, StylePort

_LITERAL = "[__LITERAL__]"
_LITERAL_TOKEN = re.compile(r'"\[__LITERAL__\](.*?)\[__LITERAL__\]"')
_NEWLINE = re.compile(r"\r?\n")


def _literal(text: str) -> str:
    return f"{_LITERAL}{text}{_LITERAL}"


def _color(style: StylePort, sym: str):
    if sym == "--":
        return style.red
    if sym == "++":
        return style.green
    return style.grey


def pretty(text: str, style: StylePort = PLAIN) -> str:
    """Make whitespace visible: spaces, tabs and line breaks."""
    text = text.replace(" ", style.dim("·"))
    text = text.replace("\t", style.dim("→"))
    return _NEWLINE.sub(style.dim("↵"), text)


def _log(sym: str, text: str, style: StylePort) -> str:
    return _color(style, sym)(sym + pretty(text, style)) + "\n"


def _title(sym: str, text: str, style: StylePort) -> str:
    return _color(style, sym)(style.underline(style.dim(style.italic(text)))) + "\n"


def _line_number(number: int, pad: int, style: StylePort) -> str:
    return style.dim(f"L{str(number).zfill(pad)} ")


def _blocks(actual: list[Any], expected: list[Any], keys_a: list[str], keys_e: list[str]):
    """Group two sequences into ordered (sym, items) runs."""
    matcher = difflib.SequenceMatcher(None, keys_a, keys_e, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            yield "··", actual[i1:i2]
        if tag in ("delete", "replace"):
            yield "--", actual[i1:i2]
        if tag in ("insert", "replace"):
            yield "++", expected[j1:j2]


def arrays(actual: list[Any] | tuple[Any, ...], expected: list[Any] | tuple[Any, ...], style: StylePort = PLAIN) -> str:
    """Element alignment diff of two sequences."""
    actual, expected = list(actual), list(expected)
    keys_a = [stringify(item) for item in actual]
    keys_e = [stringify(item) for item in expected]

    out = _log("··", "[", style)
    for sym, items in _blocks(actual, expected, keys_a, keys_e):
        if sym == "++":
            out += _title(sym, "Expected:", style)
        elif sym == "--":
            out += _title(sym, "Actual:", style)

        for j, item in enumerate(items):
            composite = is_composite(item)
            rows = stringify(item).splitlines()
            for k, row in enumerate(rows):
                text = "  " + row + ("" if composite else ",")
                if composite and k == len(rows) - 1 and j + 1 < len(items):
                    text += ","
                out += _log(sym, text, style)

    return out + _log("··", "]", style)


def lines(actual: str, expected: str, style: StylePort = PLAIN) -> str:
    """Line diff of two multi-line strings.

    Rows are numbered against the expected side: unchanged and added
    blocks advance the counter, removed blocks are numbered from where
    they would have been.
    """
    rows_a = _NEWLINE.split(actual)
    rows_e = _NEWLINE.split(expected)
    pad = len(str(len(rows_e)))
    number = 1

    out = ""
    for sym, block in _blocks(rows_a, rows_e, rows_a, rows_e):
        if sym == "++":
            out += _title(sym, "Expected:", style)
        elif sym == "--":
            out += _title(sym, "Actual:", style)
        for offset, row in enumerate(block):
            out += _line_number(number + offset, pad, style)
            out += _log(sym, row or "\n", style)
        if sym != "--":
            number += len(block)

    return out


def chars(actual: str, expected: str, style: StylePort = PLAIN) -> str:
    """Character diff of two single-line strings.

    Both rows are padded segment by segment so that common characters
    line up; a caret row marks the spans that differ.
    """
    row_a: list[str] = []
    row_e: list[str] = []
    carets: list[str] = []
    width_total = 0

    matcher = difflib.SequenceMatcher(None, actual, expected, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        seg_a, seg_e = actual[i1:i2], expected[j1:j2]
        width = max(len(seg_a), len(seg_e))
        row_a.append(pretty(seg_a, style) + " " * (width - len(seg_a)))
        row_e.append(pretty(seg_e, style) + " " * (width - len(seg_e)))
        carets.append((" " if tag == "equal" else "^") * width)
        width_total += width

    out = direct("".join(row_a), "".join(row_e), style, width_total, width_total)
    return out + style.red("  " + "".join(carets).rstrip())


def direct(
    actual: Any,
    expected: Any,
    style: StylePort = PLAIN,
    len_a: int | None = None,
    len_e: int | None = None,
) -> str:
    """Two-row comparison, right-padded so the labels line up.

    When the operands have different types each row is tagged with its
    type name.
    """
    text_a, text_e = _text(actual), _text(expected)
    len_a = len(text_a) if len_a is None else len_a
    len_e = len(text_e) if len_e is None else len_e
    gutter = 4
    width = max(len_a, len_e)

    type_a, type_e = type(actual).__name__, type(expected).__name__
    if type_a != type_e:
        gutter = 2
        pad_a = gutter + width - len_a
        pad_e = gutter + width - len_e
        text_a += " " * pad_a + style.dim(f"[{type_a}]")
        text_e += " " * pad_e + style.dim(f"[{type_e}]")
        len_a += pad_a + len(type_a) + 2
        len_e += pad_e + len(type_e) + 2
        width = max(len_a, len_e)

    label_e = style.dim(style.italic("(Expected)"))
    label_a = style.dim(style.italic("(Actual)"))
    out = style.green("++" + text_e + " " * (gutter + width - len_e) + label_e) + "\n"
    return out + style.red("--" + text_a + " " * (gutter + width - len_a) + label_a) + "\n"


def _text(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


def is_composite(value: Any) -> bool:
    """True for values serialized as nested structures."""
    if isinstance(value, (Mapping, list, tuple, Set)):
        return True
    if isinstance(value, (type, ModuleType, BaseException)) or callable(value):
        return False
    return is_dataclass(value) or hasattr(value, "__dict__")


def sort(actual: Any, expected: Any, _seen: set[int] | None = None) -> Any:
    """Reorder ``actual`` so its keys follow the key order of ``expected``.

    Keys only present in ``actual`` are appended at the end. Lists are
    walked position by position. Values that are not mappings or lists
    are returned unchanged.
    """
    seen = set() if _seen is None else _seen
    if id(actual) in seen:
        return actual

    if isinstance(actual, (list, tuple)):
        seen.add(id(actual))
        try:
            reference = list(expected) if isinstance(expected, (list, tuple)) else []
            return [
                sort(item, reference[i] if i < len(reference) else {}, seen)
                if isinstance(item, (Mapping, list, tuple))
                else item
                for i, item in enumerate(actual)
            ]
        finally:
            seen.discard(id(actual))

    if isinstance(actual, Mapping) and isinstance(expected, Mapping):
        seen.add(id(actual))
        try:
            out: dict[Any, Any] = {}
            for key in expected:
                if key in actual:
                    item = actual[key]
                    if isinstance(item, (Mapping, list, tuple)):
                        item = sort(item, expected[key] or {}, seen)
                    out[key] = item
            for key, item in actual.items():
                if key not in out:
                    out[key] = item
            return out
        finally:
            seen.discard(id(actual))

    return actual


def _encode(value: Any, ancestors: set[int]) -> Any:
    """Convert ``value`` into JSON-ready data with literal placeholders."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value

    if not is_composite(value):
        return _literal(repr(value))

    if id(value) in ancestors:
        return _literal("[Circular]")

    ancestors.add(id(value))
    try:
        if isinstance(value, Mapping):
            return {
                key if isinstance(key, str) else repr(key): _encode(item, ancestors)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [_encode(item, ancestors) for item in value]
        if isinstance(value, Set):
            return [_encode(item, ancestors) for item in sorted(value, key=repr)]
        if is_dataclass(value):
            return {f.name: _encode(getattr(value, f.name), ancestors) for f in fields(value)}
        return {key: _encode(item, ancestors) for key, item in vars(value).items()}
    finally:
        ancestors.discard(id(value))


def _dump(data: Any) -> str:
    text = json.dumps(data, indent=2, ensure_ascii=False, allow_nan=True)
    return _LITERAL_TOKEN.sub(lambda m: json.loads(f'"{m.group(1)}"'), text)


def stringify(value: Any) -> str:
    """Serialize ``value`` to canonical indented text.

    NaN, infinities, circular references and values without a JSON form
    are written as literal tokens (``NaN``, ``[Circular]``, their repr).
    """
    return _dump(_encode(value, set()))


def format_value(value: Any) -> str:
    """Render a value for inline use in failure details."""
    return stringify(value)


def compare(actual: Any, expected: Any, style: StylePort = PLAIN) -> str:
    """Render the difference between ``actual`` and ``expected``."""
    if isinstance(actual, (list, tuple)) and isinstance(expected, (list, tuple)):
        return arrays(actual, expected, style)

    if is_pattern(expected):
        return chars(str(actual or ""), str(expected.pattern), style)

    composite_a, composite_e = is_composite(actual), is_composite(expected)
    if composite_a and composite_e:
        encoded_e = _encode(expected, set())
        actual = _dump(sort(_encode(actual, set()), encoded_e))
        expected = _dump(encoded_e)
    elif composite_e:
        expected = stringify(expected)
    elif composite_a:
        actual = stringify(actual)

    multiline_a = isinstance(actual, str) and _NEWLINE.search(actual) is not None
    multiline_e = isinstance(expected, str) and _NEWLINE.search(expected) is not None
    if multiline_a or multiline_e:
        return lines(_text(actual), _text(expected), style)
    if isinstance(actual, str) and isinstance(expected, str):
        return chars(actual, expected, style)

    return direct(actual, expected, style)
