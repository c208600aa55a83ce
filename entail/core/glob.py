"""Shell-style glob patterns compiled to regular expressions.

Used by discovery to filter candidate file paths, and usable anywhere a
pattern is accepted (``match``, ``throws``) since a ``Glob`` exposes
``search`` and ``pattern`` like a compiled regular expression.
"""

import re


def compile_glob(
    source: str,
    *,
    extended: bool = False,
    globstar: bool = False,
    anchored: bool = False,
) -> str:
    """Translate glob text into regular expression source.

    Args:
        source: Glob text, e.g. ``"tests/**/*.py"``.
        extended: Support ``?``, ``[...]`` character classes (``[!...]``
            negates) and ``{a,b}`` alternation. When False those characters
            match literally.
        globstar: When False, ``*`` matches across ``/``. When True, ``*``
            stays within one path segment and a ``**`` segment matches
            zero or more whole segments.
        anchored: Wrap the expression in ``^...$``.

    Returns:
        Regular expression source.
    """
    output: list[str] = []
    in_group = False
    in_class = False
    i = 0
    length = len(source)

    while i < length:
        c = source[i]

        if in_class and c != "]":
            output.append("\\\\" if c == "\\" else c)
        elif c == "*":
            prev_char = source[i - 1] if i > 0 else None
            star_count = 1
            while i + 1 < length and source[i + 1] == "*":
                star_count += 1
                i += 1
            next_char = source[i + 1] if i + 1 < length else None

            if not globstar:
                output.append(".*")
            elif star_count > 1 and prev_char in (None, "/") and next_char in (None, "/"):
                if next_char == "/":
                    output.append("(?:[^/]*/)*")
                    i += 1  # the "/" is consumed by the group
                else:
                    output.append(".*")
            else:
                output.append("[^/]*")
        elif extended and c == "?":
            output.append(".")
        elif extended and c == "[":
            if source[i + 1 : i + 2] == "!":
                output.append("[^")
                i += 1
            else:
                output.append("[")
            in_class = True
        elif extended and c == "]":
            in_class = False
            output.append("]")
        elif extended and c == "{":
            in_group = True
            output.append("(?:")
        elif extended and c == "}":
            in_group = False
            output.append(")")
        elif c == "," and in_group:
            output.append("|")
        else:
            output.append(re.escape(c))

        i += 1

    body = "".join(output)
    return f"^{body}$" if anchored else body


class Glob:
    """A compiled glob pattern.

    ``str(glob)`` is the glob text it was built from.
    """

    def __init__(
        self,
        pattern: str,
        *,
        extended: bool = False,
        globstar: bool = False,
        anchored: bool = False,
        flags: int = 0,
    ):
        self.pattern = pattern
        self.extended = extended
        self.globstar = globstar
        self.anchored = anchored
        self.regex = re.compile(
            compile_glob(pattern, extended=extended, globstar=globstar, anchored=anchored),
            flags,
        )

    def search(self, text: str) -> re.Match[str] | None:
        return self.regex.search(text)

    def test(self, text: str) -> bool:
        """True if ``text`` matches the pattern."""
        return self.regex.search(text) is not None

    def __str__(self) -> str:
        return self.pattern

    def __repr__(self) -> str:
        return f"Glob({self.pattern!r})"


def glob(pattern: str, **options: bool) -> Glob:
    """Compile ``pattern`` with default options (unanchored, basic syntax)."""
    return Glob(pattern, **options)
