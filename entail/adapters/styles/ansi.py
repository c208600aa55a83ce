"""Colorama style adapter.

Implements StylePort with ANSI sequences from colorama.
"""

from colorama import Back, Fore, Style, just_fix_windows_console

from entail.core.ports import StylePort

_ITALIC = "\033[3m"
_NO_ITALIC = "\033[23m"
_UNDERLINE = "\033[4m"
_NO_UNDERLINE = "\033[24m"


class ColoramaStyle(StylePort):
    """Decorates text with ANSI colors for terminal output.

    Each decoration closes only the attribute it opened, and reopens it
    after any nested decoration that closes the same attribute, so
    ``red("a" + dim("b") + green("c") + "d")`` keeps ``d`` red.
    """

    def __init__(self) -> None:
        just_fix_windows_console()

    @staticmethod
    def _wrap(prefix: str, close: str, text: str) -> str:
        return f"{prefix}{text.replace(close, close + prefix)}{close}"

    def red(self, text: str) -> str:
        return self._wrap(Fore.RED, Fore.RESET, text)

    def green(self, text: str) -> str:
        return self._wrap(Fore.GREEN, Fore.RESET, text)

    def grey(self, text: str) -> str:
        return self._wrap(Fore.LIGHTBLACK_EX, Fore.RESET, text)

    def yellow(self, text: str) -> str:
        return self._wrap(Fore.YELLOW, Fore.RESET, text)

    def dim(self, text: str) -> str:
        return self._wrap(Style.DIM, Style.NORMAL, text)

    def bold(self, text: str) -> str:
        return self._wrap(Style.BRIGHT, Style.NORMAL, text)

    def italic(self, text: str) -> str:
        return self._wrap(_ITALIC, _NO_ITALIC, text)

    def underline(self, text: str) -> str:
        return self._wrap(_UNDERLINE, _NO_UNDERLINE, text)

    def fail_badge(self, text: str) -> str:
        badge = self._wrap(Back.RED, Back.RESET, text)
        return self.bold(self._wrap(Fore.WHITE, Fore.RESET, badge))
