"""Unit tests for the colorama style adapter."""

from colorama import Fore, Style

from entail.adapters.styles.ansi import ColoramaStyle
from entail.core import diff


class TestColoramaStyle:
    """Nested decorations keep the outer attribute."""

    def test_nested_color_reopens_outer_color(self) -> None:
        style = ColoramaStyle()

        text = style.green("a" + style.red("b") + "c")

        assert text == f"{Fore.GREEN}a{Fore.RED}b{Fore.RESET}{Fore.GREEN}c{Fore.RESET}"

    def test_dim_inside_color_keeps_color(self) -> None:
        style = ColoramaStyle()

        text = style.red("x" + style.dim("y") + "z")

        assert text == f"{Fore.RED}x{Style.DIM}y{Style.NORMAL}z{Fore.RESET}"

    def test_no_full_reset(self) -> None:
        style = ColoramaStyle()

        text = style.bold(style.underline(style.italic(style.dim("t"))))

        assert Style.RESET_ALL not in text
        assert text.startswith(Style.BRIGHT)
        assert text.endswith(Style.NORMAL)

    def test_diff_row_is_colored_to_the_end(self) -> None:
        row = diff._log("--", '  "a": 1', ColoramaStyle())

        assert row.startswith(Fore.RED + "--")
        assert row.endswith(Fore.RESET + "\n")
        assert row.count(Fore.RESET) == 1
        assert Style.RESET_ALL not in row

    def test_fail_badge(self) -> None:
        badge = ColoramaStyle().fail_badge(" FAIL ")

        assert badge.startswith(Style.BRIGHT)
        assert " FAIL " in badge
        assert Style.RESET_ALL not in badge
