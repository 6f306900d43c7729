"""ANSI escape sequences for coloured terminal output."""

from __future__ import annotations

from enum import Enum


class Style(str, Enum):
    """Terminal colours and text attributes."""

    BLACK = "\033[30m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BG_BLACK = "\033[40m"
    BG_RED = "\033[41m"
    BG_GREEN = "\033[42m"
    BG_YELLOW = "\033[43m"
    BG_BLUE = "\033[44m"
    BG_MAGENTA = "\033[45m"
    BG_CYAN = "\033[46m"
    BG_WHITE = "\033[47m"

    RESET = "\033[0m"
    BOLD = "\033[1m"
    UNDERLINE = "\033[4m"
    INVERSE = "\034[7m"

    BOLD_BLACK = "\033[1m\033[30m"
    BOLD_RED = "\033[1m\033[31m"
    BOLD_GREEN = "\033[1m\033[32m"
    BOLD_YELLOW = "\033[1m\033[33m"
    BOLD_BLUE = "\033[1m\033[34m"
    BOLD_MAGENTA = "\033[1m\033[35m"
    BOLD_CYAN = "\033[1m\033[36m"
    BOLD_WHITE = "\033[1m\033[37m"

    def __str__(self) -> str:
        return self.value

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)


def styled(text: str, *args: Style) -> str:
    """Wrap ``text`` in the given styles followed by a reset."""
    if not args:
        return text
    return "".join(style.value for style in args) + text + Style.RESET.value