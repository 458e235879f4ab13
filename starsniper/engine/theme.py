"""Terminal output themes.

Every component prints through a ``Theme`` so color support is decided once
at startup. ``ColorTheme`` paints with prompt_toolkit styles; ``PlainTheme``
is the null object used when the terminal can't (or shouldn't) render color.
"""
from __future__ import annotations

import datetime
import enum
import os
import sys
from typing import Final, TextIO

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.shortcuts import clear


class Tone(enum.Enum):
    INFO = "info"
    OK = "ok"
    WARN = "warn"
    ERROR = "error"
    ACCENT = "accent"
    MUTED = "muted"
    BANNER = "banner"
    STATUS_OK = "status_ok"
    STATUS_BAD = "status_bad"
    GOODBYE = "goodbye"


# prompt_toolkit style strings for each tone
TONE_STYLES: Final[dict[Tone, str]] = {
    Tone.INFO: "ansicyan",
    Tone.OK: "ansigreen",
    Tone.WARN: "ansiyellow",
    Tone.ERROR: "ansired",
    Tone.ACCENT: "ansiblue",
    Tone.MUTED: "ansigray",
    Tone.BANNER: "ansibrightmagenta bold",
    Tone.STATUS_OK: "ansibrightgreen",
    Tone.STATUS_BAD: "ansibrightred",
    Tone.GOODBYE: "ansibrightyellow",
}


def stamp() -> str:
    """Current local time as ISO-8601 with offset."""
    return datetime.datetime.now().astimezone().isoformat(timespec="milliseconds")


def appline(msg: str) -> str:
    return f"[{stamp()}] [App] {msg}"


class ColorTheme:
    def styled(self, text: str, tone: Tone | None = None) -> FormattedText:
        return FormattedText([(TONE_STYLES[tone] if tone else "", text)])

    def echo(self, text: str, tone: Tone | None = None) -> None:
        print_formatted_text(self.styled(text, tone))

    def clear(self) -> None:
        clear()


class PlainTheme:
    """Null-object theme: same surface as ColorTheme, no escape codes."""

    def styled(self, text: str, tone: Tone | None = None) -> str:
        return text

    def echo(self, text: str, tone: Tone | None = None) -> None:
        print(text)

    def clear(self) -> None:
        pass


def select_theme(stream: TextIO | None = None) -> ColorTheme | PlainTheme:
    """Pick a theme for ``stream`` (default stdout).

    NO_COLOR (https://no-color.org) or a non-tty stream gets the plain theme.
    """
    stream = stream or sys.stdout
    if os.getenv("NO_COLOR") is not None:
        return PlainTheme()

    try:
        isatty = stream.isatty()
    except (AttributeError, ValueError):
        isatty = False

    return ColorTheme() if isatty else PlainTheme()
