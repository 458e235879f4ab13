"""Startup splash and the ASCII title shown above the menu."""
from __future__ import annotations

import asyncio
import random
import shutil
from typing import Final

import pyfiglet
from prompt_toolkit.shortcuts import ProgressBar
from prompt_toolkit.shortcuts.progress_bar import formatters

from starsniper.engine.protocols import Theme
from starsniper.engine.theme import Tone

TITLE: Final = "SNIPER BOT"
SPLASH_STEPS: Final = 50


def render_title(text: str = TITLE, columns: int | None = None) -> list[str]:
    """Figlet lines for ``text``, each left-padded to center on ``columns``."""
    columns = columns or shutil.get_terminal_size((80, 24)).columns
    art = pyfiglet.figlet_format(text, font="standard", width=80)

    return [
        " " * max(0, (columns - len(line)) // 2) + line
        for line in art.rstrip("\n").split("\n")
    ]


def show_title(theme: Theme, text: str = TITLE) -> None:
    try:
        lines = render_title(text)
    except Exception:
        # no figlet font available; a plain title still identifies the app
        theme.echo(f"\n\n{text}\n\n", Tone.BANNER)
        return

    theme.echo("\n")
    for line in lines:
        theme.echo(line, Tone.BANNER)
    theme.echo("\n")


def splash_duration(low: float, high: float) -> float:
    low, high = max(0.0, low), max(0.0, high)
    if high < low:
        low, high = high, low

    return random.uniform(low, high)


async def splash(total: float, steps: int = SPLASH_STEPS) -> None:
    """Fill a progress bar over ``total`` seconds; nothing is actually loading."""
    if total <= 0:
        return

    fmt = [
        formatters.Text("Loading... "),
        formatters.Bar(start="|", end="|", sym_a="█", sym_b="█", sym_c="░"),
        formatters.Text(" "),
        formatters.Percentage(),
        formatters.Text(" || "),
        formatters.Progress(),
        formatters.Text(" Chunks"),
    ]

    stepDuration = total / steps
    with ProgressBar(formatters=fmt) as pb:
        for _ in pb(range(steps), total=steps):
            await asyncio.sleep(stepDuration)
