"""Operator prompts: config survey, main menu, confirmations, login secrets.

All prompts use ``unsafe_ask_async()`` so Ctrl-C raises KeyboardInterrupt
up to the entry point instead of quietly returning None.
"""
from __future__ import annotations

import functools
import math
from dataclasses import dataclass, field
from typing import Any, Final, Literal

import questionary
from questionary import Choice

from starsniper.engine.configstore import CONFIG_KEYS, ConfigRecord, as_number, is_blank
from starsniper.engine.protocols import Theme
from starsniper.engine.theme import Tone, appline

# menu values returned by Prompter.choose_action()
SNIPE: Final = "snipe"
CONFIG: Final = "config"
DISCONNECT: Final = "disconnect_tg"
EXIT: Final = "exit"


@dataclass
class Q:
    """Self-asking prompt for one config key."""

    name: str = ""
    msg: str = ""
    kind: Literal["number", "text"] = "text"
    integer: bool = False
    value: str = field(default_factory=str)

    def ask(self, **kwargs):
        return questionary.text(self.msg, default=self.value, **kwargs).unsafe_ask_async()


QUESTIONS: Final = (
    Q("api_id", "Enter your Telegram API ID:", kind="number", integer=True),
    Q("api_hash", "Enter your Telegram API Hash:"),
    Q("bot_token", "Enter your Bot Token (optional, for bot features):"),
    Q("min_to_spend", "Enter minimum stars to spend:", kind="number"),
    Q("max_to_spend", "Enter maximum stars to spend:", kind="number"),
)


def parse_number(raw: str | None, integer: bool = False) -> int | float | None:
    """Parse a typed number; blank means "unanswered" and returns None.

    Integral values come back as int so they serialize as 5, not 5.0.
    Raises ValueError for anything else that isn't a finite number.
    """
    if is_blank(raw):
        return None

    num = float(raw.strip())  # type: ignore[union-attr]
    if math.isnan(num) or math.isinf(num):
        raise ValueError(f"not a finite number: {raw!r}")

    if num.is_integer():
        return int(num)

    if integer:
        raise ValueError(f"not a whole number: {raw!r}")

    return num


def parse_answer(q: Q, raw: str | None) -> Any:
    if q.kind == "number":
        return parse_number(raw, integer=q.integer)

    return None if is_blank(raw) else raw.strip()  # type: ignore[union-attr]


def validate_number(raw: str, integer: bool = False) -> bool | str:
    """Every numeric config value (api id and spend limits) is non-negative."""
    try:
        num = parse_number(raw, integer=integer)
    except ValueError:
        return "Must be a whole number" if integer else "Must be a number"

    if num is not None and num < 0:
        return "Must be a non-negative whole number" if integer else "Must be a non-negative number"

    return True


def validate_max(raw: str, minimum: float | None) -> bool | str:
    if (ok := validate_number(raw)) is not True:
        return ok

    num = parse_number(raw)
    if num is not None and minimum is not None and num < minimum:
        return "Maximum stars must be >= minimum stars."

    return True


def default_for(q: Q, current: ConfigRecord) -> str:
    """Pre-fill text for ``q`` from the current record.

    Numeric values that don't parse are dropped rather than shown.
    """
    value = current.get(q.name)
    if is_blank(value):
        return ""

    if q.kind == "number":
        num = as_number(value)
        if num is None:
            return ""

        return str(int(num)) if num.is_integer() else str(num)

    return str(value)


def merge_answers(current: ConfigRecord, answers: dict[str, Any]) -> ConfigRecord:
    """Answered keys win; unanswered keys keep their previous value (if any)."""
    merged: ConfigRecord = {}
    for key in CONFIG_KEYS:
        if answers.get(key) is not None:
            merged[key] = answers[key]
        elif key in current:
            merged[key] = current[key]

    return merged


@dataclass(slots=True)
class Prompter:
    theme: Theme

    async def ask_config(self, current: ConfigRecord) -> ConfigRecord:
        self.theme.echo(
            appline(
                "Configuration is incomplete or needs to be set. Please provide the following details:"
            ),
            Tone.WARN,
        )

        answers: dict[str, Any] = {}
        for question in QUESTIONS:
            q = Q(
                question.name,
                question.msg,
                kind=question.kind,
                integer=question.integer,
                value=default_for(question, current),
            )

            if q.name == "max_to_spend":
                low = answers.get("min_to_spend")
                if low is None:
                    low = as_number(current.get("min_to_spend"))

                validate = functools.partial(validate_max, minimum=low)
            elif q.kind == "number":
                validate = functools.partial(validate_number, integer=q.integer)
            else:
                validate = None

            raw = await q.ask(validate=validate)
            answers[q.name] = parse_answer(q, raw)

        return merge_answers(current, answers)

    async def choose_action(self, connected: bool) -> str:
        return await questionary.select(
            "What would you like to do?",
            choices=[
                Choice("1. Start Sniping", value=SNIPE),
                Choice("2. Set Config", value=CONFIG),
                Choice(
                    "3. Disconnect Telegram",
                    value=DISCONNECT,
                    disabled=None if connected else "not connected",
                ),
                Choice("4. Exit", value=EXIT),
            ],
            use_indicator=True,
            use_arrow_keys=True,
            use_jk_keys=False,
        ).unsafe_ask_async()

    async def confirm_start(self) -> None:
        await questionary.text(
            "Press Enter to start sniping with current setup (choose market and items):"
        ).unsafe_ask_async()

    async def pause(self) -> None:
        self.theme.echo(appline("Press any key to return to the main menu..."), Tone.MUTED)
        await questionary.press_any_key_to_continue("").unsafe_ask_async()

    # LoginPrompts

    async def phone(self) -> str:
        got = await questionary.text(
            "Enter your phone number (e.g. +79891234567):"
        ).unsafe_ask_async()
        return got.strip()

    async def code(self) -> str:
        got = await questionary.text("Enter the login code you received:").unsafe_ask_async()
        return got.strip()

    async def password(self) -> str:
        return await questionary.password(
            "Enter 2FA password (press Enter if none):"
        ).unsafe_ask_async()
