"""Narrow protocols for cross-module calls.

These define the minimal interfaces engine modules need from their peers
(and from the out-of-tree market monitor), avoiding direct coupling to
SniperApp or to concrete Telethon classes in tests.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from starsniper.engine.theme import Tone


@runtime_checkable
class Theme(Protocol):
    """Themed terminal output."""

    def styled(self, text: str, tone: Tone | None = None) -> Any: ...
    def echo(self, text: str, tone: Tone | None = None) -> None: ...
    def clear(self) -> None: ...


@runtime_checkable
class LoginPrompts(Protocol):
    """Operator-supplied secrets for an interactive Telegram login."""

    async def phone(self) -> str: ...
    async def code(self) -> str: ...
    async def password(self) -> str: ...


@runtime_checkable
class OperatorPrompts(LoginPrompts, Protocol):
    """Everything the menu loop asks the operator, login secrets included."""

    async def ask_config(self, current: dict[str, Any]) -> dict[str, Any]: ...
    async def choose_action(self, connected: bool) -> str: ...
    async def confirm_start(self) -> None: ...
    async def pause(self) -> None: ...


@runtime_checkable
class MarketMonitor(Protocol):
    """Receives the live client once balance and config checks pass."""

    async def __call__(self, theme: Theme, client: Any, config: dict[str, Any]) -> None: ...
