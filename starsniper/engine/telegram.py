"""Telegram connection facade.

Wraps the Telethon client calls the app needs (connect, authorize or log
in interactively, fetch display name and Stars balance, disconnect) and
normalizes the outcome into a ``ConnectResult`` instead of raising.

One attempt per call: retries are whatever Telethon does internally.
"""
from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Final

from loguru import logger
from telethon import TelegramClient, functions, types
from telethon.sessions import StringSession

from starsniper.engine.configstore import as_api_id
from starsniper.engine.protocols import LoginPrompts, Theme
from starsniper.engine.sessionstore import SessionStore
from starsniper.engine.theme import Tone

# Telegram refuses third-party logins on some accounts until the official
# app has been used once; nothing we send can get past it.
UPDATE_APP_ERROR: Final = "UPDATE_APP_TO_LOGIN"


class Phase(enum.Enum):
    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    AUTHORIZING = "authorizing"
    INTERACTIVE_LOGIN = "interactive login"
    AUTHORIZED = "authorized"
    READY = "ready"
    DISCONNECTING = "disconnecting"


@dataclass(slots=True)
class ConnectResult:
    success: bool
    client: Any = None
    username: str = ""
    balance: float = 0
    error: str | None = None


def make_client(token: str, apiId: int, apiHash: str) -> TelegramClient:
    return TelegramClient(
        StringSession(token),
        apiId,
        apiHash,
        connection_retries=5,
        request_retries=5,
        flood_sleep_threshold=24,
    )


def display_name(me: Any) -> str:
    """@username if the account has one, else first name, else "User"."""
    if me is None:
        return "User"

    if username := getattr(me, "username", None):
        return f"@{username}"

    return getattr(me, "first_name", None) or "User"


def stars_amount(balance: Any) -> float:
    """Normalize a Stars balance across API layers.

    Older layers return a bare integer; newer ones a StarsAmount(amount, nanos).
    """
    if balance is None:
        return 0

    amount = getattr(balance, "amount", balance) or 0
    if nanos := getattr(balance, "nanos", 0):
        return amount + nanos / 1_000_000_000

    return amount


def is_update_app_error(err: BaseException) -> bool:
    return UPDATE_APP_ERROR in str(err)


@dataclass(slots=True)
class TelegramGateway:
    sessions: SessionStore
    theme: Theme
    prompts: LoginPrompts
    clientFactory: Callable[[str, int, str], Any] = field(default=make_client)

    def _phase(self, phase: Phase) -> None:
        logger.debug("[TG] {}", phase.value)

    async def fetch_balance(self, client: Any) -> float:
        result = await client(
            functions.payments.GetStarsStatusRequest(peer=types.InputPeerSelf())
        )
        return stars_amount(getattr(result, "balance", None))

    async def refresh(self, client: Any) -> tuple[str, float]:
        """Re-read display name and balance over an existing connection.

        Unlike connect(), errors propagate so the caller can decide to drop
        the connection.
        """
        me = await client.get_me()
        return display_name(me), await self.fetch_balance(client)

    async def _login(self, client: Any) -> None:
        self._phase(Phase.INTERACTIVE_LOGIN)
        self.theme.echo("\n[TG] No valid session found. Starting login process...", Tone.WARN)

        try:
            await client.start(
                phone=self.prompts.phone,
                code_callback=self.prompts.code,
                password=self.prompts.password,
            )
        except Exception as e:
            self.theme.echo(f"[TG] Login failed: {e}", Tone.ERROR)
            if is_update_app_error(e):
                self.theme.echo(
                    "Telegram requires you to update your app. Use official Telegram app first!",
                    Tone.ERROR,
                )
            raise

    async def connect(self, apiId: Any, apiHash: str) -> ConnectResult:
        self._phase(Phase.UNCONNECTED)
        token = self.sessions.read()

        client = None
        try:
            apiIdNum = as_api_id(apiId)
            if apiIdNum is None:
                raise ValueError(f"API ID must be a non-negative whole number, got {apiId!r}")

            client = self.clientFactory(token, apiIdNum, apiHash)

            self._phase(Phase.CONNECTING)
            self.theme.echo("[TG] Connecting to Telegram...", Tone.INFO)
            await client.connect()

            self._phase(Phase.AUTHORIZING)
            authorized = False
            try:
                authorized = await client.is_user_authorized()
            except Exception as e:
                self.theme.echo("[TG] Failed to check auth status, forcing login...", Tone.WARN)
                logger.warning("Authorization probe failed: {}", e)

            if not authorized or not token:
                await self._login(client)
                self.theme.echo("Session saved successfully!", Tone.OK)
            else:
                self.theme.echo("Logged in using saved session!", Tone.OK)

            self._phase(Phase.AUTHORIZED)
            self.sessions.save(client.session.save())

            username = display_name(await client.get_me())
            self.theme.echo(f"Logged in as: {username}", Tone.ACCENT)

            balance: float = 0
            try:
                balance = await self.fetch_balance(client)
                self.theme.echo(f"Telegram Stars: {balance}", Tone.BANNER)
            except Exception as e:
                self.theme.echo(f"[TG] Could not fetch Stars balance: {e}", Tone.WARN)
                logger.warning("Could not fetch Stars balance: {}", e)

            self._phase(Phase.READY)
            return ConnectResult(True, client=client, username=username, balance=balance)
        except Exception as e:
            self.theme.echo(f"[TG] Fatal error: {e}", Tone.ERROR)
            logger.error("Telegram connect failed: {}", e)

            if is_update_app_error(e):
                self.theme.echo("\nYou MUST open the official Telegram app and log in once!", Tone.ERROR)
                self.theme.echo(
                    "Telegram blocks third-party clients until you log in officially first.\n",
                    Tone.ERROR,
                )

            if client is not None and client.is_connected():
                await self.release(client)

            return ConnectResult(False, error=str(e))

    async def release(self, client: Any) -> bool:
        """Disconnect ``client``; never raises.

        Returns True only if a live client was actually disconnected.
        """
        if client is None or not client.is_connected():
            logger.warning("Attempted to disconnect non-connected client")
            return False

        self._phase(Phase.DISCONNECTING)
        try:
            await client.disconnect()
        except Exception as e:
            self.theme.echo(f"[TG] Error during disconnect: {e}", Tone.ERROR)
            logger.error("Error during client disconnect: {}", e)
            return False

        self.theme.echo("[TG] Client disconnected and resources released.", Tone.WARN)
        logger.info("Telegram client disconnected")
        return True
