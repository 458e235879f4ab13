"""Interactive menu loop: configure, connect, check balance, hand off to the monitor."""
from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Final

from loguru import logger

from starsniper.engine.banner import show_title, splash, splash_duration
from starsniper.engine.configstore import (
    ConfigRecord,
    ConfigStore,
    as_number,
    is_blank,
    is_complete,
)
from starsniper.engine.monitor import MonitorUnavailable, load_monitor
from starsniper.engine.protocols import MarketMonitor, OperatorPrompts, Theme
from starsniper.engine.sessionstore import SessionStore
from starsniper.engine.settings import Settings
from starsniper.engine.state import SessionState
from starsniper.engine.telegram import TelegramGateway
from starsniper.engine.theme import Tone, appline, select_theme, stamp
from starsniper.prompts import CONFIG, DISCONNECT, EXIT, SNIPE, Prompter

# one line per event: [<ISO-8601 timestamp>] <LEVEL>: <message>
LOG_FORMAT: Final = "[{time:YYYY-MM-DDTHH:mm:ss.SSSZ}] {level}: {message}"


@dataclass(slots=True)
class SniperApp:
    settings: Settings = field(default_factory=Settings)
    theme: Theme = field(default_factory=select_theme)

    # market monitor callable; resolved from settings.monitor on first use if not given
    monitor: MarketMonitor | None = None

    # overrides for tests (scripted prompts, fake Telegram clients)
    prompter: OperatorPrompts | None = None
    clientFactory: Callable[[str, int, str], Any] | None = None

    state: SessionState = field(default_factory=SessionState)
    exiting: bool = False

    store: ConfigStore = field(init=False)
    sessions: SessionStore = field(init=False)
    gateway: TelegramGateway = field(init=False)

    def __post_init__(self) -> None:
        self.setupLogging()

        if self.prompter is None:
            self.prompter = Prompter(self.theme)

        self.store = ConfigStore(self.settings.configPath, self.settings.backupPath, self.theme)
        self.sessions = SessionStore(self.settings.sessionPath, self.theme)

        self.gateway = TelegramGateway(self.sessions, self.theme, self.prompter)
        if self.clientFactory:
            self.gateway.clientFactory = self.clientFactory

    def setupLogging(self) -> None:
        self.settings.home.mkdir(exist_ok=True, parents=True)

        # Telethon logs through stdlib logging; keep it out of the menu and
        # only record real problems.
        logging.basicConfig(
            level=logging.ERROR,
            filename=str(self.settings.clientLogPath),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        logger.remove()
        logger.add(
            sink=str(self.settings.logPath),
            level="INFO",
            format=LOG_FORMAT,
            colorize=False,
        )

        if self.settings.debug:
            logger.add(sys.stderr, colorize=True, level="TRACE")

    def say(self, msg: str, tone: Tone | None = None) -> None:
        self.theme.echo(appline(msg), tone)

    def resolveMonitor(self) -> MarketMonitor:
        if self.monitor is None:
            self.monitor = load_monitor(self.settings.monitor)

        return self.monitor

    async def mainMenu(self) -> str:
        show_title(self.theme)

        tone = Tone.STATUS_OK if self.state.connected else Tone.STATUS_BAD
        self.theme.echo(f"[{stamp()}] Telegram Status: {self.state.describe()}\n", tone)

        return await self.prompter.choose_action(self.state.connected)

    async def _refreshExisting(self) -> bool:
        self.say("Telegram client is already connected. Refreshing details...", Tone.OK)
        try:
            username, balance = await self.gateway.refresh(self.state.client)
        except Exception as e:
            self.say(f"Error refreshing details on existing connection: {e}", Tone.ERROR)
            self.theme.echo(
                '[App] Disconnecting due to error. Please try "Start Sniping" again.', Tone.WARN
            )
            await self.gateway.release(self.state.client)
            logger.error("Error refreshing Telegram details: {}", e)
            self.state.reset()
            return False

        self.state.attach(self.state.client, username, balance)
        self.theme.echo(f"    Refreshed User: {username}, Stars: {balance}", Tone.ACCENT)
        logger.info("Refreshed Telegram details: User={}, Stars={}", username, balance)
        return True

    async def _connectFresh(self, config: ConfigRecord) -> bool:
        self.say("--- Initializing Telegram for Sniping ---", Tone.INFO)
        result = await self.gateway.connect(config["api_id"], config["api_hash"])

        if not (result.success and result.client):
            error = result.error or "Unknown error"
            self.say(f"Failed to initialize Telegram for sniping: {error}", Tone.ERROR)
            self.theme.echo(
                "    Please check API credentials, internet, and Telegram login.", Tone.WARN
            )
            logger.error("Failed to initialize Telegram: {}", error)
            self.state.reset()
            return False

        self.state.attach(result.client, result.username, result.balance)
        logger.info(
            "Telegram initialized: User={}, Stars={}", result.username, result.balance
        )
        return True

    async def startSniping(self) -> bool:
        """Returns True once the monitor has the live client.

        Returns False (back to the menu) for incomplete config, connection
        failure, insufficient balance, or no usable monitor.
        """
        self.theme.clear()
        config = self.store.read()
        if not is_complete(config):
            self.say("Configuration missing or incomplete. Please set it first.", Tone.WARN)
            self.theme.echo("    You can set the configuration from the main menu.", Tone.WARN)
            logger.warning("Attempted to start sniping with incomplete configuration")
            return False

        if self.state.connected:
            ready = await self._refreshExisting()
        else:
            ready = await self._connectFresh(config)

        if not ready:
            return False

        minimum = as_number(config["min_to_spend"])
        assert minimum is not None

        if self.state.balance < minimum:
            self.say(
                f"Not enough stars ({self.state.balance}) to meet minimum spending requirement ({config['min_to_spend']}).",
                Tone.WARN,
            )
            self.theme.echo(
                "    Please accumulate more stars or adjust the configuration. Returning to main menu.",
                Tone.WARN,
            )
            logger.warning("Insufficient stars: {} < {}", self.state.balance, config["min_to_spend"])
            return False

        try:
            monitor = self.resolveMonitor()
        except MonitorUnavailable as e:
            self.say(str(e), Tone.ERROR)
            logger.error("Market monitor unavailable: {}", e)
            return False

        self.say(
            f"Telegram setup complete. User: {self.state.username}, Stars: {self.state.balance}.",
            Tone.INFO,
        )
        await self.prompter.confirm_start()

        await monitor(self.theme, self.state.client, config)
        logger.info("Market monitoring started")
        return True

    async def setConfig(self) -> bool:
        self.theme.clear()
        self.say("--- Set/Update Configuration ---", Tone.INFO)

        current = self.store.read()
        updated = await self.prompter.ask_config(current)

        if is_blank(updated.get("api_id")) or is_blank(updated.get("api_hash")):
            self.say(
                "Configuration setup was not fully completed. Essential API details (ID and Hash) are missing. Not saved.",
                Tone.ERROR,
            )
            logger.error("Configuration setup incomplete: missing API details")
            return False

        saved = self.store.write(updated)
        if saved and not is_complete(updated):
            self.say(
                "Configuration saved, but some values (like min/max stars) might still need to be set for full functionality.",
                Tone.WARN,
            )
            logger.warning("Configuration saved but incomplete")

        return saved

    async def disconnectTelegram(self) -> bool:
        if not self.state.connected:
            self.say("Telegram client is not currently connected.", Tone.WARN)
            logger.warning("Attempted to disconnect non-connected client")
            return False

        self.say("Disconnecting Telegram client as per user request...", Tone.WARN)
        released = await self.gateway.release(self.state.client)
        self.state.reset()

        if released:
            self.say("Telegram client disconnected successfully.", Tone.OK)

        return released

    async def holdWhileMonitoring(self) -> None:
        """Keep the process alive while the monitor works through the client."""
        client = self.state.client
        if client is not None and client.is_connected():
            await client.run_until_disconnected()

    async def shutdown(self) -> None:
        if self.state.connected:
            self.say("Ensuring Telegram client is disconnected before final exit...", Tone.MUTED)
            if await self.gateway.release(self.state.client):
                logger.info("Telegram client disconnected before exit")

        self.state.reset()
        await logger.complete()

    async def runall(self) -> None:
        logger.info("Application started")
        await splash(splash_duration(self.settings.splashMin, self.settings.splashMax))

        try:
            while not self.exiting:
                self.theme.clear()
                choice = await self.mainMenu()
                pause = True

                if choice == SNIPE:
                    if await self.startSniping():
                        self.say("Monitoring is active. Press Ctrl+C to stop the bot.", Tone.INFO)
                        self.exiting = True
                        pause = False
                        await self.holdWhileMonitoring()
                elif choice == CONFIG:
                    await self.setConfig()
                elif choice == DISCONNECT:
                    await self.disconnectTelegram()
                elif choice == EXIT:
                    self.exiting = True
                    pause = False
                    self.theme.clear()
                    self.say("Exiting Sniper Bot... Goodbye!", Tone.GOODBYE)
                    logger.info("Application exited")

                if pause and not self.exiting:
                    await self.prompter.pause()
        finally:
            await self.shutdown()
