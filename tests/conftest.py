"""Shared test fixtures for the starsniper test suite.

FakeTelegramClient provides a test double for Telethon's TelegramClient,
allowing headless testing without a network connection or a real account.
"""

import json
from dataclasses import dataclass, field
from io import StringIO
from typing import Any
from unittest.mock import patch

import pytest
from loguru import logger

from starsniper.engine.settings import Settings


# ── Lightweight stubs for Telethon types used in tests ──


@dataclass
class FakeMe:
    """Stub for telethon.tl.types.User."""
    username: str | None = "sniper"
    first_name: str | None = "Sam"


@dataclass
class FakeStarsAmount:
    """Stub for telethon.tl.types.StarsAmount."""
    amount: int = 0
    nanos: int = 0


@dataclass
class FakeStarsStatus:
    """Stub for payments.StarsStatus."""
    balance: Any = None


class FakeSession:
    """Stub for telethon.sessions.StringSession."""

    def __init__(self, token: str = ""):
        self.token = token

    def save(self) -> str:
        return self.token


class FakeTelegramClient:
    """Test double for telethon.TelegramClient.

    Each ``fail_*`` argument is an exception raised by the matching call.
    """

    def __init__(
        self,
        token: str = "",
        api_id: int = 0,
        api_hash: str = "",
        *,
        authorized: bool | Exception = True,
        me: FakeMe | None = None,
        balance: Any = 100,
        fail_connect: Exception | None = None,
        fail_start: Exception | None = None,
        fail_me: Exception | None = None,
        fail_balance: Exception | None = None,
        fail_disconnect: Exception | None = None,
    ):
        self.session = FakeSession(token)
        self.api_id = api_id
        self.api_hash = api_hash
        self.authorized = authorized
        self.me = me or FakeMe()
        self.balance = balance
        self.fail_connect = fail_connect
        self.fail_start = fail_start
        self.fail_me = fail_me
        self.fail_balance = fail_balance
        self.fail_disconnect = fail_disconnect

        self._connected = False
        self.started = False
        self.entered: tuple[str, str, str] | None = None
        self.requests: list[Any] = []
        self.disconnects = 0
        self.waited = False

    # ── Connection ──

    async def connect(self):
        if self.fail_connect:
            raise self.fail_connect
        self._connected = True

    def is_connected(self) -> bool:
        return self._connected

    async def disconnect(self):
        if self.fail_disconnect:
            raise self.fail_disconnect
        self._connected = False
        self.disconnects += 1

    async def run_until_disconnected(self):
        self.waited = True
        self._connected = False

    # ── Authorization ──

    async def is_user_authorized(self) -> bool:
        if isinstance(self.authorized, Exception):
            raise self.authorized
        return self.authorized

    async def start(self, phone=None, code_callback=None, password=None):
        if self.fail_start:
            raise self.fail_start

        # same call order Telethon uses: phone, then code, then (maybe) 2FA
        self.entered = (await phone(), await code_callback(), await password())
        self.started = True
        self.authorized = True
        self.session.token = "fresh-session"
        return self

    # ── Requests ──

    async def get_me(self):
        if self.fail_me:
            raise self.fail_me
        return self.me

    async def __call__(self, request):
        self.requests.append(request)
        if self.fail_balance:
            raise self.fail_balance
        return FakeStarsStatus(balance=self.balance)


class FakeClientFactory:
    """Records every client the gateway builds."""

    def __init__(self, **client_kwargs):
        self.client_kwargs = client_kwargs
        self.created: list[FakeTelegramClient] = []

    def __call__(self, token: str, api_id: int, api_hash: str) -> FakeTelegramClient:
        client = FakeTelegramClient(token, api_id, api_hash, **self.client_kwargs)
        self.created.append(client)
        return client

    @property
    def last(self) -> FakeTelegramClient:
        return self.created[-1]


@dataclass
class FakePrompter:
    """Scripted replacement for starsniper.prompts.Prompter."""

    actions: list[str] = field(default_factory=list)
    config: dict | None = None
    phone_number: str = "+15550100"
    login_code: str = "12345"
    secret: str = ""

    menus: list[bool] = field(default_factory=list)
    asked_with: list[dict] = field(default_factory=list)
    confirms: int = 0
    pauses: int = 0

    async def choose_action(self, connected: bool) -> str:
        self.menus.append(connected)
        return self.actions.pop(0)

    async def ask_config(self, current: dict) -> dict:
        self.asked_with.append(dict(current))
        return dict(current) if self.config is None else dict(self.config)

    async def confirm_start(self) -> None:
        self.confirms += 1

    async def pause(self) -> None:
        self.pauses += 1

    async def phone(self) -> str:
        return self.phone_number

    async def code(self) -> str:
        return self.login_code

    async def password(self) -> str:
        return self.secret


class RecordingTheme:
    """Theme that remembers what was printed instead of printing it."""

    def __init__(self):
        self.lines: list[tuple[str, Any]] = []
        self.clears = 0

    def styled(self, text, tone=None):
        return text

    def echo(self, text, tone=None):
        self.lines.append((text, tone))

    def clear(self):
        self.clears += 1

    @property
    def text(self) -> str:
        return "\n".join(line for line, _ in self.lines)


class FakeMonitor:
    def __init__(self):
        self.calls: list[tuple] = []

    async def __call__(self, theme, client, config):
        self.calls.append((theme, client, config))


GOOD_CONFIG = {
    "api_id": 12345,
    "api_hash": "0123456789abcdef",
    "bot_token": "",
    "min_to_spend": 10,
    "max_to_spend": 50,
}


def write_config(settings: Settings, record: dict) -> None:
    settings.configPath.write_text(json.dumps(record, indent=2), encoding="utf-8")


# ── Fixtures ──


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(home=tmp_path, monitor="", splashMin=0, splashMax=0, debug=False)


@pytest.fixture
def theme() -> RecordingTheme:
    return RecordingTheme()


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def monitor() -> FakeMonitor:
    return FakeMonitor()


@pytest.fixture
def make_app(settings, theme, prompter, factory, monitor):
    """Build a SniperApp wired to fakes; keyword overrides replace any piece."""

    def build(**overrides):
        from starsniper.cli import SniperApp

        kwargs = dict(
            settings=settings,
            theme=theme,
            prompter=prompter,
            clientFactory=factory,
            monitor=monitor,
        )
        kwargs.update(overrides)

        with patch("starsniper.cli.SniperApp.setupLogging"):
            return SniperApp(**kwargs)

    return build


@pytest.fixture
def log_capture():
    """Capture loguru output for assertion. Yields a StringIO buffer."""
    buf = StringIO()
    handler_id = logger.add(buf, format="{level}: {message}", level="DEBUG")
    yield buf
    logger.remove(handler_id)
