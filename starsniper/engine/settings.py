"""Runtime settings read once from the environment at startup."""
from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field


def _envfloat(name: str, default: float) -> float:
    return float(os.getenv(name, default))


@dataclass(slots=True)
class Settings:
    # directory holding config, session, and log files
    home: pathlib.Path = field(
        default_factory=lambda: pathlib.Path(os.getenv("STARSNIPER_HOME", "."))
    )

    # "package.module:attribute" of the market monitor we hand the live client to
    monitor: str = field(default_factory=lambda: os.getenv("STARSNIPER_MONITOR", ""))

    # splash progress bar runs for a random duration inside this range (seconds)
    splashMin: float = field(default_factory=lambda: _envfloat("STARSNIPER_SPLASH_MIN", 35))
    splashMax: float = field(default_factory=lambda: _envfloat("STARSNIPER_SPLASH_MAX", 65))

    # environment 1 true; 0 false; mirror every log record to the console too
    debug: bool = field(
        default_factory=lambda: bool(int(os.getenv("STARSNIPER_DEBUG", 0)))
    )

    @property
    def configPath(self) -> pathlib.Path:
        return self.home / "config.json"

    @property
    def backupPath(self) -> pathlib.Path:
        return self.home / "config_backup.json"

    @property
    def sessionPath(self) -> pathlib.Path:
        return self.home / "session.txt"

    @property
    def logPath(self) -> pathlib.Path:
        return self.home / "sniper_bot.log"

    @property
    def clientLogPath(self) -> pathlib.Path:
        """Where the Telegram client library's own stdlib logging ends up."""
        return self.home / "telethon.log"
