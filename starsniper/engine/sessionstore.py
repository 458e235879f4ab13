"""Single-file persistence for the opaque Telegram session string."""
from __future__ import annotations

import pathlib
from dataclasses import dataclass

from loguru import logger

from starsniper.engine.protocols import Theme
from starsniper.engine.theme import Tone


@dataclass(slots=True)
class SessionStore:
    path: pathlib.Path
    theme: Theme

    def read(self) -> str:
        """Return the saved session string, or "" if there isn't a usable one.

        A missing file is the normal first-run case and stays quiet.
        """
        try:
            return self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return ""
        except OSError as e:
            self.theme.echo(f"[TG] Warning: Could not read session file: {e}", Tone.WARN)
            logger.warning("Could not read session file: {}", e)
            return ""

    def save(self, token: str) -> bool:
        try:
            self.path.write_text(token, encoding="utf-8")
        except OSError as e:
            self.theme.echo(f"[TG] Could not save session file: {e}", Tone.ERROR)
            logger.error("Could not save session file: {}", e)
            return False

        logger.info("Session saved to {}", self.path.name)
        return True
