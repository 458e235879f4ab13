"""Live connection state owned by the running app."""
from __future__ import annotations

import dataclasses
import enum
from typing import Any


class ConnectionStatus(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclasses.dataclass
class SessionState:
    """Client handle plus the details we last fetched through it.

    Mutated only from the menu loop task, so no locking. ``status`` is
    derived from the handle itself rather than tracked as a separate flag
    because the client can drop its connection underneath us.
    """

    client: Any = None
    username: str = "N/A"
    balance: float = 0

    @property
    def status(self) -> ConnectionStatus:
        if self.client is not None and self.client.is_connected():
            return ConnectionStatus.CONNECTED

        return ConnectionStatus.DISCONNECTED

    @property
    def connected(self) -> bool:
        return self.status is ConnectionStatus.CONNECTED

    def attach(self, client: Any, username: str, balance: float) -> None:
        self.client = client
        self.username = username
        self.balance = balance

    def reset(self) -> None:
        self.client = None
        self.username = "N/A"
        self.balance = 0

    def describe(self) -> str:
        if self.connected:
            return f"Connected as {self.username} (Stars: {self.balance})"

        return "Disconnected"
