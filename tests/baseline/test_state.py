"""Tests for starsniper.engine.state."""
from starsniper.engine.state import ConnectionStatus, SessionState
from tests.conftest import FakeTelegramClient


def live_client():
    client = FakeTelegramClient()
    client._connected = True
    return client


class TestSessionState:
    def test_defaults(self):
        state = SessionState()
        assert state.client is None
        assert state.username == "N/A"
        assert state.balance == 0
        assert state.status is ConnectionStatus.DISCONNECTED

    def test_attached_live_client_is_connected(self):
        state = SessionState()
        state.attach(live_client(), "@sniper", 120)

        assert state.status is ConnectionStatus.CONNECTED
        assert state.connected
        assert state.describe() == "Connected as @sniper (Stars: 120)"

    def test_dropped_connection_reports_disconnected(self):
        client = live_client()
        state = SessionState()
        state.attach(client, "@sniper", 120)

        client._connected = False

        assert state.status is ConnectionStatus.DISCONNECTED
        assert state.describe() == "Disconnected"

    def test_reset(self):
        state = SessionState()
        state.attach(live_client(), "@sniper", 120)
        state.reset()

        assert state == SessionState()
