# tests/test_app.py
# Coordinator wiring between tray, engine, settings and command channel

import json
import uuid

import pytest

from core.app import AppCoordinator
from core.session import Destination, Phase
from core.settings import SettingsStore


@pytest.fixture
def coordinator(tmp_path, vault):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(
        json.dumps({"vaultPath": str(vault), "defaultDestination": "Inbox", "showTrayIcon": False}),
        encoding="utf-8",
    )
    app_coordinator = AppCoordinator(
        settings_store=SettingsStore(settings_path),
        server_name=f"open-capture-test-{uuid.uuid4().hex[:8]}",
    )
    app_coordinator.start()
    yield app_coordinator
    app_coordinator.shutdown()


def test_start_applies_default_destination(coordinator):
    coordinator.dispatcher.dispatch({"command": "start-timer", "args": ["triage"]})

    assert coordinator.engine.session.destination is Destination.INBOX


def test_timer_state_reaches_presentation(coordinator):
    received = []
    coordinator.presentation.stateBroadcast.connect(received.append)

    coordinator.dispatcher.dispatch({"command": "start-timer", "args": ["triage"]})

    assert received[-1]["running"] is True
    assert coordinator.presentation.text.endswith("- triage")


def test_shutdown_records_active_session(coordinator, vault):
    coordinator.engine.start("wrap up", Destination.INBOX)

    coordinator.shutdown()

    assert coordinator.manual_shutdown_requested is True
    assert coordinator.engine.phase is Phase.IDLE
    assert (vault / "Inbox" / "Inbox.md").read_text(encoding="utf-8").startswith("- ")


def test_settings_reload_picks_up_changes(coordinator):
    coordinator.settings_store.update_settings(default_destination=Destination.DAILY_NOTE)

    coordinator._reload_settings()
    coordinator.engine.start("next")

    assert coordinator.engine.session.destination is Destination.DAILY_NOTE
