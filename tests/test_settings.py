# tests/test_settings.py
# Settings persistence, validation and collaborator accessors

import json

import pytest

from core.session import Destination
from core.settings import DEFAULT_DAILY_NOTE_TEMPLATE, DEFAULT_INBOX_TEMPLATE, CaptureSettings, SettingsStore


def test_missing_file_yields_defaults(tmp_path):
    store = SettingsStore(tmp_path / "missing.json")

    assert store.read_settings() == CaptureSettings()
    assert store.get_vault_root() is None


def test_invalid_json_falls_back_to_defaults(tmp_path, log_records):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert SettingsStore(path).read_settings() == CaptureSettings()
    assert any(level == "WARNING" and "not valid JSON" in message for level, message in log_records)


def test_invalid_values_are_replaced_individually(tmp_path, log_records):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "vaultPath": "/notes/vault",
                "inboxTemplate": 42,
                "dailyNoteTemplate": "   ",
                "defaultDestination": "Elsewhere",
                "showTrayIcon": "yes",
            }
        ),
        encoding="utf-8",
    )

    settings = SettingsStore(path).read_settings()

    assert settings.vault_path == "/notes/vault"
    assert settings.inbox_template == DEFAULT_INBOX_TEMPLATE
    assert settings.daily_note_template == DEFAULT_DAILY_NOTE_TEMPLATE
    assert settings.default_destination is Destination.DAILY_NOTE
    assert settings.show_tray_icon is True
    assert len([level for level, _ in log_records if level == "WARNING"]) == 4


def test_update_settings_persists_json_keys(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = SettingsStore(path)

    store.update_settings(vault_path="/notes/vault", default_destination="Inbox")

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["vaultPath"] == "/notes/vault"
    assert saved["defaultDestination"] == "Inbox"
    assert SettingsStore(path).read_settings().default_destination is Destination.INBOX


def test_update_from_json_maps_keys(tmp_path):
    store = SettingsStore(tmp_path / "settings.json")

    settings = store.update_from_json({"vaultPath": "/v", "showTrayIcon": False})

    assert settings.vault_path == "/v"
    assert settings.show_tray_icon is False


@pytest.mark.parametrize(
    "changes",
    [{"vaultPaht": "/v"}, {"showTrayIcon": "no"}, {"defaultDestination": "Elsewhere"}],
)
def test_update_from_json_rejects_bad_input(tmp_path, changes):
    store = SettingsStore(tmp_path / "settings.json")

    with pytest.raises(ValueError):
        store.update_from_json(changes)
    assert not (tmp_path / "settings.json").exists()


def test_collaborator_accessors(tmp_path):
    store = SettingsStore(tmp_path / "settings.json")
    store.update_settings(vault_path="~/vault", inbox_template="Capture.md")

    assert store.get_vault_root().name == "vault"
    assert "~" not in str(store.get_vault_root())
    assert store.get_output_template(Destination.INBOX) == "Capture.md"
    assert store.get_output_template(Destination.DAILY_NOTE) == DEFAULT_DAILY_NOTE_TEMPLATE
