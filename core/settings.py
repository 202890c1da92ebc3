"""
JSON-backed configuration for the Open Capture runtime.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from core.session import Destination
from open_capture_core.open_capture_core import logger as app_logger

_LOGGER = app_logger.get_logger()

DEFAULT_SETTINGS_PATH = Path(
    os.environ.get(
        "OPEN_CAPTURE_SETTINGS",
        str(Path.home() / ".open-capture" / "settings.json"),
    )
)
DEFAULT_INBOX_TEMPLATE = "Inbox/Inbox.md"
DEFAULT_DAILY_NOTE_TEMPLATE = "Daily Notes/{{date:YYYY-MM-DD}}.md"

# attribute name -> JSON key
_JSON_KEYS = {
    "vault_path": "vaultPath",
    "inbox_template": "inboxTemplate",
    "daily_note_template": "dailyNoteTemplate",
    "default_destination": "defaultDestination",
    "show_tray_icon": "showTrayIcon",
}


@dataclass(eq=True)
class CaptureSettings:
    vault_path: str = ""
    inbox_template: str = DEFAULT_INBOX_TEMPLATE
    daily_note_template: str = DEFAULT_DAILY_NOTE_TEMPLATE
    default_destination: Destination = Destination.DAILY_NOTE
    show_tray_icon: bool = True

    def to_json(self) -> Dict[str, Any]:
        data = asdict(self)
        data["default_destination"] = self.default_destination.value
        return {_JSON_KEYS[name]: value for name, value in data.items()}


class SettingsStore:
    """Loads persisted settings from disk and replaces invalid data with defaults."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path or DEFAULT_SETTINGS_PATH)
        self._settings: Optional[CaptureSettings] = None

    def read_settings(self) -> CaptureSettings:
        """Re-read the settings file and cache the result."""
        raw = self._load_raw()
        defaults = CaptureSettings()
        self._settings = CaptureSettings(
            vault_path=self._read_str(raw, "vault_path", defaults.vault_path),
            inbox_template=self._read_template(raw, "inbox_template", defaults.inbox_template),
            daily_note_template=self._read_template(raw, "daily_note_template", defaults.daily_note_template),
            default_destination=self._read_destination(raw, defaults.default_destination),
            show_tray_icon=self._read_bool(raw, "show_tray_icon", defaults.show_tray_icon),
        )
        return self._settings

    @property
    def settings(self) -> CaptureSettings:
        if self._settings is None:
            return self.read_settings()
        return self._settings

    def update_settings(self, **changes: Any) -> CaptureSettings:
        """Merge ``changes`` into the current settings and persist them."""
        if "default_destination" in changes:
            changes["default_destination"] = Destination.parse(changes["default_destination"])
        unknown = set(changes) - set(_JSON_KEYS)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            expected = bool if name == "show_tray_icon" else (Destination if name == "default_destination" else str)
            if not isinstance(value, expected):
                raise ValueError(f"Setting {_JSON_KEYS[name]} must be of type {expected.__name__}.")
        self._settings = replace(self.settings, **changes)
        self._save()
        return self._settings

    def update_from_json(self, changes: Dict[str, Any]) -> CaptureSettings:
        """Same as ``update_settings`` but keyed by the JSON names (``vaultPath``...)."""
        attribute_names = {json_key: name for name, json_key in _JSON_KEYS.items()}
        unknown = set(changes) - set(attribute_names)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return self.update_settings(**{attribute_names[key]: value for key, value in changes.items()})

    def get_vault_root(self) -> Optional[Path]:
        vault_path = self.settings.vault_path.strip()
        if not vault_path:
            return None
        return Path(vault_path).expanduser()

    def get_output_template(self, destination: Destination) -> str:
        if destination is Destination.INBOX:
            return self.settings.inbox_template
        return self.settings.daily_note_template

    def _load_raw(self) -> Dict[str, Any]:
        try:
            contents = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            _LOGGER.warning("Unable to read settings at {}: {}. Using defaults.", self.path, exc)
            return {}

        try:
            raw = json.loads(contents)
        except json.JSONDecodeError as exc:
            _LOGGER.warning("Settings file {} is not valid JSON: {}. Using defaults.", self.path, exc)
            return {}

        if not isinstance(raw, dict):
            _LOGGER.warning("Settings root in {} must be a JSON object. Using defaults.", self.path)
            return {}
        return raw

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.settings.to_json(), indent=2), encoding="utf-8")
        except OSError as exc:
            _LOGGER.error("Failed to save settings to {}: {}", self.path, exc)

    def _read_str(self, raw: Dict[str, Any], name: str, default: str) -> str:
        value = raw.get(_JSON_KEYS[name])
        if value is None:
            return default
        if not isinstance(value, str):
            _LOGGER.warning("Setting {} has unexpected type {}.", _JSON_KEYS[name], type(value).__name__)
            return default
        return value

    def _read_template(self, raw: Dict[str, Any], name: str, default: str) -> str:
        value = self._read_str(raw, name, default)
        if not value.strip():
            _LOGGER.warning("Setting {} is blank; falling back to {}.", _JSON_KEYS[name], default)
            return default
        return value

    def _read_bool(self, raw: Dict[str, Any], name: str, default: bool) -> bool:
        value = raw.get(_JSON_KEYS[name])
        if value is None:
            return default
        if not isinstance(value, bool):
            _LOGGER.warning("Setting {} has unexpected type {}.", _JSON_KEYS[name], type(value).__name__)
            return default
        return value

    def _read_destination(self, raw: Dict[str, Any], default: Destination) -> Destination:
        value = raw.get(_JSON_KEYS["default_destination"])
        if value is None:
            return default
        try:
            return Destination.parse(value) or default
        except ValueError:
            _LOGGER.warning("Unknown default destination {!r} in settings.", value)
            return default
