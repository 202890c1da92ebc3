"""
Command table for the capture runtime's IPC channel.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from core.capture_writer import CaptureWriter
from core.session import Destination
from core.settings import SettingsStore
from core.timer_engine import TimerEngine
from shared.errors import CaptureError
from open_capture_core.open_capture_core import logger as app_logger

_LOGGER = app_logger.get_logger()

_OBJECT_ARGUMENT_COMMANDS = {"update-settings"}


class CommandDispatcher:
    """
    Maps command names (``start-timer``, ``append-to-inbox``...) to the engine,
    the capture writer and the settings store. Always answers with a dict;
    malformed requests produce ``{"error": ...}`` instead of raising.
    """

    def __init__(self, engine: TimerEngine, writer: CaptureWriter, settings_store: SettingsStore) -> None:
        self._engine = engine
        self._writer = writer
        self._settings_store = settings_store
        self._handlers: Dict[str, Callable[..., Dict[str, Any]]] = {
            "start-timer": self._start_timer,
            "stop-timer": self._stop_timer,
            "toggle-timer": self._toggle_timer,
            "toggle-pause-timer": self._toggle_pause_timer,
            "get-timer-state": self._get_timer_state,
            "append-to-inbox": self._append_to_inbox,
            "append-to-daily-note": self._append_to_daily_note,
            "get-settings": self._get_settings,
            "update-settings": self._update_settings,
        }

    @property
    def command_names(self) -> List[str]:
        return sorted(self._handlers)

    def dispatch(self, request: Any) -> Dict[str, Any]:
        if not isinstance(request, dict):
            return {"error": "Request must be a JSON object."}
        name = request.get("command")
        args = request.get("args") or []
        if not isinstance(name, str):
            return {"error": "Command name must be a string."}
        if not isinstance(args, list):
            return {"error": "Command arguments must be a list."}

        handler = self._handlers.get(name)
        if handler is None:
            return {"error": f"Unknown command '{name}'."}

        # update-settings takes a JSON object; every other argument is text.
        if name not in _OBJECT_ARGUMENT_COMMANDS and not all(arg is None or isinstance(arg, str) for arg in args):
            _LOGGER.warning("Rejected command {}: non-text argument", name)
            return {"error": f"Arguments for {name} must be strings."}

        _LOGGER.debug("Dispatching command {} with {} argument(s)", name, len(args))
        try:
            return handler(*args)
        except TypeError as exc:
            _LOGGER.warning("Rejected command {}: {}", name, exc)
            return {"error": f"Invalid arguments for {name}."}
        except ValueError as exc:
            _LOGGER.warning("Rejected command {}: {}", name, exc)
            return {"error": str(exc)}

    def _start_timer(self, description: str = "", destination: str | None = None) -> Dict[str, Any]:
        return self._engine.start(description, destination)

    def _stop_timer(self) -> Dict[str, Any]:
        return self._engine.stop()

    def _toggle_timer(self, description: str = "", destination: str | None = None) -> Dict[str, Any]:
        return self._engine.toggle(description, destination)

    def _toggle_pause_timer(self, description: str | None = None, destination: str | None = None) -> Dict[str, Any]:
        return self._engine.toggle_pause(description, destination)

    def _get_timer_state(self) -> Dict[str, Any]:
        return self._engine.query().to_dict()

    def _append_to_inbox(self, text: str) -> Dict[str, Any]:
        return self._append(text, Destination.INBOX)

    def _append_to_daily_note(self, text: str) -> Dict[str, Any]:
        return self._append(text, Destination.DAILY_NOTE)

    def _append(self, text: str, destination: Destination) -> Dict[str, Any]:
        try:
            self._writer.append(text, destination)
        except CaptureError as exc:
            _LOGGER.error("Failed to append to {}: {}", destination.value, exc)
            return {"success": False, "error": str(exc)}
        return {"success": True}

    def _get_settings(self) -> Dict[str, Any]:
        return self._settings_store.settings.to_json()

    def _update_settings(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(changes, dict):
            raise ValueError("Settings update must be a JSON object.")
        return self._settings_store.update_from_json(changes).to_json()
