"""
Entry point for the Open Capture tray application.

``open-capture`` launches the tray runtime. ``open-capture <command> [args...]``
forwards a command (``toggle-timer``, ``get-timer-state``...) to the running
instance, which is how global hotkey tools drive the timer.
"""

from __future__ import annotations

import json
import sys
import time
from typing import Any, Iterable, List, Optional, Tuple

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from core.app import AppCoordinator
from core.command_server import is_instance_running, send_command
from open_capture_core.open_capture_core import logger as app_logger

_LOGGER = app_logger.get_logger()


def _run_application_once(argv: Iterable[str]) -> Tuple[int, bool]:
    """Start the Qt application once and report whether shutdown was intentional."""
    app = QApplication.instance() or QApplication(list(argv))
    app.setQuitOnLastWindowClosed(False)
    if is_instance_running():
        _LOGGER.debug("Open Capture instance already running; exiting silently.")
        return 0, True
    coordinator = AppCoordinator()
    coordinator.start()
    exit_code = app.exec()
    manual_shutdown = getattr(coordinator, "manual_shutdown_requested", False)
    return exit_code, bool(manual_shutdown)


def _parse_argument(value: str) -> Any:
    if value.startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def forward_command(command: str, args: List[str]) -> int:
    """Send ``command`` to the running instance and print its JSON answer."""
    _app = QCoreApplication.instance() or QCoreApplication([sys.argv[0]])
    response = send_command(command, [_parse_argument(arg) for arg in args])
    if response is None:
        print("Open Capture is not running.", file=sys.stderr)
        return 1
    print(json.dumps(response))
    return 1 if "error" in response else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Launch the application with single-instance + recovery safeguards."""
    argv = list(sys.argv if argv is None else argv)
    if len(argv) > 1:
        return forward_command(argv[1], argv[2:])

    backoff_seconds = 2
    max_backoff = 30

    while True:
        try:
            exit_code, manual = _run_application_once(argv)
        except Exception:  # pragma: no cover - crash guard
            _LOGGER.exception("Open Capture crashed; attempting automatic recovery.")
            exit_code = 1
            manual = False

        if manual:
            return exit_code

        _LOGGER.warning(
            "Open Capture exited unexpectedly (code={}). Restarting in {} seconds.",
            exit_code,
            backoff_seconds,
        )
        time.sleep(backoff_seconds)
        backoff_seconds = min(backoff_seconds * 2, max_backoff)


if __name__ == "__main__":
    raise SystemExit(main())
