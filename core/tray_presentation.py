"""
Tray-backed presentation surface for the timer indicator.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QSystemTrayIcon

from shared.errors import PresentationUnavailable

IDLE_STATUS_TEXT = "Timer idle"


class TrayPresentation(QObject):
    """
    Shows the indicator text in the tray tooltip and the menu's status line,
    and re-emits timer snapshots for any open window to pick up.
    """

    stateBroadcast = Signal(dict)
    indicatorChanged = Signal(str)

    def __init__(
        self,
        tray: QSystemTrayIcon,
        status_action: QAction,
        *,
        idle_tooltip: str,
        tray_available: Optional[Callable[[], bool]] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._tray = tray
        self._status_action = status_action
        self._idle_tooltip = idle_tooltip
        self._tray_available = tray_available or QSystemTrayIcon.isSystemTrayAvailable
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    def set_indicator_text(self, text: str) -> None:
        self._text = text
        self._status_action.setText(text or IDLE_STATUS_TEXT)
        self.indicatorChanged.emit(text)
        if not self._tray_available():
            raise PresentationUnavailable("System tray is not available.")
        self._tray.setToolTip(text or self._idle_tooltip)

    def broadcast(self, snapshot: Dict[str, Any]) -> None:
        self.stateBroadcast.emit(dict(snapshot))
