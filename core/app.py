"""
Application coordinator wiring the tray, the timer engine and the command channel.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from PySide6.QtCore import QObject, QTimer
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from core.capture_writer import CaptureWriter
from core.command_server import SERVER_NAME, CommandServer
from core.commands import CommandDispatcher
from core.indicator import IndicatorPublisher
from core.output_resolver import OutputResolver
from core.session import Phase
from core.session_recorder import SessionRecorder
from core.settings import CaptureSettings, SettingsStore
from core.timer_engine import TimerEngine
from core.tray_presentation import IDLE_STATUS_TEXT, TrayPresentation
from open_capture_core.open_capture_core import logger as app_logger

APP_NAME = "Open Capture"
APP_VERSION = "1.0.0"
SETTINGS_REFRESH_INTERVAL_MS = 15000


@dataclass
class AppCoordinator(QObject):
    settings_store: SettingsStore = field(default_factory=SettingsStore)
    server_name: str = SERVER_NAME

    def __post_init__(self) -> None:
        super().__init__()
        self._logger = app_logger.get_logger()
        self._manual_shutdown_requested = False

        self._tray = QSystemTrayIcon(self)
        tray_icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView)
        self._tray.setIcon(tray_icon)
        self._tray.setToolTip(f"{APP_NAME} v{APP_VERSION}")

        menu = QMenu()
        self._status_action = QAction(IDLE_STATUS_TEXT, menu)
        self._status_action.setEnabled(False)
        start_action = QAction("Start Timer", menu)
        pause_action = QAction("Pause / Resume Timer", menu)
        stop_action = QAction("Stop Timer", menu)
        exit_action = QAction("Exit", menu)
        menu.addAction(self._status_action)
        menu.addSeparator()
        menu.addAction(start_action)
        menu.addAction(pause_action)
        menu.addAction(stop_action)
        menu.addSeparator()
        menu.addAction(exit_action)
        self._menu = menu
        self._tray.setContextMenu(menu)

        self._presentation = TrayPresentation(
            self._tray,
            self._status_action,
            idle_tooltip=f"{APP_NAME} v{APP_VERSION}",
            parent=self,
        )
        resolver = OutputResolver(self.settings_store)
        self._engine = TimerEngine(
            IndicatorPublisher(self._presentation),
            SessionRecorder(resolver),
            parent=self,
        )
        self._dispatcher = CommandDispatcher(self._engine, CaptureWriter(resolver), self.settings_store)
        self._server = CommandServer(self._dispatcher, self.server_name, parent=self)

        start_action.triggered.connect(self._start_from_menu)
        pause_action.triggered.connect(self._toggle_pause_from_menu)
        stop_action.triggered.connect(self._stop_from_menu)
        exit_action.triggered.connect(self.shutdown)

        self._settings: CaptureSettings = CaptureSettings()
        self._settings_timer = QTimer(self)
        self._settings_timer.setInterval(SETTINGS_REFRESH_INTERVAL_MS)
        self._settings_timer.timeout.connect(self._reload_settings)

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def presentation(self) -> TrayPresentation:
        """Open windows connect to ``presentation.stateBroadcast`` for live timer state."""
        return self._presentation

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    def start(self) -> None:
        self._logger.info("Starting Open Capture. Settings file: {}", self.settings_store.path)
        self._apply_settings(self.settings_store.read_settings(), initial=True)
        self._server.listen()
        self._settings_timer.start()

    def shutdown(self) -> None:
        self._logger.info("Shutting down application on user request.")
        self._manual_shutdown_requested = True
        if self._engine.phase is not Phase.IDLE:
            self._logger.info("Recording the active timer session before exit.")
            self._engine.stop()
        self._settings_timer.stop()
        self._server.close()
        self._tray.hide()
        app = QApplication.instance()
        if app is not None:
            app.quit()

    def _start_from_menu(self) -> None:
        self._engine.start()

    def _toggle_pause_from_menu(self) -> None:
        self._engine.toggle_pause()

    def _stop_from_menu(self) -> None:
        self._engine.stop()

    def _reload_settings(self) -> None:
        new_settings = self.settings_store.read_settings()
        if new_settings != self._settings:
            self._logger.info("Detected settings change. Applying updates.")
            self._apply_settings(new_settings)

    def _apply_settings(self, settings: CaptureSettings, *, initial: bool = False) -> None:
        previous: Optional[CaptureSettings] = None if initial else self._settings
        self._settings = settings

        if settings.show_tray_icon:
            if not self._tray.isVisible():
                self._tray.show()
        elif self._tray.isVisible():
            self._tray.hide()

        if previous is None or previous.default_destination != settings.default_destination:
            self._engine.set_default_destination(settings.default_destination)

        if not settings.vault_path:
            self._logger.warning("No vault selected; captures and timer records will be skipped.")
        elif previous is not None and previous.vault_path != settings.vault_path:
            self._logger.info("Vault changed to {}", settings.vault_path)
