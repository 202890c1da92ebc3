"""
Local socket channel through which hotkey scripts drive the running instance.

Each request is one line of JSON: ``{"command": "toggle-timer", "args": ["write report"]}``.
The server answers every line with one line of JSON.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QObject
from PySide6.QtNetwork import QLocalServer, QLocalSocket

from core.commands import CommandDispatcher
from open_capture_core.open_capture_core import logger as app_logger

SERVER_NAME = "open-capture-core"
CLIENT_TIMEOUT_MS = 2000


class CommandServer(QObject):
    def __init__(self, dispatcher: CommandDispatcher, name: str = SERVER_NAME, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self._dispatcher = dispatcher
        self._name = name
        self._server = QLocalServer(self)
        self._server.newConnection.connect(self._on_new_connection)  # type: ignore[arg-type]

    @property
    def name(self) -> str:
        return self._name

    def listen(self) -> bool:
        """Start serving. A stale socket left by a crashed instance is removed once."""
        if self._server.isListening():
            return True
        if not self._server.listen(self._name):
            QLocalServer.removeServer(self._name)
            if not self._server.listen(self._name):
                self._logger.error("Unable to open command channel {}: {}", self._name, self._server.errorString())
                return False
        self._logger.info("Listening for commands on {}", self._server.fullServerName())
        return True

    def close(self) -> None:
        if self._server.isListening():
            self._server.close()

    def handle_line(self, raw: str) -> Dict[str, Any]:
        try:
            request = json.loads(raw)
        except json.JSONDecodeError as exc:
            return {"error": f"Malformed request: {exc.msg}"}
        return self._dispatcher.dispatch(request)

    def _on_new_connection(self) -> None:
        while self._server.hasPendingConnections():
            socket = self._server.nextPendingConnection()
            socket.readyRead.connect(lambda s=socket: self._on_ready_read(s))  # type: ignore[arg-type]
            socket.disconnected.connect(socket.deleteLater)  # type: ignore[arg-type]

    def _on_ready_read(self, socket: QLocalSocket) -> None:
        while socket.canReadLine():
            raw = bytes(socket.readLine()).decode("utf-8").strip()
            if not raw:
                continue
            response = self.handle_line(raw)
            socket.write((json.dumps(response) + "\n").encode("utf-8"))
            socket.flush()


def is_instance_running(name: str = SERVER_NAME, timeout_ms: int = 500) -> bool:
    socket = QLocalSocket()
    socket.connectToServer(name)
    connected = socket.waitForConnected(timeout_ms)
    if connected:
        socket.disconnectFromServer()
    return connected


def send_command(
    command: str,
    args: Optional[List[Any]] = None,
    *,
    name: str = SERVER_NAME,
    timeout_ms: int = CLIENT_TIMEOUT_MS,
) -> Optional[Dict[str, Any]]:
    """
    Send one command to a running instance and wait for its answer.

    Returns ``None`` when no instance is listening or it does not answer in time.
    """
    socket = QLocalSocket()
    socket.connectToServer(name)
    if not socket.waitForConnected(timeout_ms):
        return None

    payload = json.dumps({"command": command, "args": list(args or [])}) + "\n"
    socket.write(payload.encode("utf-8"))
    socket.waitForBytesWritten(timeout_ms)

    while not socket.canReadLine():
        if not socket.waitForReadyRead(timeout_ms):
            socket.disconnectFromServer()
            return None
    response = json.loads(bytes(socket.readLine()).decode("utf-8"))
    socket.disconnectFromServer()
    return response
