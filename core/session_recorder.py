"""
Write finished timer sessions to the chosen note.
"""

from __future__ import annotations

from datetime import datetime

from core.capture_writer import append_to_note
from core.output_resolver import OutputResolver
from core.session import Destination
from shared.errors import CaptureError
from open_capture_core.open_capture_core import logger as app_logger

RECORD_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_record_line(start: datetime, end: datetime) -> str:
    return f"- {_local(start).strftime(RECORD_TIME_FORMAT)} - {_local(end).strftime(RECORD_TIME_FORMAT)}\n"


class SessionRecorder:
    """
    Best-effort recorder: every failure is logged and swallowed so that
    ending a session never depends on the note being writable.
    """

    def __init__(self, resolver: OutputResolver) -> None:
        self._resolver = resolver
        self._logger = app_logger.get_logger()

    def record(self, destination: Destination | str, start: datetime, end: datetime) -> bool:
        """Append the session window to ``destination``. Returns True on success."""
        line = format_record_line(start, end)
        try:
            path = self._resolver.resolve(destination, end)
            append_to_note(path, line)
        except (CaptureError, OSError) as exc:
            self._logger.warning("Failed to record timer session to {}: {}", destination, exc)
            return False
        self._logger.info("Recorded timer session to {}: {}", path, line.strip())
        return True


def _local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone()
